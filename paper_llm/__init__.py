"""paper_llm: multi-provider LLM integration core for paper-grounded reading and chat."""

__version__ = "0.1.0"
