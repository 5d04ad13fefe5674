"""
Provider Adapters

One adapter per wire protocol family.
"""
from .openai_adapter import OpenAIAdapter
from .openrouter_adapter import OpenRouterAdapter
from .anthropic_adapter import AnthropicAdapter
from .gemini_adapter import GeminiAdapter

__all__ = [
    "OpenAIAdapter",
    "OpenRouterAdapter",
    "AnthropicAdapter",
    "GeminiAdapter",
]
