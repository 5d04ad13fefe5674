"""Domain data models."""
from .paper import Paper
from .prompt_template import OutputFormat, PromptScene, PromptTemplate, PromptTemplatesConfig
from .model_config import ModelsConfig
from .usage import RequestType, UsageRecord
from .chat import ChatTurnResult, StoredChatMessage

__all__ = [
    "Paper",
    "OutputFormat",
    "PromptScene",
    "PromptTemplate",
    "PromptTemplatesConfig",
    "ModelsConfig",
    "RequestType",
    "UsageRecord",
    "StoredChatMessage",
    "ChatTurnResult",
]
