"""
Adapter Registry

Maps provider types to their wire-protocol adapters without text matching.
"""
import logging
from typing import Dict, Type

from .base import BaseLLMAdapter
from .errors import UnsupportedProviderError
from .types import ProviderType
from .adapters import (
    AnthropicAdapter,
    GeminiAdapter,
    OpenAIAdapter,
    OpenRouterAdapter,
)

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Adapter registry.

    Every ProviderType maps to exactly one adapter class, and the adapter
    class names its protocol family. The table is closed: a provider type
    missing from it is a configuration error, not a silent fallback.
    """

    _adapters: Dict[ProviderType, Type[BaseLLMAdapter]] = {
        ProviderType.OPENAI: OpenAIAdapter,
        ProviderType.DEEPSEEK: OpenAIAdapter,
        ProviderType.CUSTOM_OPENAI: OpenAIAdapter,
        ProviderType.ZHIPU: OpenAIAdapter,
        ProviderType.DASHSCOPE: OpenAIAdapter,
        ProviderType.MINIMAX: OpenAIAdapter,
        ProviderType.OPENROUTER: OpenRouterAdapter,
        ProviderType.ANTHROPIC: AnthropicAdapter,
        ProviderType.GOOGLE: GeminiAdapter,
    }

    @classmethod
    def adapter_class(cls, provider_type: ProviderType) -> Type[BaseLLMAdapter]:
        """
        Get the adapter class for a provider type.

        Raises:
            UnsupportedProviderError: if the type has no registered adapter
        """
        adapter_class = cls._adapters.get(provider_type)
        if adapter_class is None:
            raise UnsupportedProviderError(f"No adapter registered for provider type {provider_type!r}")
        logger.debug(f"Using {adapter_class.__name__} for {provider_type.value}")
        return adapter_class
