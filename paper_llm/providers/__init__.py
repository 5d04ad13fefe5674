"""
LLM Provider Abstraction Layer

This package provides a unified interface for talking to different LLM
wire protocols (OpenAI-compatible, Anthropic Messages, Gemini generateContent).

Key components:
- types: Data models and enums
- errors: Error taxonomy with user-facing messages
- builtin: Preset provider definitions
- registry: Provider type -> adapter lookup
- router: Credential lookup + adapter dispatch
- streaming: SSE decoding and cancellable stream sessions
- adapters: Protocol-specific implementations

Usage:
    from paper_llm.providers import LLMRouter, ChatMessage, MessageRole
    from paper_llm.services.secret_store import YamlSecretStore

    router = LLMRouter(YamlSecretStore())
    messages = [ChatMessage(role=MessageRole.USER, content="Summarize this paper")]

    # Whole reply
    reply = await router.complete(messages, provider, model)

    # Incremental fragments
    async for chunk in router.complete_stream(messages, provider, model):
        print(chunk, end="")
"""
from .types import (
    ApiProtocol,
    ProviderType,
    MessageRole,
    ChatMessage,
    normalize_messages,
    TokenUsage,
    ModelCapabilities,
    ModelDefinition,
    ProviderDefinition,
    ProviderConfig,
    ModelConfig,
    LLMResponse,
    ConnectivityResult,
)
from .errors import (
    LLMError,
    InvalidURLError,
    BadResponseError,
    InvalidResponseError,
    MissingCredentialError,
    NetworkError,
    UnsupportedProviderError,
    LLMNotConfiguredError,
    describe_error,
)
from .builtin import (
    BUILTIN_PROVIDERS,
    get_builtin_provider,
    get_all_builtin_providers,
    is_builtin_provider,
)
from .base import BaseLLMAdapter
from .registry import AdapterRegistry
from .router import LLMRouter
from .streaming import StreamSession, StreamState, StreamResult

__all__ = [
    # Types
    "ApiProtocol",
    "ProviderType",
    "MessageRole",
    "ChatMessage",
    "normalize_messages",
    "TokenUsage",
    "ModelCapabilities",
    "ModelDefinition",
    "ProviderDefinition",
    "ProviderConfig",
    "ModelConfig",
    "LLMResponse",
    "ConnectivityResult",
    # Errors
    "LLMError",
    "InvalidURLError",
    "BadResponseError",
    "InvalidResponseError",
    "MissingCredentialError",
    "NetworkError",
    "UnsupportedProviderError",
    "LLMNotConfiguredError",
    "describe_error",
    # Builtin
    "BUILTIN_PROVIDERS",
    "get_builtin_provider",
    "get_all_builtin_providers",
    "is_builtin_provider",
    # Adapters / routing
    "BaseLLMAdapter",
    "AdapterRegistry",
    "LLMRouter",
    # Streaming
    "StreamSession",
    "StreamState",
    "StreamResult",
]
