"""
Provider Types and Data Models

Defines enums and Pydantic models for the LLM provider abstraction layer.
"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from langchain_core.messages import BaseMessage
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiProtocol(str, Enum):
    """Wire protocol families handled by the adapters"""
    OPENAI = "openai"           # /chat/completions and compatible APIs
    ANTHROPIC = "anthropic"     # Anthropic Messages API
    GEMINI = "gemini"           # Google generateContent API


class ProviderType(str, Enum):
    """Provider kinds a user can configure"""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    DEEPSEEK = "deepseek"
    OPENROUTER = "openRouter"
    CUSTOM_OPENAI = "customOpenAI"
    ZHIPU = "zhipu"
    DASHSCOPE = "dashscope"
    MINIMAX = "minimax"

    @property
    def display_name(self) -> str:
        return _PROVIDER_DISPLAY_NAMES[self]


_PROVIDER_DISPLAY_NAMES = {
    ProviderType.OPENAI: "OpenAI",
    ProviderType.ANTHROPIC: "Anthropic (Claude)",
    ProviderType.GOOGLE: "Google (Gemini)",
    ProviderType.DEEPSEEK: "DeepSeek",
    ProviderType.OPENROUTER: "OpenRouter",
    ProviderType.CUSTOM_OPENAI: "自定义 (OpenAI 兼容)",
    ProviderType.ZHIPU: "智谱 (GLM)",
    ProviderType.DASHSCOPE: "通义千问 (DashScope)",
    ProviderType.MINIMAX: "Minimax",
}


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One conversation turn as sent over the wire."""
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

    def to_wire(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


# LangChain message.type -> role
_LANGCHAIN_ROLES = {
    "system": MessageRole.SYSTEM,
    "human": MessageRole.USER,
    "user": MessageRole.USER,
    "ai": MessageRole.ASSISTANT,
    "assistant": MessageRole.ASSISTANT,
}


def _langchain_text(content: Any) -> str:
    """Flatten LangChain content (plain string or typed blocks) to text."""
    if isinstance(content, str):
        return content
    parts: List[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type", "text") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def normalize_messages(messages: Iterable[Any]) -> List[ChatMessage]:
    """
    Convert caller messages into ChatMessage values, preserving order.

    Accepts ChatMessage instances, ``{"role", "content"}`` dicts and
    LangChain messages (SystemMessage, HumanMessage, AIMessage).
    """
    normalized: List[ChatMessage] = []
    for message in messages:
        if isinstance(message, ChatMessage):
            normalized.append(message)
        elif isinstance(message, BaseMessage):
            role = _LANGCHAIN_ROLES.get(message.type)
            if role is None:
                raise ValueError(f"Unsupported message type: {message.type}")
            content = _langchain_text(message.content)
            normalized.append(ChatMessage(role=role, content=content))
        elif isinstance(message, dict):
            normalized.append(ChatMessage(role=message["role"], content=message.get("content") or ""))
        else:
            raise TypeError(f"Unsupported message object: {type(message)!r}")
    return normalized


class TokenUsage(BaseModel):
    """Token usage as reported by the provider."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["TokenUsage"]:
        """Create TokenUsage from an OpenAI or Anthropic style usage dict."""
        if not data:
            return None
        return cls(
            input_tokens=data.get("prompt_tokens", data.get("input_tokens", 0)) or 0,
            output_tokens=data.get("completion_tokens", data.get("output_tokens", 0)) or 0,
        )


class ModelCapabilities(BaseModel):
    """Model capability declaration"""
    text_input: bool = Field(default=True, description="Accepts text input")
    text_output: bool = Field(default=True, description="Produces text output")
    image_input: bool = Field(default=False, description="Supports image input")
    image_output: bool = Field(default=False, description="Supports image generation")
    pdf_input: bool = Field(default=False, description="Accepts a PDF file as input")
    function_calling: bool = Field(default=False, description="Supports function/tool calling")
    streaming: bool = Field(default=True, description="Supports streaming output")
    json_mode: bool = Field(default=False, description="Supports JSON output mode")
    reasoning: bool = Field(default=False, description="Supports thinking/reasoning mode")


class ModelDefinition(BaseModel):
    """Preset model definition (minimal info for builtin providers)"""
    id: str = Field(..., description="Model ID (e.g., deepseek-chat)")
    name: str = Field(..., description="Display name")


class ProviderDefinition(BaseModel):
    """
    Built-in provider definition.

    Used to seed provider configurations on first run.
    """
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    provider_type: ProviderType = Field(..., description="Provider kind")
    base_url: str = Field(..., description="Default API base URL")
    builtin_models: List[ModelDefinition] = Field(
        default_factory=list,
        description="Pre-defined models for this provider"
    )
    supports_model_discovery: bool = Field(default=False, description="Model list can be fetched")


class ProviderConfig(BaseModel):
    """
    Provider configuration (stored in config file).

    The secret itself is never stored here; ``credential_ref`` is the key
    under which the secret store keeps it.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., description="Unique identifier")
    name: str = Field(default="", description="Display name")
    provider_type: ProviderType = Field(default=ProviderType.CUSTOM_OPENAI, description="Provider kind")
    base_url: str = Field(default="", description="API base URL")
    credential_ref: str = Field(default="", description="Secret store key for the API key")
    custom_headers: Dict[str, str] = Field(default_factory=dict, description="Extra static headers")
    is_enabled: bool = Field(default=True, description="Whether the provider is enabled")
    sort_order: int = Field(default=0)
    provider_id: Optional[str] = Field(default=None, description="Preset this provider was seeded from")

    @field_validator("provider_type", mode="before")
    @classmethod
    def _unknown_type_is_custom(cls, value):
        if isinstance(value, ProviderType):
            return value
        try:
            return ProviderType(value)
        except ValueError:
            return ProviderType.CUSTOM_OPENAI

    @field_validator("custom_headers", mode="before")
    @classmethod
    def _none_headers(cls, value):
        return value or {}


class ModelConfig(BaseModel):
    """
    Model configuration (stored in config file).

    ``model_id`` is the wire identifier; it is only meaningful together with
    the owning provider's base URL and credential.
    """
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    id: str = Field(..., description="Unique identifier")
    provider_ref: str = Field(..., description="Owning provider ID")
    model_id: str = Field(..., description="Identifier used in API requests")
    display_name: str = Field(default="")
    context_window: int = Field(default=128_000, description="Approximate token budget")
    max_output_tokens: Optional[int] = Field(default=None)
    capabilities: ModelCapabilities = Field(default_factory=ModelCapabilities)
    input_price_per_m_token: Optional[float] = Field(default=None, description="USD per 1M input tokens")
    output_price_per_m_token: Optional[float] = Field(default=None, description="USD per 1M output tokens")
    is_default: bool = Field(default=False)
    is_enabled: bool = Field(default=True)

    @field_validator("capabilities", mode="before")
    @classmethod
    def _none_capabilities(cls, value):
        return value if value is not None else ModelCapabilities()


class LLMResponse(BaseModel):
    """A complete, non-streamed reply."""
    content: str = Field(default="", description="Main response content")
    usage: Optional[TokenUsage] = Field(default=None, description="Token usage information")


class ConnectivityResult(BaseModel):
    """Outcome of a provider connectivity probe."""
    success: bool
    latency_ms: int
    error: Optional[str] = None
