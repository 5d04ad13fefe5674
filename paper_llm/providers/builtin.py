"""
Built-in Provider Definitions

Preset providers used to seed the provider store on first run.
"""
from typing import Optional

from .types import ModelDefinition, ProviderDefinition, ProviderType


# Built-in provider definitions
BUILTIN_PROVIDERS: dict[str, ProviderDefinition] = {
    "openai": ProviderDefinition(
        id="openai",
        name="OpenAI",
        provider_type=ProviderType.OPENAI,
        base_url="https://api.openai.com/v1",
        builtin_models=[
            ModelDefinition(id="gpt-4.1", name="GPT-4.1"),
            ModelDefinition(id="gpt-4.1-mini", name="GPT-4.1 Mini"),
            ModelDefinition(id="gpt-4.1-nano", name="GPT-4.1 Nano"),
            ModelDefinition(id="gpt-4o", name="GPT-4o"),
            ModelDefinition(id="gpt-4o-mini", name="GPT-4o Mini"),
            ModelDefinition(id="o4-mini", name="o4-mini"),
            ModelDefinition(id="o3", name="o3"),
            ModelDefinition(id="o3-mini", name="o3-mini"),
        ],
    ),

    "anthropic": ProviderDefinition(
        id="anthropic",
        name="Claude (Anthropic)",
        provider_type=ProviderType.ANTHROPIC,
        base_url="https://api.anthropic.com/v1",
        builtin_models=[
            ModelDefinition(id="claude-opus-4-6-20260201", name="Claude Opus 4.6"),
            ModelDefinition(id="claude-sonnet-4-6-20260201", name="Claude Sonnet 4.6"),
            ModelDefinition(id="claude-sonnet-4-5-20250514", name="Claude Sonnet 4.5"),
            ModelDefinition(id="claude-opus-4-5-20250514", name="Claude Opus 4.5"),
            ModelDefinition(id="claude-haiku-4-5-20251001", name="Claude Haiku 4.5"),
        ],
    ),

    "google": ProviderDefinition(
        id="google",
        name="Google Gemini",
        provider_type=ProviderType.GOOGLE,
        base_url="https://generativelanguage.googleapis.com/v1beta",
        builtin_models=[
            ModelDefinition(id="gemini-2.5-pro", name="Gemini 2.5 Pro"),
            ModelDefinition(id="gemini-2.5-flash", name="Gemini 2.5 Flash"),
            ModelDefinition(id="gemini-2.0-flash", name="Gemini 2.0 Flash"),
            ModelDefinition(id="gemini-2.0-flash-lite", name="Gemini 2.0 Flash Lite"),
        ],
    ),

    "deepseek": ProviderDefinition(
        id="deepseek",
        name="DeepSeek",
        provider_type=ProviderType.DEEPSEEK,
        base_url="https://api.deepseek.com/v1",
        builtin_models=[
            ModelDefinition(id="deepseek-chat", name="DeepSeek V3"),
            ModelDefinition(id="deepseek-reasoner", name="DeepSeek R1"),
        ],
    ),

    "zhipu": ProviderDefinition(
        id="zhipu",
        name="智谱 (GLM)",
        provider_type=ProviderType.ZHIPU,
        base_url="https://open.bigmodel.cn/api/paas/v4",
        builtin_models=[
            ModelDefinition(id="glm-4-plus", name="GLM-4 Plus"),
            ModelDefinition(id="glm-4-flash", name="GLM-4 Flash"),
            ModelDefinition(id="glm-4-long", name="GLM-4 Long"),
            ModelDefinition(id="glm-4-air", name="GLM-4 Air"),
        ],
    ),

    "dashscope": ProviderDefinition(
        id="dashscope",
        name="通义千问 (DashScope)",
        provider_type=ProviderType.DASHSCOPE,
        base_url="https://dashscope.aliyuncs.com/compatible-mode/v1",
        builtin_models=[
            ModelDefinition(id="qwen-max", name="Qwen Max"),
            ModelDefinition(id="qwen-plus", name="Qwen Plus"),
            ModelDefinition(id="qwen-turbo", name="Qwen Turbo"),
            ModelDefinition(id="qwen-long", name="Qwen Long"),
            ModelDefinition(id="qwen3-235b-a22b", name="Qwen3 235B"),
        ],
    ),

    "minimax": ProviderDefinition(
        id="minimax",
        name="Minimax",
        provider_type=ProviderType.MINIMAX,
        base_url="https://api.minimax.chat/v1",
        builtin_models=[
            ModelDefinition(id="MiniMax-M1", name="MiniMax M1"),
            ModelDefinition(id="MiniMax-Text-01", name="MiniMax Text 01"),
            ModelDefinition(id="abab6.5s-chat", name="ABAB 6.5s Chat"),
        ],
    ),

    "openrouter": ProviderDefinition(
        id="openrouter",
        name="OpenRouter",
        provider_type=ProviderType.OPENROUTER,
        base_url="https://openrouter.ai/api/v1",
        builtin_models=[
            ModelDefinition(id="anthropic/claude-opus-4-6", name="Claude Opus 4.6"),
            ModelDefinition(id="anthropic/claude-sonnet-4-6", name="Claude Sonnet 4.6"),
            ModelDefinition(id="openai/gpt-4.1", name="GPT-4.1"),
            ModelDefinition(id="google/gemini-2.5-pro", name="Gemini 2.5 Pro"),
            ModelDefinition(id="deepseek/deepseek-chat-v3-0324", name="DeepSeek V3"),
        ],
        supports_model_discovery=True,
    ),
}


def get_builtin_provider(provider_id: str) -> Optional[ProviderDefinition]:
    """Get a built-in provider definition by ID."""
    return BUILTIN_PROVIDERS.get(provider_id)


def get_all_builtin_providers() -> dict[str, ProviderDefinition]:
    """Get all built-in provider definitions, in presentation order."""
    return BUILTIN_PROVIDERS.copy()


def is_builtin_provider(provider_id: str) -> bool:
    """Check if a provider ID is a built-in provider."""
    return provider_id in BUILTIN_PROVIDERS
