"""Tests for provider data models and the adapter registry."""

import pytest
import yaml

from paper_llm.providers.builtin import get_all_builtin_providers, get_builtin_provider, is_builtin_provider
from paper_llm.providers.errors import BadResponseError, LLMNotConfiguredError, describe_error
from paper_llm.providers.registry import AdapterRegistry
from paper_llm.providers.types import (
    ApiProtocol,
    ChatMessage,
    MessageRole,
    ModelCapabilities,
    ModelConfig,
    ProviderConfig,
    ProviderType,
    TokenUsage,
    normalize_messages,
)


def test_provider_config_without_provider_id_decodes():
    raw = yaml.safe_load("""
id: my-openai
name: My OpenAI
provider_type: openai
base_url: https://api.openai.com/v1
credential_ref: my-openai-key
is_enabled: true
""")

    provider = ProviderConfig(**raw)

    assert provider.provider_id is None
    assert provider.custom_headers == {}
    assert provider.provider_type == ProviderType.OPENAI


def test_unknown_provider_type_decodes_as_custom_openai():
    provider = ProviderConfig(id="x", provider_type="someNewVendor", custom_headers=None)

    assert provider.provider_type == ProviderType.CUSTOM_OPENAI
    assert provider.custom_headers == {}


def test_model_config_defaults():
    model = ModelConfig(id="m", provider_ref="p", model_id="gpt-4o", capabilities=None)

    assert model.capabilities == ModelCapabilities()
    assert model.context_window == 128_000
    assert model.input_price_per_m_token is None
    assert model.is_enabled is True


def test_token_usage_reads_both_naming_styles():
    assert TokenUsage.from_dict({"prompt_tokens": 3, "completion_tokens": 4}).total_tokens == 7
    assert TokenUsage.from_dict({"input_tokens": 5, "output_tokens": 6}).total_tokens == 11
    assert TokenUsage.from_dict(None) is None


def test_normalize_messages_rejects_unknown_objects():
    with pytest.raises(TypeError):
        normalize_messages([object()])

    assert normalize_messages([ChatMessage(role=MessageRole.USER, content="x")])[0].content == "x"


def test_every_provider_type_is_registered():
    for provider_type in ProviderType:
        assert AdapterRegistry.adapter_class(provider_type) is not None
        assert AdapterRegistry.adapter_class(provider_type).protocol in ApiProtocol

    assert AdapterRegistry.adapter_class(ProviderType.ANTHROPIC).protocol == ApiProtocol.ANTHROPIC
    assert AdapterRegistry.adapter_class(ProviderType.GOOGLE).protocol == ApiProtocol.GEMINI
    assert AdapterRegistry.adapter_class(ProviderType.DEEPSEEK).protocol == ApiProtocol.OPENAI


def test_builtin_presets():
    presets = get_all_builtin_providers()

    assert {"openai", "anthropic", "google", "deepseek", "openrouter"} <= set(presets)
    assert all(preset.builtin_models for preset in presets.values())
    assert get_builtin_provider("openrouter").provider_type == ProviderType.OPENROUTER
    assert is_builtin_provider("deepseek")
    assert not is_builtin_provider("my-proxy")


def test_describe_error_messages():
    assert describe_error(BadResponseError(500)) == "LLM 服务错误 (HTTP 500)"
    assert describe_error(LLMNotConfiguredError()) == "请先在设置中配置 LLM 服务"
    assert describe_error(ValueError("boom")) == "生成失败: boom"
