"""Tests for the OpenRouter adapter."""

import httpx
import pytest

from paper_llm.providers.adapters.openrouter_adapter import OPENROUTER_MODELS_URL, OpenRouterAdapter


def test_attribution_headers_fill_missing_values():
    headers = OpenRouterAdapter.attribution_headers({"X-Title": "Mine"}, referer="https://r.example", title="T")

    assert headers == {"X-Title": "Mine", "HTTP-Referer": "https://r.example"}


@pytest.mark.asyncio
async def test_requests_carry_attribution_headers(make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={
        "choices": [{"message": {"content": "ok"}}],
    }))
    adapter = OpenRouterAdapter(
        base_url="https://openrouter.ai/api/v1",
        api_key="or-key",
        model_id="openai/gpt-4.1",
        transport=transport,
        referer="https://papers.example",
        title="Papers",
    )

    await adapter.complete([{"role": "user", "content": "Hi"}])

    headers = transport.requests[0].headers
    assert headers["HTTP-Referer"] == "https://papers.example"
    assert headers["X-Title"] == "Papers"
    assert str(transport.requests[0].url) == "https://openrouter.ai/api/v1/chat/completions"


@pytest.mark.asyncio
async def test_fetch_models_extracts_id_and_name(make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={"data": [
        {"id": "openai/gpt-4o", "name": "OpenAI: GPT-4o", "pricing": {"prompt": "0.0000025"}},
        {"id": "mistralai/mistral-small", "name": ""},
    ]}))

    models = await OpenRouterAdapter.fetch_models(transport=transport)

    assert str(transport.requests[0].url) == OPENROUTER_MODELS_URL
    assert [(m.id, m.name) for m in models] == [
        ("openai/gpt-4o", "OpenAI: GPT-4o"),
        ("mistralai/mistral-small", "mistralai/mistral-small"),
    ]


@pytest.mark.asyncio
async def test_fetch_models_network_failure_returns_fallback(make_transport):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    models = await OpenRouterAdapter.fetch_models(transport=make_transport(handler))

    assert len(models) >= 3
    assert [m.id for m in models] == [m.id for m in OpenRouterAdapter.FALLBACK_MODELS]


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(503, text="unavailable"),
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"unexpected": True}),
    httpx.Response(200, json={"data": []}),
])
async def test_fetch_models_bad_payload_returns_fallback(make_transport, response):
    models = await OpenRouterAdapter.fetch_models(transport=make_transport(lambda request: response))

    assert len(models) == len(OpenRouterAdapter.FALLBACK_MODELS)
