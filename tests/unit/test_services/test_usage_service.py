"""Unit tests for usage accounting."""

from datetime import datetime, timedelta, timezone

import pytest

from paper_llm.models.usage import RequestType, UsageRecord
from paper_llm.providers.types import ModelConfig, TokenUsage
from paper_llm.services.usage_service import UsageService, calculate_cost


def test_calculate_cost_uses_per_million_prices(openai_model):
    usage = TokenUsage(input_tokens=1_000_000, output_tokens=500_000)

    assert calculate_cost(openai_model, usage) == pytest.approx(2.5 + 5.0)


def test_calculate_cost_missing_price_is_zero():
    model = ModelConfig(id="m", provider_ref="p", model_id="free", output_price_per_m_token=1.0)

    assert calculate_cost(model, TokenUsage(input_tokens=10_000, output_tokens=2_000)) == pytest.approx(0.002)
    assert calculate_cost(model, None) == 0.0


def test_usage_record_total_tokens():
    record = UsageRecord(model_id="m", input_tokens=3, output_tokens=4)

    assert record.total_tokens == 7


@pytest.mark.asyncio
async def test_record_and_summarize(tmp_path, openai_provider, openai_model):
    service = UsageService(tmp_path / "usage" / "usage_records.jsonl")

    first = await service.record(
        openai_model, openai_provider, TokenUsage(input_tokens=1000, output_tokens=200), RequestType.PAPER_CHAT
    )
    await service.record(
        openai_model, openai_provider, TokenUsage(input_tokens=500, output_tokens=100), RequestType.SUMMARY
    )

    records = await service.list_records()
    assert [r.id for r in records][0] == first.id
    assert records[0].model_name == "GPT-4o"
    assert records[0].provider_name == "OpenAI"
    assert records[0].estimated_cost == pytest.approx(0.0045)
    assert records[1].request_type == RequestType.SUMMARY

    summary = await service.summarize()
    assert list(summary) == ["openai:gpt-4o"]
    assert summary["openai:gpt-4o"].request_count == 2
    assert summary["openai:gpt-4o"].total_tokens == 1800


@pytest.mark.asyncio
async def test_list_records_skips_malformed_lines_and_filters_by_date(tmp_path, openai_provider, openai_model):
    log_path = tmp_path / "usage_records.jsonl"
    service = UsageService(log_path)
    await service.record(openai_model, openai_provider, TokenUsage(input_tokens=1), RequestType.TRANSLATION)
    with open(log_path, "a", encoding="utf-8") as f:
        f.write("{not json}\n\n")

    assert len(await service.list_records()) == 1
    future = datetime.now(timezone.utc) + timedelta(days=1)
    assert await service.list_records(since=future) == []


@pytest.mark.asyncio
async def test_missing_log_is_empty(tmp_path):
    service = UsageService(tmp_path / "none.jsonl")

    assert await service.list_records() == []
    assert await service.summarize() == {}
