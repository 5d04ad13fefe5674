"""
Usage Service for token accounting and cost tracking

Token counts come from the provider's own usage report; cost is the
reported tokens times the model's per-million-token prices.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles
from pydantic import BaseModel, ConfigDict, ValidationError

from ..models.usage import RequestType, UsageRecord
from ..paths import ensure_parent, usage_log_path
from ..providers.types import ModelConfig, ProviderConfig, TokenUsage

logger = logging.getLogger(__name__)


def calculate_cost(model: ModelConfig, usage: Optional[TokenUsage]) -> float:
    """
    Cost in USD for one call.

    Args:
        model: Model carrying per-1M-token prices (missing price counts as 0)
        usage: Provider-reported token usage

    Returns:
        Estimated cost, rounded to 8 decimal places
    """
    if usage is None:
        return 0.0

    input_price = model.input_price_per_m_token or 0.0
    output_price = model.output_price_per_m_token or 0.0

    input_cost = (usage.input_tokens / 1_000_000) * input_price
    output_cost = (usage.output_tokens / 1_000_000) * output_price
    return round(input_cost + output_cost, 8)


class UsageSummary(BaseModel):
    """Aggregated usage for one model."""
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = ""
    request_count: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class UsageService:
    """Append-only usage log stored as JSON lines."""

    def __init__(self, log_path: Optional[Path] = None):
        """
        Args:
            log_path: JSONL file, defaults to data/state/usage_records.jsonl
        """
        self.log_path = Path(log_path) if log_path else usage_log_path()

    async def record(
        self,
        model: ModelConfig,
        provider: ProviderConfig,
        usage: TokenUsage,
        request_type: RequestType,
    ) -> UsageRecord:
        """Persist one usage record for a completed request."""
        record = UsageRecord(
            model_id=model.id,
            model_name=model.display_name or model.model_id,
            provider_name=provider.name or provider.id,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            estimated_cost=calculate_cost(model, usage),
            request_type=request_type,
        )
        ensure_parent(self.log_path)
        async with aiofiles.open(self.log_path, 'a', encoding='utf-8') as f:
            await f.write(record.model_dump_json() + "\n")
        logger.debug(
            f"Recorded usage for {record.model_name}: "
            f"{record.input_tokens} in / {record.output_tokens} out, ${record.estimated_cost}"
        )
        return record

    async def list_records(self, since: Optional[datetime] = None) -> List[UsageRecord]:
        """All records in log order, optionally only those at or after ``since``."""
        if not self.log_path.exists():
            return []

        records: List[UsageRecord] = []
        async with aiofiles.open(self.log_path, 'r', encoding='utf-8') as f:
            async for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    record = UsageRecord.model_validate_json(line)
                except ValidationError as e:
                    logger.warning(f"Skipping malformed usage record: {e}")
                    continue
                if since is None or record.date >= since:
                    records.append(record)
        return records

    async def summarize(self, since: Optional[datetime] = None) -> Dict[str, UsageSummary]:
        """Totals per model ID."""
        summary: Dict[str, UsageSummary] = {}
        for record in await self.list_records(since):
            entry = summary.setdefault(record.model_id, UsageSummary(model_name=record.model_name))
            entry.request_count += 1
            entry.input_tokens += record.input_tokens
            entry.output_tokens += record.output_tokens
            entry.estimated_cost = round(entry.estimated_cost + record.estimated_cost, 8)
        return summary
