"""
Usage record data model.

Provider and model names are denormalized so history stays readable after
the provider or model is deleted.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RequestType(str, Enum):
    INSIGHT_GENERATION = "insightGeneration"
    PAPER_CHAT = "paperChat"
    TRANSLATION = "translation"
    CODE_EXPLANATION = "codeExplanation"
    FIGURE_ANALYSIS = "figureAnalysis"
    SUMMARY = "summary"
    INNOVATION_EXTRACT = "innovationExtract"
    FORMULA_ANALYSIS = "formulaAnalysis"


class UsageRecord(BaseModel):
    """Token consumption and cost of one completed LLM call. Immutable."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    model_id: str
    model_name: str = ""
    provider_name: str = ""
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    estimated_cost: float = Field(default=0.0, ge=0.0, description="USD")
    request_type: RequestType = RequestType.INSIGHT_GENERATION

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
