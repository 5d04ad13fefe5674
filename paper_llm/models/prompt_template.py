"""
Prompt template data models
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PromptScene(str, Enum):
    """Use-case a template (and a scene-level model default) belongs to."""
    GLOBAL_SYSTEM = "globalSystem"
    INSIGHT_GENERATION = "insightGeneration"
    INNOVATION_EXTRACT = "innovationExtract"
    FORMULA_ANALYSIS = "formulaAnalysis"
    PAPER_CHAT = "paperChat"
    TRANSLATION = "translation"
    SUMMARY = "summary"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _SCENE_DISPLAY_NAMES[self]


_SCENE_DISPLAY_NAMES = {
    PromptScene.GLOBAL_SYSTEM: "全局系统",
    PromptScene.INSIGHT_GENERATION: "核心见解",
    PromptScene.INNOVATION_EXTRACT: "创新点提取",
    PromptScene.FORMULA_ANALYSIS: "公式解析",
    PromptScene.PAPER_CHAT: "论文问答",
    PromptScene.TRANSLATION: "全文翻译",
    PromptScene.SUMMARY: "摘要总结",
    PromptScene.CUSTOM: "自定义",
}


class OutputFormat(str, Enum):
    MARKDOWN = "markdown"
    PLAIN_TEXT = "plainText"
    JSON = "json"


class PromptTemplate(BaseModel):
    """Reusable prompt configuration for one scene."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Template unique identifier")
    name: str = Field(..., description="Template display name")
    scene: PromptScene = Field(default=PromptScene.CUSTOM)
    system_prompt: str = Field(default="")
    user_prompt_template: str = Field(default="", description="May contain {{variable}} placeholders")
    response_language: str = Field(default="zh-CN", description="BCP 47 tag")
    output_format: OutputFormat = Field(default=OutputFormat.MARKDOWN)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)
    bound_model_id: Optional[str] = Field(default=None, description="Pinned model ID")
    is_built_in: bool = Field(default=False, description="Seeded template, cannot be deleted")
    sort_order: int = Field(default=0)

    @field_validator("scene", mode="before")
    @classmethod
    def _unknown_scene_is_custom(cls, value):
        if isinstance(value, PromptScene):
            return value
        try:
            return PromptScene(value)
        except ValueError:
            return PromptScene.CUSTOM

    @field_validator("output_format", mode="before")
    @classmethod
    def _unknown_format_is_markdown(cls, value):
        if isinstance(value, OutputFormat):
            return value
        try:
            return OutputFormat(value)
        except ValueError:
            return OutputFormat.MARKDOWN


class PromptTemplatesConfig(BaseModel):
    """Complete prompt templates configuration."""
    templates: List[PromptTemplate] = Field(default_factory=list)
