"""
Paper data model.

Papers are owned by the external document store; this core only reads them.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class Paper(BaseModel):
    """An arXiv paper as seen by the LLM layer."""
    arxiv_id: str = Field(..., description="arXiv identifier, e.g. 2401.01234")
    title: str = Field(default="")
    authors: List[str] = Field(default_factory=list)
    abstract: str = Field(default="", description="Abstract text")
    categories: List[str] = Field(default_factory=list, description="arXiv categories")
    markdown_content: Optional[str] = Field(
        default=None,
        description="Full text converted to Markdown, if a conversion exists"
    )

    @property
    def has_full_text(self) -> bool:
        return self.markdown_content is not None
