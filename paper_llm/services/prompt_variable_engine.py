"""
Prompt variable substitution.

Placeholders are replaced literally (no regex templating):

- ``{{title}}``         paper title
- ``{{abstract}}``      abstract text
- ``{{authors}}``       comma-joined author list
- ``{{categories}}``    comma-joined arXiv categories
- ``{{full_text}}``     converted Markdown body
- ``{{selected_text}}`` text highlighted by the user, empty when absent

Unknown ``{{...}}`` tokens are left as they are.
"""
import re
from typing import Callable, Dict, List, Optional

from ..models.paper import Paper
from ..models.prompt_template import PromptTemplate
from ..providers.types import ChatMessage, MessageRole

TITLE_UNAVAILABLE = "(标题不可用)"
ABSTRACT_UNAVAILABLE = "(摘要不可用)"
AUTHORS_UNAVAILABLE = "(作者信息不可用)"
CATEGORIES_UNAVAILABLE = "(分类信息不可用)"
FULL_TEXT_UNAVAILABLE = "(全文内容不可用)"

_PLACEHOLDER_PATTERN = re.compile(r"\{\{[^{}]*\}\}")

# Spaces and tabs only; line breaks in a title or abstract are kept.
_INLINE_WHITESPACE = " \t\u00a0\u3000"


def _title(paper: Paper) -> str:
    title = paper.title.strip(_INLINE_WHITESPACE)
    return title or TITLE_UNAVAILABLE


def _abstract(paper: Paper) -> str:
    abstract = paper.abstract.strip(_INLINE_WHITESPACE)
    return abstract or ABSTRACT_UNAVAILABLE


def _join_non_blank(values: List[str], fallback: str) -> str:
    kept = [v for v in values if v.strip(_INLINE_WHITESPACE)]
    return ", ".join(kept) if kept else fallback


def _full_text(paper: Paper) -> str:
    if paper.markdown_content and paper.markdown_content.strip():
        return paper.markdown_content
    return FULL_TEXT_UNAVAILABLE


_RESOLVERS: Dict[str, Callable[[Paper], str]] = {
    "{{title}}": _title,
    "{{abstract}}": _abstract,
    "{{authors}}": lambda paper: _join_non_blank(paper.authors, AUTHORS_UNAVAILABLE),
    "{{categories}}": lambda paper: _join_non_blank(paper.categories, CATEGORIES_UNAVAILABLE),
    "{{full_text}}": _full_text,
}


def resolve(template: str, paper: Paper, selected_text: Optional[str] = None) -> str:
    """Substitute every known placeholder in ``template`` with values from ``paper``."""
    result = template
    for placeholder, resolver in _RESOLVERS.items():
        if placeholder in result:
            result = result.replace(placeholder, resolver(paper))
    return result.replace("{{selected_text}}", selected_text or "")


def find_unresolved(text: str) -> List[str]:
    """Placeholders still present in ``text`` after substitution."""
    return _PLACEHOLDER_PATTERN.findall(text)


def render_template(
    template: PromptTemplate,
    paper: Paper,
    selected_text: Optional[str] = None,
) -> List[ChatMessage]:
    """Build the system + user messages for a prompt template."""
    messages: List[ChatMessage] = []
    system_prompt = resolve(template.system_prompt, paper, selected_text)
    if system_prompt.strip():
        messages.append(ChatMessage(role=MessageRole.SYSTEM, content=system_prompt))
    user_prompt = resolve(template.user_prompt_template, paper, selected_text)
    messages.append(ChatMessage(role=MessageRole.USER, content=user_prompt))
    return messages
