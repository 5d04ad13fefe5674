"""
Paper context strategy for chat.

Picks how a paper is put into the system prompt given the model's context
window (in characters), and builds that system prompt.
"""
from enum import Enum
from typing import List, Optional

from ..models.paper import Paper
from ..providers.types import ModelCapabilities

BASE_SYSTEM_PROMPT = (
    "你是一位专业的学术论文助手，擅长分析和解读人工智能与机器学习领域的研究论文。"
    "请使用中文回答所有问题，语言简洁清晰，适合研究人员和学生阅读。"
    "在分析论文时，请重点关注：研究问题、核心方法、实验结果以及对领域的贡献。"
    "如遇到专业术语，可保留英文原文并附上中文解释。"
    "用户提出的每个问题都基于已提供的论文内容进行回答，不要捏造论文中没有的信息。"
)

MAX_MATCHED_SEGMENTS = 5
OVERVIEW_SEGMENTS = 3
MIN_KEYWORD_LENGTH = 3


class ContextStrategy(str, Enum):
    FULL_TEXT_INJECTION = "fullTextInjection"
    SEGMENT_MATCHING = "segmentMatching"
    PDF_DIRECT = "pdfDirect"
    PLAIN_TEXT_FALLBACK = "plainTextFallback"


def resolve(paper: Paper, context_window_chars: int) -> ContextStrategy:
    """
    Full text when it fits in half the window (inclusive), matched
    segments when it does not, abstract only when there is no full text.
    """
    if not paper.has_full_text:
        return ContextStrategy.PLAIN_TEXT_FALLBACK
    if len(paper.markdown_content) <= context_window_chars // 2:
        return ContextStrategy.FULL_TEXT_INJECTION
    return ContextStrategy.SEGMENT_MATCHING


def resolve_for_model(
    paper: Paper,
    context_window_chars: int,
    capabilities: Optional[ModelCapabilities] = None,
) -> ContextStrategy:
    """Like ``resolve`` but prefers ``PDF_DIRECT`` for PDF-capable models without full text."""
    strategy = resolve(paper, context_window_chars)
    if (
        strategy == ContextStrategy.PLAIN_TEXT_FALLBACK
        and capabilities is not None
        and capabilities.pdf_input
    ):
        return ContextStrategy.PDF_DIRECT
    return strategy


def build_system_context(strategy: ContextStrategy, paper: Paper, user_query: str = "") -> str:
    header = f"{BASE_SYSTEM_PROMPT}\n\n---\n\n标题: {paper.title}\n\n"

    if strategy == ContextStrategy.FULL_TEXT_INJECTION:
        body = paper.markdown_content if paper.markdown_content is not None else paper.abstract
        return header + body

    if strategy == ContextStrategy.SEGMENT_MATCHING:
        segments = extract_relevant_segments(paper, user_query)
        return header + f"以下是与问题最相关的论文片段：\n\n{segments}"

    # PDF_DIRECT carries the document as an attachment; its text context is the abstract.
    return header + f"摘要: {paper.abstract}"


def split_paragraphs(text: str) -> List[str]:
    return [p for p in text.split("\n\n") if p.strip()]


def query_keywords(query: str) -> List[str]:
    """Lowercased whitespace tokens longer than two characters; a repeated word counts each time."""
    return [token for token in query.lower().split() if len(token) >= MIN_KEYWORD_LENGTH]


def extract_relevant_segments(paper: Paper, query: str) -> str:
    """
    Keyword-overlap paragraph selection.

    Each paragraph scores one point per query keyword it contains
    (case-insensitive substring). The top five are returned in document
    order, with lower scoring paragraphs filling any remaining slots. With
    no usable keywords or no match at all the first three paragraphs stand
    in as an overview.
    """
    if not paper.has_full_text:
        return paper.abstract

    paragraphs = split_paragraphs(paper.markdown_content)
    overview = "\n\n".join(paragraphs[:OVERVIEW_SEGMENTS])

    keywords = query_keywords(query)
    if not keywords:
        return overview

    scores = []
    for index, paragraph in enumerate(paragraphs):
        lowered = paragraph.lower()
        scores.append((sum(1 for kw in keywords if kw in lowered), index))

    if not any(score for score, _ in scores):
        return overview

    # sorted() is stable, so equal scores keep document order.
    ranked = sorted(scores, key=lambda item: -item[0])[:MAX_MATCHED_SEGMENTS]
    selected = sorted(index for _, index in ranked)
    return "\n\n".join(paragraphs[i] for i in selected)
