"""Shared pytest fixtures for all tests."""

import json
import shutil
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest

from paper_llm.models.paper import Paper
from paper_llm.providers.types import ModelConfig, ProviderConfig, ProviderType


def _create_workspace_temp_dir(kind: str) -> Path:
    """Create a temporary directory under repository-local .pytest_work."""
    repo_root = Path(__file__).resolve().parents[1]
    root_dir = repo_root / ".pytest_work" / kind
    root_dir.mkdir(parents=True, exist_ok=True)
    temp_dir = root_dir / f"{kind}_{uuid.uuid4().hex[:8]}"
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


@pytest.fixture
def tmp_path():
    """Workspace-local replacement for pytest's tmp_path fixture."""
    temp_dir = _create_workspace_temp_dir("tmp_path")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def temp_config_dir():
    """Create temporary directory for config files."""
    temp_dir = _create_workspace_temp_dir("config")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


def sse_lines(payloads: List[Any]) -> bytes:
    """Encode payloads as an SSE body; strings are sent verbatim, others as JSON."""
    events = []
    for payload in payloads:
        data = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        events.append(f"data: {data}\n\n")
    return "".join(events).encode("utf-8")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def sse_body():
    """SSE body encoder."""
    return sse_lines


@pytest.fixture
def make_transport():
    """Factory for a request-recording httpx MockTransport."""
    return RecordingTransport


@pytest.fixture
def sample_paper():
    """Paper with converted full text."""
    return Paper(
        arxiv_id="2401.01234",
        title="Attention Is All You Need",
        authors=["Ashish Vaswani", "Noam Shazeer"],
        abstract="We propose the Transformer, based solely on attention mechanisms.",
        categories=["cs.CL", "cs.LG"],
        markdown_content="# Introduction\n\nRecurrent models dominate.\n\n# Method\n\nSelf-attention layers.",
    )


@pytest.fixture
def sample_messages():
    """Sample message list for testing."""
    return [
        {"role": "user", "content": "What is Python?"},
        {"role": "assistant", "content": "Python is a high-level programming language."},
        {"role": "user", "content": "What are its main features?"}
    ]


@pytest.fixture
def openai_provider():
    return ProviderConfig(
        id="openai",
        name="OpenAI",
        provider_type=ProviderType.OPENAI,
        base_url="https://api.openai.com/v1",
        credential_ref="openai_api_key",
    )


@pytest.fixture
def openai_model():
    return ModelConfig(
        id="openai:gpt-4o",
        provider_ref="openai",
        model_id="gpt-4o",
        display_name="GPT-4o",
        input_price_per_m_token=2.5,
        output_price_per_m_token=10.0,
        is_default=True,
    )
