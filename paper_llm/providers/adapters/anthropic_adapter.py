"""
Anthropic Adapter

Adapter for the Anthropic Messages API.
"""
import logging
from typing import Any, AsyncIterator, Dict, List

from ..base import BaseLLMAdapter
from ..errors import InvalidResponseError
from ..streaming import iter_sse_data
from ..types import ApiProtocol, ChatMessage, LLMResponse, MessageRole, TokenUsage

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 4096


class AnthropicAdapter(BaseLLMAdapter):
    """
    Adapter for Claude via the Messages API.

    System turns are lifted out of the message list into the top-level
    ``system`` field. Streaming uses typed SSE events; text arrives in
    ``content_block_delta`` events carrying a ``text_delta`` and the
    stream ends with ``message_stop``.
    """

    protocol = ApiProtocol.ANTHROPIC

    def endpoint(self, stream: bool) -> str:
        base = self.normalize_base_url(self.base_url)
        if not base.endswith("/v1"):
            base = f"{base}/v1"
        return f"{base}/messages"

    def build_headers(self) -> Dict[str, str]:
        return self._merge_headers({
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        })

    def build_body(self, messages: List[ChatMessage], stream: bool) -> Dict[str, Any]:
        system_parts = [m.content for m in messages if m.role == MessageRole.SYSTEM]
        body: Dict[str, Any] = {
            "model": self.model_id,
            "max_tokens": self.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": [m.to_wire() for m in messages if m.role != MessageRole.SYSTEM],
            "stream": stream,
        }
        if system_parts:
            body["system"] = "\n\n".join(system_parts)
        if self.temperature is not None:
            # Messages API caps temperature at 1.0
            body["temperature"] = min(self.temperature, 1.0)
        return body

    def parse_response(self, data: Any) -> LLMResponse:
        try:
            blocks = data["content"]
            texts = [block["text"] for block in blocks if block.get("type") == "text"]
        except (KeyError, TypeError) as e:
            raise InvalidResponseError("Missing content blocks") from e
        if not texts:
            raise InvalidResponseError("Response has no text content block")

        usage = None
        if isinstance(data.get("usage"), dict):
            usage = TokenUsage.from_dict(data["usage"])
        return LLMResponse(content="".join(texts), usage=usage)

    async def iter_stream(self, lines: AsyncIterator[str]) -> AsyncIterator[str]:
        input_tokens = 0
        output_tokens = 0

        async for payload in iter_sse_data(lines):
            event = self._decode_json(payload)
            if not isinstance(event, dict):
                raise InvalidResponseError(f"Unexpected stream event: {payload[:200]}")
            event_type = event.get("type")

            if event_type == "content_block_delta":
                delta = event.get("delta") or {}
                if delta.get("type") == "text_delta" and delta.get("text"):
                    yield delta["text"]
            elif event_type == "message_start":
                usage = (event.get("message") or {}).get("usage") or {}
                input_tokens = usage.get("input_tokens", 0) or 0
                output_tokens = usage.get("output_tokens", 0) or 0
            elif event_type == "message_delta":
                usage = event.get("usage") or {}
                output_tokens = usage.get("output_tokens", output_tokens) or output_tokens
            elif event_type == "message_stop":
                break
            elif event_type == "error":
                error = event.get("error") or {}
                raise InvalidResponseError(f"{error.get('type', 'error')}: {error.get('message', '')}")
            # ping, content_block_start, content_block_stop carry no text

        if input_tokens or output_tokens:
            self.last_usage = TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens)
