"""
OpenAI-Compatible Adapter

Adapter for OpenAI and OpenAI-compatible APIs (DeepSeek, OpenRouter, Zhipu,
DashScope, Minimax and custom endpoints sharing the /chat/completions schema).
"""
import logging
from typing import Any, AsyncIterator, Dict, List

from ..base import BaseLLMAdapter
from ..errors import InvalidResponseError
from ..streaming import SSE_DONE_SENTINEL, iter_sse_data
from ..types import ApiProtocol, ChatMessage, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)


class OpenAIAdapter(BaseLLMAdapter):
    """
    Adapter for the Chat Completions wire format.

    Request:  POST {base_url}/chat/completions  {model, messages, stream}
    Response: choices[0].message.content
    Stream:   SSE ``data:`` lines of chat.completion.chunk objects,
              terminated by ``data: [DONE]``
    """

    protocol = ApiProtocol.OPENAI

    def endpoint(self, stream: bool) -> str:
        return f"{self.normalize_base_url(self.base_url)}/chat/completions"

    def build_headers(self) -> Dict[str, str]:
        return self._merge_headers({
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        })

    def build_body(self, messages: List[ChatMessage], stream: bool) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self.model_id,
            "messages": [message.to_wire() for message in messages],
            "stream": stream,
        }
        if stream:
            # Without this OpenAI-compatible servers send no usage chunk.
            body["stream_options"] = {"include_usage": True}
        if self.max_tokens is not None:
            body["max_tokens"] = self.max_tokens
        if self.temperature is not None:
            body["temperature"] = self.temperature
        return body

    def parse_response(self, data: Any) -> LLMResponse:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise InvalidResponseError("Missing choices[0].message.content") from e
        if content is None:
            raise InvalidResponseError("choices[0].message.content is null")
        return LLMResponse(content=content, usage=TokenUsage.from_dict(data.get("usage")))

    async def iter_stream(self, lines: AsyncIterator[str]) -> AsyncIterator[str]:
        async for payload in iter_sse_data(lines):
            if payload.strip() == SSE_DONE_SENTINEL:
                return

            chunk = self._decode_json(payload)
            if not isinstance(chunk, dict):
                raise InvalidResponseError(f"Unexpected stream chunk: {payload[:200]}")

            # Some providers send a final usage-only chunk with empty choices
            usage = TokenUsage.from_dict(chunk.get("usage"))
            if usage:
                self.last_usage = usage

            choices = chunk.get("choices")
            if choices is None:
                error = chunk.get("error")
                if error:
                    message = error.get("message", "stream error") if isinstance(error, dict) else error
                    raise InvalidResponseError(str(message))
                raise InvalidResponseError(f"Stream chunk without choices: {payload[:200]}")
            if not choices:
                continue

            delta = choices[0].get("delta") or {}
            content = delta.get("content")
            if content:
                yield content
