"""
Google Gemini Adapter

Adapter for the Gemini generateContent / streamGenerateContent REST API.
"""
import base64
import logging
import re
from typing import Any, AsyncIterator, Dict, List, Optional

from ..base import BaseLLMAdapter
from ..errors import InvalidResponseError
from ..streaming import iter_sse_data
from ..types import ApiProtocol, ChatMessage, LLMResponse, MessageRole, TokenUsage

logger = logging.getLogger(__name__)

GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
_VERSION_SUFFIX = re.compile(r"/v\d+(alpha|beta)?\d*$")

_GEMINI_ROLES = {
    MessageRole.USER: "user",
    MessageRole.ASSISTANT: "model",
}


def _candidate_text(data: Any) -> str:
    """Join the text parts of the first candidate, skipping thought parts."""
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(
        part.get("text", "")
        for part in parts
        if isinstance(part, dict) and not part.get("thought")
    )


def _usage_from(data: Any) -> Optional[TokenUsage]:
    metadata = data.get("usageMetadata") if isinstance(data, dict) else None
    if not metadata:
        return None
    return TokenUsage(
        input_tokens=metadata.get("promptTokenCount", 0) or 0,
        output_tokens=metadata.get("candidatesTokenCount", 0) or 0,
    )


class GeminiAdapter(BaseLLMAdapter):
    """
    Adapter for Google Gemini.

    Content is nested under ``contents[].parts[].text``; assistant turns use
    the ``model`` role and system turns go to ``systemInstruction``. This is
    the only adapter allowed to attach a raw PDF, and only when the model
    declares ``pdf_input``.
    """

    protocol = ApiProtocol.GEMINI

    def __init__(self, *args: Any, pdf_document: Optional[bytes] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.pdf_document = pdf_document

    def endpoint(self, stream: bool) -> str:
        base = self.normalize_base_url(self.base_url or GEMINI_DEFAULT_BASE_URL)
        if not _VERSION_SUFFIX.search(base):
            base = f"{base}/v1beta"
        if stream:
            return f"{base}/models/{self.model_id}:streamGenerateContent?alt=sse"
        return f"{base}/models/{self.model_id}:generateContent"

    def build_headers(self) -> Dict[str, str]:
        return self._merge_headers({
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        })

    def build_body(self, messages: List[ChatMessage], stream: bool) -> Dict[str, Any]:
        contents: List[Dict[str, Any]] = []
        system_parts: List[Dict[str, str]] = []
        for message in messages:
            if message.role == MessageRole.SYSTEM:
                system_parts.append({"text": message.content})
                continue
            contents.append({
                "role": _GEMINI_ROLES[message.role],
                "parts": [{"text": message.content}],
            })

        if self.pdf_document:
            self._attach_pdf(contents)

        body: Dict[str, Any] = {"contents": contents}
        if system_parts:
            body["systemInstruction"] = {"parts": system_parts}

        generation_config: Dict[str, Any] = {}
        if self.max_tokens is not None:
            generation_config["maxOutputTokens"] = self.max_tokens
        if self.temperature is not None:
            generation_config["temperature"] = self.temperature
        if generation_config:
            body["generationConfig"] = generation_config
        return body

    def _attach_pdf(self, contents: List[Dict[str, Any]]) -> None:
        """Prepend the PDF as inline data to the last user turn."""
        pdf_part = {
            "inlineData": {
                "mimeType": "application/pdf",
                "data": base64.b64encode(self.pdf_document).decode("ascii"),
            }
        }
        for content in reversed(contents):
            if content["role"] == "user":
                content["parts"].insert(0, pdf_part)
                return
        contents.append({"role": "user", "parts": [pdf_part]})

    def parse_response(self, data: Any) -> LLMResponse:
        if not isinstance(data, dict) or not data.get("candidates"):
            raise InvalidResponseError("Missing candidates")
        try:
            text = _candidate_text(data)
        except (AttributeError, TypeError) as e:
            raise InvalidResponseError("Malformed candidate content") from e
        if not text:
            raise InvalidResponseError("First candidate has no text part")
        return LLMResponse(content=text, usage=_usage_from(data))

    async def iter_stream(self, lines: AsyncIterator[str]) -> AsyncIterator[str]:
        # Each SSE event carries a full GenerateContentResponse; the stream
        # ends when the server closes it.
        async for payload in iter_sse_data(lines):
            chunk = self._decode_json(payload)
            if not isinstance(chunk, dict):
                raise InvalidResponseError(f"Unexpected stream chunk: {payload[:200]}")
            if "error" in chunk:
                error = chunk["error"]
                message = error.get("message", "stream error") if isinstance(error, dict) else error
                raise InvalidResponseError(str(message))

            usage = _usage_from(chunk)
            if usage:
                self.last_usage = usage
            try:
                text = _candidate_text(chunk)
            except (AttributeError, TypeError) as e:
                raise InvalidResponseError("Malformed candidate content") from e
            if text:
                yield text
