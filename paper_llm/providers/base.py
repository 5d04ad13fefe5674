"""
Base LLM Adapter

Abstract base class for LLM provider adapters.
"""
import json
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
from urllib.parse import urlparse

import httpx

from .errors import BadResponseError, InvalidResponseError, InvalidURLError, NetworkError
from .types import ApiProtocol, ChatMessage, LLMResponse, TokenUsage, normalize_messages

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class BaseLLMAdapter(ABC):
    """
    Abstract base class for LLM adapters.

    Each adapter owns one wire protocol and exposes the same contract:
    ``complete`` returns the whole reply, ``complete_stream`` yields text
    fragments as they arrive. Adapters are created per request by the
    router and hold the credential only for that request's lifetime.
    """

    protocol: ApiProtocol

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model_id: str,
        custom_headers: Optional[Dict[str, str]] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Provider API base URL
            api_key: API key for authentication (may be empty)
            model_id: Wire model identifier
            custom_headers: Extra static headers merged into every request
            max_tokens: Optional output token limit
            temperature: Optional sampling temperature
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url
        self.api_key = api_key
        self.model_id = model_id
        self.custom_headers = dict(custom_headers or {})
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport
        self.last_usage: Optional[TokenUsage] = None

    # ==================== Uniform contract ====================

    async def complete(self, messages: Sequence[Any], stream_internally: bool = False) -> str:
        """
        Send the conversation and return the full assistant reply.

        Args:
            messages: Conversation history
            stream_internally: Use the streaming transport and join the chunks

        Returns:
            The complete reply text
        """
        if stream_internally:
            parts: List[str] = []
            async for chunk in self.complete_stream(messages):
                parts.append(chunk)
            return "".join(parts)
        response = await self.invoke(messages)
        return response.content

    async def invoke(self, messages: Sequence[Any]) -> LLMResponse:
        """Non-streaming call returning content and provider-reported usage."""
        chat_messages = normalize_messages(messages)
        url = self.endpoint(stream=False)
        body = self.build_body(chat_messages, stream=False)

        async with self._client() as client:
            try:
                response = await client.post(url, headers=self.build_headers(), json=body)
            except httpx.HTTPError as e:
                raise NetworkError(f"{e.__class__.__name__}: {e}") from e
            self._check_status(response.status_code, response.text)
            try:
                data = response.json()
            except ValueError as e:
                raise InvalidResponseError("Response body is not JSON") from e

        result = self.parse_response(data)
        self.last_usage = result.usage
        return result

    async def complete_stream(self, messages: Sequence[Any]) -> AsyncIterator[str]:
        """
        Stream the reply as text fragments in wire order.

        The generator ends on the provider's end-of-stream marker; decode or
        transport failures are raised from the iteration itself. Closing the
        generator early closes the HTTP response.
        """
        chat_messages = normalize_messages(messages)
        url = self.endpoint(stream=True)
        body = self.build_body(chat_messages, stream=True)
        self.last_usage = None

        async with self._client() as client:
            try:
                async with client.stream("POST", url, headers=self.build_headers(), json=body) as response:
                    if not 200 <= response.status_code < 300:
                        await response.aread()
                        self._check_status(response.status_code, response.text)
                    chunks = self.iter_stream(response.aiter_lines())
                    try:
                        async for chunk in chunks:
                            if chunk:
                                yield chunk
                    finally:
                        await chunks.aclose()
            except httpx.HTTPError as e:
                raise NetworkError(f"{e.__class__.__name__}: {e}") from e

    # ==================== Protocol hooks ====================

    @abstractmethod
    def endpoint(self, stream: bool) -> str:
        """Full request URL; raises InvalidURLError for a malformed base URL."""

    @abstractmethod
    def build_headers(self) -> Dict[str, str]:
        """Request headers including authentication."""

    @abstractmethod
    def build_body(self, messages: List[ChatMessage], stream: bool) -> Dict[str, Any]:
        """Wire-format request body."""

    @abstractmethod
    def parse_response(self, data: Any) -> LLMResponse:
        """Decode a non-streaming response body."""

    @abstractmethod
    def iter_stream(self, lines: AsyncIterator[str]) -> AsyncIterator[str]:
        """Decode streamed response lines into text fragments."""

    # ==================== Helpers ====================

    @asynccontextmanager
    async def _client(self):
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            yield client

    def _merge_headers(self, defaults: Dict[str, str]) -> Dict[str, str]:
        headers = dict(defaults)
        headers.update(self.custom_headers)
        return headers

    @staticmethod
    def normalize_base_url(base_url: str) -> str:
        """Validate and strip a base URL. Raises InvalidURLError."""
        url = (base_url or "").strip().rstrip("/")
        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise InvalidURLError(base_url) from e
        if parsed.scheme not in ("http", "https") or not parsed.netloc or " " in url:
            raise InvalidURLError(base_url)
        return url

    @staticmethod
    def _check_status(status_code: int, body: str = "") -> None:
        if not 200 <= status_code < 300:
            detail = (body or "")[:500] or None
            logger.warning("LLM request failed with HTTP %s: %s", status_code, detail)
            raise BadResponseError(status_code, detail)

    @staticmethod
    def _decode_json(payload: str) -> Any:
        try:
            return json.loads(payload)
        except ValueError as e:
            raise InvalidResponseError(f"Undecodable stream chunk: {payload[:200]}") from e
