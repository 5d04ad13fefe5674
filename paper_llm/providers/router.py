"""
LLM Router

Resolves (provider config, model) to a concrete adapter with a freshly
fetched credential and delegates completion calls to it.
"""
import logging
import time
from typing import Any, AsyncIterator, Dict, Optional, Sequence

from ..config import settings
from ..services.secret_store import SecretStore
from .base import BaseLLMAdapter
from .errors import BadResponseError, MissingCredentialError, describe_error
from .registry import AdapterRegistry
from .types import (
    ApiProtocol,
    ChatMessage,
    ConnectivityResult,
    MessageRole,
    ModelConfig,
    ProviderConfig,
    ProviderType,
)

logger = logging.getLogger(__name__)

CONNECTIVITY_PROBE = "Hi"


class LLMRouter:
    """
    Routes completion requests to the adapter for the provider's type.

    The secret store is injected; the API key is retrieved on every call and
    only lives on the per-request adapter.
    """

    def __init__(self, secret_store: SecretStore, transport: Any = None):
        """
        Args:
            secret_store: Source of API keys, keyed by ``credential_ref``
            transport: Optional httpx transport handed to every adapter
        """
        self._secret_store = secret_store
        self._transport = transport

    def resolve(
        self,
        provider: ProviderConfig,
        model: ModelConfig,
        pdf_document: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> BaseLLMAdapter:
        """
        Build the adapter for a provider/model pair.

        A missing credential resolves to an empty key; the provider's 401 is
        what reports it.

        Raises:
            UnsupportedProviderError: provider type has no adapter
        """
        adapter_class = AdapterRegistry.adapter_class(provider.provider_type)
        api_key = self._secret_store.retrieve(provider.credential_ref) or ""
        if not api_key:
            logger.info(f"No API key stored for provider '{provider.name or provider.id}'")

        kwargs: Dict[str, Any] = {
            "base_url": provider.base_url,
            "api_key": api_key,
            "model_id": model.model_id,
            "custom_headers": provider.custom_headers,
            "max_tokens": model.max_output_tokens,
            "timeout": timeout or settings.request_timeout_seconds,
            "transport": self._transport,
        }

        if provider.provider_type == ProviderType.OPENROUTER:
            kwargs["referer"] = settings.openrouter_referer
            kwargs["title"] = settings.openrouter_title
        elif adapter_class.protocol == ApiProtocol.GEMINI:
            if pdf_document and model.capabilities.pdf_input:
                kwargs["pdf_document"] = pdf_document
        elif adapter_class.protocol == ApiProtocol.ANTHROPIC:
            kwargs["max_tokens"] = model.max_output_tokens or settings.anthropic_default_max_tokens

        return adapter_class(**kwargs)

    async def complete(
        self,
        messages: Sequence[Any],
        provider: ProviderConfig,
        model: ModelConfig,
        stream: bool = False,
    ) -> str:
        """Send a completion request and return the full reply."""
        adapter = self.resolve(provider, model)
        try:
            return await adapter.complete(messages, stream_internally=stream)
        except BadResponseError as e:
            self._raise_if_missing_credential(e, adapter, provider)
            raise

    async def complete_stream(
        self,
        messages: Sequence[Any],
        provider: ProviderConfig,
        model: ModelConfig,
    ) -> AsyncIterator[str]:
        """
        Stream reply fragments.

        Never raises on call: resolution failures end the iteration with the
        error after zero chunks.
        """
        adapter = self.resolve(provider, model)
        stream = self.stream_adapter(adapter, messages, provider)
        try:
            async for chunk in stream:
                yield chunk
        finally:
            await stream.aclose()

    async def stream_adapter(
        self,
        adapter: BaseLLMAdapter,
        messages: Sequence[Any],
        provider: ProviderConfig,
    ) -> AsyncIterator[str]:
        """Stream from an already resolved adapter (callers needing ``last_usage``)."""
        stream = adapter.complete_stream(messages)
        try:
            async for chunk in stream:
                yield chunk
        except BadResponseError as e:
            self._raise_if_missing_credential(e, adapter, provider)
            raise
        finally:
            # Closing here releases the HTTP response when the caller stops early.
            await stream.aclose()

    async def test_connectivity(self, provider: ProviderConfig, model: ModelConfig) -> ConnectivityResult:
        """
        Send "Hi" through the non-streaming path and time the round trip.

        Diagnostic only: never raises, errors come back as text.
        """
        probe = [ChatMessage(role=MessageRole.USER, content=CONNECTIVITY_PROBE)]
        start_time = time.perf_counter()
        try:
            adapter = self.resolve(provider, model, timeout=settings.connectivity_timeout_seconds)
            try:
                await adapter.complete(probe, stream_internally=False)
            except BadResponseError as e:
                self._raise_if_missing_credential(e, adapter, provider)
                raise
        except Exception as e:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            logger.info(f"Connectivity test failed for '{provider.name or provider.id}': {e}")
            return ConnectivityResult(success=False, latency_ms=latency_ms, error=describe_error(e))

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        return ConnectivityResult(success=True, latency_ms=latency_ms, error=None)

    @staticmethod
    def _raise_if_missing_credential(
        error: BadResponseError,
        adapter: BaseLLMAdapter,
        provider: ProviderConfig,
    ) -> None:
        if error.is_auth_error and not adapter.api_key:
            raise MissingCredentialError(provider.credential_ref) from error
