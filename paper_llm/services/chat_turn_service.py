"""
Paper chat turn orchestration.

One turn: resolve the model, persist the user's question, build the paper
context, then stream the reply. The user message is handed to the chat
store before the request is dispatched so a failed or interrupted turn
never loses the question.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Protocol

from ..config import settings
from ..models.chat import ChatTurnResult, StoredChatMessage
from ..models.paper import Paper
from ..models.prompt_template import PromptScene, PromptTemplate
from ..models.usage import RequestType, UsageRecord
from ..providers.base import BaseLLMAdapter
from ..providers.errors import LLMNotConfiguredError, describe_error
from ..providers.router import LLMRouter
from ..providers.streaming import StreamSession, StreamState
from ..providers.types import ChatMessage, MessageRole, ModelConfig, ProviderConfig, TokenUsage
from . import context_strategy, prompt_variable_engine
from .context_strategy import ContextStrategy
from .model_resolver import ModelResolver
from .usage_service import UsageService

logger = logging.getLogger(__name__)


class ChatStore(Protocol):
    async def append(self, message: StoredChatMessage) -> None:
        ...

    async def list_messages(self, paper_id: str) -> List[StoredChatMessage]:
        ...


class InMemoryChatStore:
    """Chat history kept per paper in process memory."""

    def __init__(self):
        self._messages: Dict[str, List[StoredChatMessage]] = defaultdict(list)

    async def append(self, message: StoredChatMessage) -> None:
        self._messages[message.paper_id].append(message)

    async def list_messages(self, paper_id: str) -> List[StoredChatMessage]:
        return sorted(self._messages.get(paper_id, []), key=lambda m: m.timestamp)


class ProviderStore(Protocol):
    async def get_provider(self, provider_id: str) -> Optional[ProviderConfig]:
        ...


class ChatTurn:
    """
    An in-flight assistant reply.

    Iterate ``session`` (or call ``session.start()``) to receive chunks,
    ``cancel()`` to stop early, then ``finish()`` to persist the outcome.
    """

    def __init__(
        self,
        paper: Paper,
        user_message: StoredChatMessage,
        model: ModelConfig,
        provider: ProviderConfig,
        strategy: ContextStrategy,
        adapter: BaseLLMAdapter,
        session: StreamSession,
        chat_store: ChatStore,
        usage_service: Optional[UsageService] = None,
    ):
        self.paper = paper
        self.user_message = user_message
        self.model = model
        self.provider = provider
        self.strategy = strategy
        self.session = session
        self._adapter = adapter
        self._chat_store = chat_store
        self._usage_service = usage_service
        self._result: Optional[ChatTurnResult] = None

    async def cancel(self) -> None:
        await self.session.cancel()

    async def finish(self) -> ChatTurnResult:
        """
        Wait for the stream to end and persist the reply.

        Partial text from a cancelled or failed stream is still kept; an
        empty reply is discarded. Calling it again returns the same result.
        """
        if self._result is not None:
            return self._result

        outcome = await self.session.wait()

        assistant_message = None
        if not outcome.is_empty:
            assistant_message = StoredChatMessage(
                paper_id=self.paper.arxiv_id,
                role=MessageRole.ASSISTANT,
                content=outcome.text,
            )
            await self._chat_store.append(assistant_message)
        else:
            logger.info(f"Discarding empty assistant reply ({outcome.state.value})")

        usage_record: Optional[UsageRecord] = None
        if self._usage_service is not None and outcome.state is not StreamState.FAILED:
            usage = self._adapter.last_usage
            if usage is None:
                logger.info(f"No usage reported by {self.model.model_id}; recording zero tokens")
                usage = TokenUsage()
            usage_record = await self._usage_service.record(
                self.model, self.provider, usage, RequestType.PAPER_CHAT
            )

        error = None
        if outcome.state is StreamState.FAILED and outcome.error is not None:
            error = describe_error(outcome.error)

        self._result = ChatTurnResult(
            text=outcome.text,
            state=outcome.state,
            error=error,
            exception=outcome.error,
            assistant_message=assistant_message,
            usage=usage_record,
        )
        return self._result


class ChatTurnService:
    """Runs paper-chat turns against the resolved model."""

    def __init__(
        self,
        router: LLMRouter,
        provider_store: ProviderStore,
        resolver: ModelResolver,
        chat_store: ChatStore,
        usage_service: Optional[UsageService] = None,
    ):
        self._router = router
        self._provider_store = provider_store
        self._resolver = resolver
        self._chat_store = chat_store
        self._usage_service = usage_service

    async def send(
        self,
        paper: Paper,
        query: str,
        history: Optional[List[StoredChatMessage]] = None,
        template: Optional[PromptTemplate] = None,
        pdf_document: Optional[bytes] = None,
    ) -> ChatTurn:
        """
        Start a chat turn about ``paper``.

        Args:
            paper: Paper being discussed
            query: The user's question
            history: Earlier turns; loaded from the chat store when omitted
            template: Paper-chat template; its bound model takes priority and
                its system prompt is placed before the paper context
            pdf_document: Original PDF, attached for PDF-capable models
                when the paper has no converted text

        Raises:
            ValueError: empty query
            LLMNotConfiguredError: no enabled model or provider
        """
        question = query.strip()
        if not question:
            raise ValueError("Query must not be empty")

        model = await self._resolver.resolve(template, PromptScene.PAPER_CHAT)
        if model is None:
            raise LLMNotConfiguredError("No enabled model for paper chat")
        provider = await self._provider_store.get_provider(model.provider_ref)
        if provider is None or not provider.is_enabled:
            raise LLMNotConfiguredError(f"Provider '{model.provider_ref}' is missing or disabled")

        if history is None:
            history = await self._chat_store.list_messages(paper.arxiv_id)

        user_message = StoredChatMessage(paper_id=paper.arxiv_id, role=MessageRole.USER, content=question)
        await self._chat_store.append(user_message)

        window = self.context_window_chars(model)
        if pdf_document:
            strategy = context_strategy.resolve_for_model(paper, window, model.capabilities)
        else:
            strategy = context_strategy.resolve(paper, window)
        system_content = context_strategy.build_system_context(strategy, paper, question)
        if template is not None and template.system_prompt.strip():
            # The template's own instruction goes ahead of the paper context.
            instruction = prompt_variable_engine.resolve(template.system_prompt, paper)
            system_content = f"{instruction}\n\n{system_content}"
        logger.info(f"Chat turn for {paper.arxiv_id} using {model.model_id} ({strategy.value})")

        messages = [ChatMessage(role=MessageRole.SYSTEM, content=system_content)]
        messages.extend(
            m.to_chat_message() for m in history
            if m.role in (MessageRole.USER, MessageRole.ASSISTANT)
        )
        messages.append(user_message.to_chat_message())

        attachment = pdf_document if strategy == ContextStrategy.PDF_DIRECT else None
        adapter = self._router.resolve(provider, model, pdf_document=attachment)
        session = StreamSession(self._router.stream_adapter(adapter, messages, provider))

        return ChatTurn(
            paper=paper,
            user_message=user_message,
            model=model,
            provider=provider,
            strategy=strategy,
            adapter=adapter,
            session=session,
            chat_store=self._chat_store,
            usage_service=self._usage_service,
        )

    @staticmethod
    def context_window_chars(model: ModelConfig) -> int:
        if model.context_window > 0:
            return model.context_window * settings.chars_per_token
        return settings.chat_context_window_chars
