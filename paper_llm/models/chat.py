"""
Chat message data models persisted by the document store.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..providers.streaming import StreamState
from ..providers.types import ChatMessage, MessageRole
from .usage import UsageRecord


class StoredChatMessage(BaseModel):
    """A chat turn attached to a paper."""
    paper_id: str
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class ChatTurnResult(BaseModel):
    """Outcome of one paper-chat turn once its stream has finished."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    text: str
    state: StreamState
    error: Optional[str] = Field(default=None, description="User-facing error message")
    exception: Optional[BaseException] = None
    assistant_message: Optional[StoredChatMessage] = Field(
        default=None,
        description="Persisted reply; None when nothing was generated"
    )
    usage: Optional[UsageRecord] = None
