"""
Streaming helpers.

- iter_sse_data: pulls ``data:`` payloads out of a Server-Sent-Events line stream.
- StreamSession: wraps a chunk iterator with text accumulation and
  cooperative cancellation.
"""
import asyncio
import logging
from enum import Enum
from typing import AsyncIterator, Callable, List, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"


async def iter_sse_data(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """
    Yield the payload of every ``data:`` line, in wire order.

    ``event:``/``id:`` fields, comments and blank separators are skipped.
    The payload is returned verbatim (one optional leading space removed),
    so sentinels such as ``[DONE]`` can be checked before any JSON decode.
    """
    async for raw_line in lines:
        line = raw_line.rstrip("\r")
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        payload = line[len(SSE_DATA_PREFIX):]
        if payload.startswith(" "):
            payload = payload[1:]
        yield payload


class StreamState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class StreamResult(BaseModel):
    """Terminal outcome of a stream: exactly one of completed, cancelled or failed."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    text: str
    state: StreamState
    error: Optional[BaseException] = None

    @property
    def is_empty(self) -> bool:
        return not self.text


class StreamSession:
    """
    A cancellable, pull-based text stream.

    Iterate it directly (``async for chunk in session``) or drive it in a
    background task with ``start()`` and collect the outcome with ``wait()``.
    ``cancel()`` may be called any number of times, from any task; once it
    returns no further chunks are observed and ``text`` holds exactly the
    chunks received so far.
    """

    def __init__(self, source: AsyncIterator[str]):
        self._source = source
        self._parts: List[str] = []
        self._task: Optional[asyncio.Task] = None
        self._step: Optional[asyncio.Task] = None
        self.state = StreamState.ACTIVE
        self.error: Optional[BaseException] = None

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def is_finished(self) -> bool:
        return self.state is not StreamState.ACTIVE

    def __aiter__(self) -> "StreamSession":
        return self

    async def __anext__(self) -> str:
        if self.state is not StreamState.ACTIVE:
            raise StopAsyncIteration
        # Each read runs as its own task so cancel() can interrupt a stalled one.
        step = asyncio.ensure_future(self._pull())
        self._step = step
        try:
            chunk = await step
        except StopAsyncIteration:
            if self.state is StreamState.ACTIVE:
                self.state = StreamState.COMPLETED
            raise
        except asyncio.CancelledError:
            if self.state is StreamState.CANCELLED and step.cancelled():
                # Read interrupted by cancel(); the consumer just stops.
                raise StopAsyncIteration
            if self.state is StreamState.ACTIVE:
                self.state = StreamState.CANCELLED
            raise
        except Exception as e:
            if self.state is not StreamState.ACTIVE:
                # Transport torn down by cancel(); not a failure.
                raise StopAsyncIteration from e
            self.state = StreamState.FAILED
            self.error = e
            raise
        finally:
            self._step = None
        if self.state is not StreamState.ACTIVE:
            raise StopAsyncIteration
        self._parts.append(chunk)
        return chunk

    async def _pull(self) -> str:
        return await self._source.__anext__()

    def start(self, on_chunk: Optional[Callable[[str], None]] = None) -> asyncio.Task:
        """Consume the stream in a background task."""
        if self._task is None:
            self._task = asyncio.create_task(self._pump(on_chunk))
        return self._task

    async def _pump(self, on_chunk: Optional[Callable[[str], None]]) -> None:
        try:
            async for chunk in self:
                if on_chunk is not None:
                    on_chunk(chunk)
        except asyncio.CancelledError:
            if self.state is not StreamState.CANCELLED:
                raise
        except Exception as e:
            # Recorded on the session; surfaced through wait().
            logger.warning("Stream failed after %d chars: %s", len(self.text), e)

    async def wait(self) -> StreamResult:
        """Drain the stream (starting it if needed) and return its outcome."""
        task = self.start()
        try:
            await task
        except asyncio.CancelledError:
            if self.state is not StreamState.CANCELLED:
                raise
        return self.result()

    def result(self) -> StreamResult:
        return StreamResult(text=self.text, state=self.state, error=self.error)

    async def cancel(self) -> None:
        """
        Abort the stream, keeping the partial text. No-op once finished.

        A read pending in another task is interrupted rather than left
        waiting for the server's next chunk.
        """
        if self.state is not StreamState.ACTIVE:
            return
        self.state = StreamState.CANCELLED
        logger.info("Stream cancelled after %d chars", len(self.text))

        step = self._step
        if step is not None and not step.done():
            step.cancel()
            await asyncio.wait([step])

        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            await asyncio.wait([task])
        await self._close_source()

    async def _close_source(self) -> None:
        aclose = getattr(self._source, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except RuntimeError as e:
            # Source is being iterated outside this session.
            logger.debug("Could not close stream source: %s", e)
