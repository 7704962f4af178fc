"""Subscriber handles and the registry that owns them."""

import asyncio
from collections.abc import AsyncIterator

from ..logging_config import get_logger

logger = get_logger(__name__)


class SubscriberClosedError(RuntimeError):
    """Raised when writing to a subscriber whose stream has closed."""


class Subscriber:
    """Writable sink behind one open event stream.

    Frames are queued by ``write()`` and drained by the streaming response
    through ``frames()``. Identity is the object itself.
    """

    def __init__(self, max_queue: int = 100):
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=max_queue)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, frame: str) -> None:
        """Queue a frame without suspending.

        Raises:
            SubscriberClosedError: the stream was closed.
            asyncio.QueueFull: the reader stopped draining.
        """
        if self._closed:
            raise SubscriberClosedError("Subscriber stream is closed")
        self._queue.put_nowait(frame)

    def close(self) -> None:
        """Stop accepting frames and wake the reader."""
        if self._closed:
            return
        self._closed = True
        if self._queue.full():
            # Reader is gone or stalled; make room for the end marker
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    async def frames(self) -> AsyncIterator[str]:
        """Yield queued frames until the subscriber is closed."""
        while True:
            frame = await self._queue.get()
            if frame is None:
                return
            yield frame


class SubscriberRegistry:
    """The set of currently connected subscribers."""

    def __init__(self) -> None:
        self._subscribers: set[Subscriber] = set()

    def add(self, subscriber: Subscriber) -> None:
        self._subscribers.add(subscriber)
        logger.debug("Subscriber added (%s connected)", len(self._subscribers))

    def remove(self, subscriber: Subscriber) -> bool:
        """Remove if present. Returns False for an unknown handle."""
        if subscriber not in self._subscribers:
            return False
        self._subscribers.discard(subscriber)
        logger.debug("Subscriber removed (%s connected)", len(self._subscribers))
        return True

    def snapshot(self) -> tuple[Subscriber, ...]:
        """Current members, safe to iterate while the set changes."""
        return tuple(self._subscribers)

    def close_all(self) -> None:
        """Close and drop every subscriber (service shutdown)."""
        for subscriber in self.snapshot():
            subscriber.close()
            self.remove(subscriber)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, subscriber: object) -> bool:
        return subscriber in self._subscribers
