"""In-process channel for removal notifications."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from hajari.types.claims import RemovalNotice


logger = logging.getLogger(__name__)


class NotificationChannel:
    """
    Best-effort fan-out of removal notices to subscribers.

    Each subscriber gets its own bounded queue. Publishing never blocks:
    a notice is dropped for a subscriber whose queue is full, and dropped
    entirely when nobody is listening.
    """

    def __init__(self, maxsize: int = 100):
        self.maxsize = maxsize
        self._subscribers: List[asyncio.Queue] = []
        self.published = 0
        self.dropped = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        """Register a new subscriber queue."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.maxsize)
        self._subscribers.append(queue)
        logger.debug(f"Subscriber added ({len(self._subscribers)} total)")
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        """Remove a subscriber queue. Unknown queues are ignored."""
        try:
            self._subscribers.remove(queue)
        except ValueError:
            return
        logger.debug(f"Subscriber removed ({len(self._subscribers)} total)")

    @asynccontextmanager
    async def subscription(self) -> AsyncIterator[asyncio.Queue]:
        """Subscribe for the duration of a ``async with`` block."""
        queue = self.subscribe()
        try:
            yield queue
        finally:
            self.unsubscribe(queue)

    def publish(self, notice: RemovalNotice) -> bool:
        """
        Deliver a notice to every subscriber without waiting.

        Returns:
            True if at least one subscriber received the notice
        """
        delivered = False

        for queue in list(self._subscribers):
            try:
                queue.put_nowait(notice)
                delivered = True
            except asyncio.QueueFull:
                logger.debug(f"Subscriber queue full, dropping notice for {notice.identifier}")

        if delivered:
            self.published += 1
        else:
            self.dropped += 1
            logger.debug(f"No receiver for notice: {notice.message}")

        return delivered
