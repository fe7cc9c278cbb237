"""ChangeFeed and change event types for realtime consistency.

Notifications are table-granular: an event says *which* table changed and
how, never *which row*.  Consumers must treat every event as "something
changed, re-resolve".
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 64


class ChangeKind(Enum):
    """Types of row mutations reported by the change feed."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Immutable record of a mutation on a watched table.

    Attributes:
        kind: The kind of mutation that occurred.
        table: Name of the mutated table.
    """

    kind: ChangeKind
    table: str


class Subscription:
    """Cancellable handle on a table-scoped event stream.

    Events are buffered in a bounded queue.  When the queue is full new
    events are dropped: a queued event already guarantees the consumer
    will re-resolve after the current burst.
    """

    def __init__(
        self,
        feed: ChangeFeed,
        tables: frozenset[str],
        maxsize: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        if maxsize < 1:
            raise ValueError(f"Subscription queue size must be positive, got {maxsize}")
        self._feed = feed
        self.tables = tables
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=maxsize)
        self._cancelled = False
        self.dropped = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    @property
    def pending(self) -> int:
        """Number of events waiting to be consumed."""
        return self._queue.qsize()

    def offer(self, event: ChangeEvent) -> bool:
        """Enqueue *event* without blocking.  Return False if it was dropped."""
        if self._cancelled or event.table not in self.tables:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug("Subscription queue full, dropped %s on %s", event.kind.value, event.table)
            return False
        return True

    async def get(self) -> ChangeEvent:
        """Wait for the next event."""
        return await self._queue.get()

    def drain(self) -> list[ChangeEvent]:
        """Remove and return every event already queued."""
        events: list[ChangeEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return events

    def task_done(self, count: int = 1) -> None:
        """Mark *count* consumed events as processed."""
        for _ in range(count):
            self._queue.task_done()

    async def join(self) -> None:
        """Wait until every enqueued event has been processed."""
        await self._queue.join()

    def cancel(self) -> None:
        """Detach from the feed.  Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        self._feed._remove(self)


class ChangeFeed:
    """Fans out table-scoped change events to subscriptions.

    Publishing never blocks and never raises because of a subscriber:
    a slow consumer loses events, it does not stall writers.
    """

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        tables: Iterable[str],
        *,
        maxsize: int = DEFAULT_QUEUE_SIZE,
    ) -> Subscription:
        """Open a subscription receiving events for *tables*."""
        sub = Subscription(self, frozenset(tables), maxsize=maxsize)
        self._subscriptions.append(sub)
        logger.debug("Subscribed to %s", sorted(sub.tables))
        return sub

    def _remove(self, sub: Subscription) -> None:
        try:
            self._subscriptions.remove(sub)
        except ValueError:
            return
        logger.debug("Unsubscribed from %s", sorted(sub.tables))

    async def emit(self, event: ChangeEvent) -> int:
        """Dispatch *event* to every matching subscription.  Return how many accepted it."""
        delivered = 0
        for sub in list(self._subscriptions):
            if sub.offer(event):
                delivered += 1
        return delivered

    @property
    def subscription_count(self) -> int:
        """Number of live subscriptions."""
        return len(self._subscriptions)

    def clear(self) -> None:
        """Cancel every subscription."""
        for sub in list(self._subscriptions):
            sub.cancel()
