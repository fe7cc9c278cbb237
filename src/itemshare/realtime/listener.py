"""ChangeFeedListener — subscription lifecycle and coalescing event pump."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING

from itemshare.events import DEFAULT_QUEUE_SIZE

if TYPE_CHECKING:
    from collections.abc import Iterable

    from itemshare.events import ChangeFeed, Subscription

    from .reconciler import Reconciler

logger = logging.getLogger(__name__)


class ListenerState(Enum):
    DISCONNECTED = "disconnected"
    SUBSCRIBING = "subscribing"
    ACTIVE = "active"


class ChangeFeedListener:
    """Keeps one user's view in sync with the change feed.

    ``connect`` subscribes to the watched tables, runs an initial pass and
    starts a single pump task.  The pump takes one event, drains whatever
    else is already queued and runs one pass for the whole burst, so
    overlapping notifications never produce overlapping passes.
    ``disconnect`` cancels the subscription and the pump; switching users
    is a disconnect followed by a fresh connect.
    """

    def __init__(
        self,
        feed: ChangeFeed,
        reconciler: Reconciler,
        tables: Iterable[str],
        *,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self._feed = feed
        self._reconciler = reconciler
        self._tables = frozenset(tables)
        self._queue_size = queue_size
        self._state = ListenerState.DISCONNECTED
        self._user_id: str | None = None
        self._subscription: Subscription | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def subscription(self) -> Subscription | None:
        return self._subscription

    async def connect(self, user_id: str) -> None:
        """Start watching for *user_id*, replacing any previous user."""
        if self._state is not ListenerState.DISCONNECTED:
            await self.disconnect()

        self._state = ListenerState.SUBSCRIBING
        self._user_id = user_id
        sub = self._feed.subscribe(self._tables, maxsize=self._queue_size)
        self._subscription = sub
        logger.debug("Listener subscribing for %s", user_id)

        # Events arriving during the initial pass stay queued for the pump.
        await self._run_pass(user_id)
        if self._subscription is not sub:
            return

        self._task = asyncio.create_task(self._pump(sub, user_id))
        self._state = ListenerState.ACTIVE
        logger.debug("Listener active for %s", user_id)

    async def disconnect(self) -> None:
        """Tear down the subscription and drop any in-flight pass.  Idempotent."""
        if self._state is ListenerState.DISCONNECTED:
            return

        self._reconciler.invalidate()
        sub, self._subscription = self._subscription, None
        if sub is not None:
            sub.cancel()

        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        # Release anyone blocked in wait_idle() on the old subscription.
        if sub is not None:
            sub.task_done(len(sub.drain()))

        logger.debug("Listener disconnected for %s", self._user_id)
        self._user_id = None
        self._state = ListenerState.DISCONNECTED

    async def wait_idle(self) -> None:
        """Wait until every queued notification has been reconciled."""
        sub = self._subscription
        if sub is not None:
            await sub.join()

    async def _pump(self, sub: Subscription, user_id: str) -> None:
        while True:
            await sub.get()
            burst = 1 + len(sub.drain())
            try:
                await self._run_pass(user_id)
            finally:
                sub.task_done(burst)

    async def _run_pass(self, user_id: str) -> None:
        try:
            await self._reconciler.reconcile(user_id)
        except Exception:
            logger.warning("Reconciliation for %s crashed", user_id, exc_info=True)
