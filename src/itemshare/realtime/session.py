"""ViewSession — per-connection controller for one user's live view."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from itemshare.events import DEFAULT_QUEUE_SIZE

from .listener import ChangeFeedListener, ListenerState
from .reconciler import Reconciler
from .store import ViewStore

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from itemshare.access.exceptions import ItemShareError
    from itemshare.access.types import EffectiveView
    from itemshare.events import ChangeFeed

logger = logging.getLogger(__name__)


class ViewSession:
    """Owns the store, reconciler and listener for one connection.

    The view lives here and nowhere else; consumers receive the session
    (or subscribe to it) rather than reading any global state.

    Usage::

        async with await app.open_session("alice") as session:
            session.subscribe(render)
            ...
    """

    def __init__(
        self,
        feed: ChangeFeed,
        resolve: Callable[[str], Awaitable[EffectiveView]],
        tables: Iterable[str],
        *,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self.store = ViewStore()
        self.reconciler = Reconciler(resolve, self.store)
        self.listener = ChangeFeedListener(
            feed, self.reconciler, tables, queue_size=queue_size
        )
        self._closed = False

    @property
    def view(self) -> EffectiveView | None:
        return self.store.view

    @property
    def last_error(self) -> ItemShareError | None:
        return self.store.last_error

    @property
    def user_id(self) -> str | None:
        return self.listener.user_id

    @property
    def state(self) -> ListenerState:
        return self.listener.state

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self, user_id: str) -> None:
        if self._closed:
            raise RuntimeError("ViewSession is closed")
        await self.listener.connect(user_id)

    async def switch_user(self, user_id: str) -> None:
        """Rebind the session to *user_id*.  The old user's view is dropped first."""
        if self._closed:
            raise RuntimeError("ViewSession is closed")
        await self.listener.disconnect()
        self.store.reset()
        await self.listener.connect(user_id)

    def subscribe(self, listener: Callable[[EffectiveView], None]) -> Callable[[], None]:
        return self.store.subscribe(listener)

    async def refresh(self) -> bool:
        """Run one reconciliation pass now, outside the change feed."""
        user_id = self.listener.user_id
        if user_id is None:
            return False
        return await self.reconciler.reconcile(user_id)

    async def wait_idle(self) -> None:
        await self.listener.wait_idle()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.listener.disconnect()
        self.store.close()

    async def __aenter__(self) -> ViewSession:
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()
