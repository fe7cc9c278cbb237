"""ItemShare — synchronous wrapper around ``ItemShareAsync``."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any

from itemshare._itemshare_async import ItemShareAsync
from itemshare.config import ItemShareConfig

if TYPE_CHECKING:
    from itemshare.access.types import (
        DeleteResult,
        GrantResult,
        ItemResult,
        ListGrantsResult,
        ProfileResult,
        ViewResult,
    )

logger = logging.getLogger(__name__)


class ItemShare:
    """Synchronous facade for items, grants and effective views.

    Presents a blocking API backed by a private event loop in a
    background thread, so scripts and notebooks can use the async core
    directly.  Live sessions are async-only; use ``ItemShareAsync`` for
    those.

    Usage::

        with ItemShare("sqlite+aiosqlite:///items.db") as app:
            app.register_profile("bob", "bob@example.com")
            item = app.create_item("alice", "Report").item
            app.share_item("alice", item.id, "bob@example.com")
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        config: ItemShareConfig | None = None,
    ) -> None:
        self._closed = False

        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._thread.start()

        self._async = self._run(self._async_init(database_url, config))

    async def _async_init(
        self,
        database_url: str | None,
        config: ItemShareConfig | None,
    ) -> ItemShareAsync:
        if database_url is not None:
            base = config or ItemShareConfig()
            config = ItemShareConfig(
                database_url=database_url,
                queue_size=base.queue_size,
                echo=base.echo,
            )
        app = ItemShareAsync(config=config)
        await app.open()
        return app

    def _run(self, coro: Any) -> Any:
        """Submit *coro* to the private loop and block for the result."""
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Dispose the engine, stop the event loop and join the thread."""
        if self._closed:
            return
        self._closed = True

        try:
            self._run(self._async.close())
        finally:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)

    def __enter__(self) -> ItemShare:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Wrappers (sync)
    # ------------------------------------------------------------------

    def register_profile(
        self, user_id: str, email: str, display_name: str | None = None
    ) -> ProfileResult:
        return self._run(self._async.register_profile(user_id, email, display_name))

    def create_item(self, user_id: str, name: str, description: str = "") -> ItemResult:
        return self._run(self._async.create_item(user_id, name, description))

    def update_item(
        self,
        user_id: str,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> ItemResult:
        return self._run(
            self._async.update_item(user_id, item_id, name=name, description=description)
        )

    def delete_item(self, user_id: str, item_id: str) -> DeleteResult:
        return self._run(self._async.delete_item(user_id, item_id))

    def get_item(self, user_id: str, item_id: str) -> ItemResult:
        return self._run(self._async.get_item(user_id, item_id))

    def share_item(
        self,
        user_id: str,
        item_id: str,
        grantee_email: str,
        *,
        can_edit: bool = False,
    ) -> GrantResult:
        return self._run(
            self._async.share_item(user_id, item_id, grantee_email, can_edit=can_edit)
        )

    def list_shares(self, user_id: str, item_id: str) -> ListGrantsResult:
        return self._run(self._async.list_shares(user_id, item_id))

    def list_shared_with_me(self, user_id: str) -> ListGrantsResult:
        return self._run(self._async.list_shared_with_me(user_id))

    def resolve_view(self, user_id: str) -> ViewResult:
        return self._run(self._async.resolve_view(user_id))
