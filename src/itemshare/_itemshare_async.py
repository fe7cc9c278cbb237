"""ItemShareAsync — primary async class wiring storage, sharing and live views."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from itemshare.access.access_store import AccessStore
from itemshare.access.authorization import MutationAuthorizer
from itemshare.access.exceptions import ItemShareError, TransientFailureError
from itemshare.access.identity import IdentityResolver
from itemshare.access.items import ItemService
from itemshare.access.relations import RelationStore
from itemshare.access.sharing import ShareRegistry
from itemshare.access.types import (
    DeleteResult,
    EffectiveView,
    GrantInfo,
    GrantResult,
    ItemInfo,
    ItemResult,
    ListGrantsResult,
    ProfileInfo,
    ProfileResult,
    ViewResult,
)
from itemshare.config import ItemShareConfig
from itemshare.events import ChangeEvent, ChangeFeed, ChangeKind
from itemshare.realtime.session import ViewSession

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine

    from itemshare.models.items import ItemBase
    from itemshare.models.profiles import ProfileBase
    from itemshare.models.shares import SharedItemBase

logger = logging.getLogger(__name__)


class ItemShareAsync:
    """Async facade over items, grants, effective views and live sessions.

    Every operation runs in its own session: commit on success, rollback
    on error.  After a successful commit the matching table-scoped change
    event is published, so every open ``ViewSession`` re-resolves no
    matter which caller made the change.  Failures come back as results
    with ``success=False`` and an ``error`` kind, never as exceptions.

    Usage::

        engine = create_async_engine("postgresql+asyncpg://...")
        async with ItemShareAsync(engine) as app:
            created = await app.create_item("alice", "Report")
            await app.share_item("alice", created.item.id, "bob@example.com")
            session = await app.open_session("bob")
    """

    def __init__(
        self,
        engine: AsyncEngine | None = None,
        *,
        config: ItemShareConfig | None = None,
        feed: ChangeFeed | None = None,
        item_model: type[ItemBase] | None = None,
        share_model: type[SharedItemBase] | None = None,
        profile_model: type[ProfileBase] | None = None,
    ) -> None:
        self._config = config or ItemShareConfig()
        self._owns_engine = engine is None
        self._engine = engine or create_async_engine(
            self._config.database_url, echo=self._config.echo
        )
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        self._feed = feed or ChangeFeed()

        self._relations = RelationStore(item_model, share_model, profile_model)
        self._identity = IdentityResolver(self._relations)
        self._access = AccessStore(self._relations)
        self._authorizer = MutationAuthorizer(self._relations)
        self._items = ItemService(self._relations, self._authorizer)
        self._sharing = ShareRegistry(self._relations, self._identity)

        self._sessions: list[ViewSession] = []
        self._opened = False
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Create the item, grant and profile tables if they do not exist."""
        if self._opened:
            return
        models = (
            self._relations.item_model,
            self._relations.share_model,
            self._relations.profile_model,
        )
        async with self._engine.begin() as conn:
            for model in models:
                await conn.run_sync(
                    lambda c, m=model: m.__table__.create(c, checkfirst=True)  # type: ignore[attr-defined]
                )
        self._opened = True

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        for session in list(self._sessions):
            await session.close()
        self._sessions.clear()
        self._feed.clear()
        if self._owns_engine:
            await self._engine.dispose()

    async def __aenter__(self) -> ItemShareAsync:
        await self.open()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()

    @asynccontextmanager
    async def session_for(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.warning("Storage failure, transaction rolled back", exc_info=True)
            raise TransientFailureError("Storage unavailable") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def _publish(self, kind: ChangeKind, table: str) -> None:
        delivered = await self._feed.emit(ChangeEvent(kind=kind, table=table))
        logger.debug("Published %s on %s to %d subscription(s)", kind.value, table, delivered)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    async def register_profile(
        self,
        user_id: str,
        email: str,
        display_name: str | None = None,
    ) -> ProfileResult:
        """Register the email *user_id* is known by."""
        try:
            async with self.session_for() as sess:
                profile = await self._identity.register(sess, user_id, email, display_name)
                info = ProfileInfo.from_model(profile)
        except ItemShareError as e:
            logger.debug("Profile registration failed for %s: %s", user_id, e)
            return ProfileResult(success=False, message=str(e), error=e.kind)
        return ProfileResult(success=True, message=f"Registered {info.email}", profile=info)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def create_item(self, user_id: str, name: str, description: str = "") -> ItemResult:
        try:
            async with self.session_for() as sess:
                item = await self._items.create_item(sess, user_id, name, description)
                info = ItemInfo.from_model(item)
        except ItemShareError as e:
            return ItemResult(success=False, message=str(e), error=e.kind)

        await self._publish(ChangeKind.INSERT, self._relations.item_table)
        return ItemResult(success=True, message=f"Created item {info.name!r}", item=info)

    async def update_item(
        self,
        user_id: str,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> ItemResult:
        try:
            async with self.session_for() as sess:
                item = await self._items.update_item(
                    sess, user_id, item_id, name=name, description=description
                )
                info = ItemInfo.from_model(item)
        except ItemShareError as e:
            return ItemResult(success=False, message=str(e), error=e.kind)

        await self._publish(ChangeKind.UPDATE, self._relations.item_table)
        return ItemResult(success=True, message=f"Updated item {info.name!r}", item=info)

    async def delete_item(self, user_id: str, item_id: str) -> DeleteResult:
        try:
            async with self.session_for() as sess:
                await self._items.delete_item(sess, user_id, item_id)
        except ItemShareError as e:
            return DeleteResult(success=False, message=str(e), item_id=item_id, error=e.kind)

        await self._publish(ChangeKind.DELETE, self._relations.item_table)
        return DeleteResult(success=True, message=f"Deleted item {item_id}", item_id=item_id)

    async def get_item(self, user_id: str, item_id: str) -> ItemResult:
        try:
            async with self.session_for() as sess:
                item = await self._items.get_item(sess, user_id, item_id)
                info = ItemInfo.from_model(item)
        except ItemShareError as e:
            return ItemResult(success=False, message=str(e), error=e.kind)
        return ItemResult(success=True, message="OK", item=info)

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    async def share_item(
        self,
        user_id: str,
        item_id: str,
        grantee_email: str,
        *,
        can_edit: bool = False,
    ) -> GrantResult:
        """Grant the user registered as *grantee_email* access to *item_id*.

        Safe to retry: a repeated call fails with ``duplicate_grant`` and
        leaves the first grant untouched.
        """
        try:
            async with self.session_for() as sess:
                grant = await self._sharing.grant(
                    sess, user_id, item_id, grantee_email, can_edit
                )
                info = GrantInfo.from_model(grant)
        except ItemShareError as e:
            return GrantResult(success=False, message=str(e), error=e.kind)

        await self._publish(ChangeKind.INSERT, self._relations.share_table)
        mode = "edit" if info.can_edit else "view"
        return GrantResult(
            success=True,
            message=f"Shared with {grantee_email.strip()} ({mode})",
            grant=info,
        )

    async def list_shares(self, user_id: str, item_id: str) -> ListGrantsResult:
        """List grants on an item the caller owns."""
        try:
            async with self.session_for() as sess:
                grants = await self._sharing.list_grants_for_item(sess, user_id, item_id)
                infos = [GrantInfo.from_model(g) for g in grants]
        except ItemShareError as e:
            return ListGrantsResult(success=False, message=str(e), error=e.kind)
        return ListGrantsResult(
            success=True, message=f"Found {len(infos)} share(s)", grants=infos
        )

    async def list_shared_with_me(self, user_id: str) -> ListGrantsResult:
        try:
            async with self.session_for() as sess:
                grants = await self._sharing.list_shared_with(sess, user_id)
                infos = [GrantInfo.from_model(g) for g in grants]
        except ItemShareError as e:
            return ListGrantsResult(success=False, message=str(e), error=e.kind)
        return ListGrantsResult(
            success=True, message=f"Found {len(infos)} share(s)", grants=infos
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    async def _resolve(self, user_id: str) -> EffectiveView:
        async with self.session_for() as sess:
            return await self._access.resolve_view(sess, user_id)

    async def resolve_view(self, user_id: str) -> ViewResult:
        """Resolve *user_id*'s owned and shared items once."""
        try:
            view = await self._resolve(user_id)
        except ItemShareError as e:
            return ViewResult(success=False, message=str(e), error=e.kind)
        return ViewResult(
            success=True,
            message=f"Found {len(view.owned)} owned and {len(view.shared)} shared item(s)",
            view=view,
        )

    async def open_session(self, user_id: str) -> ViewSession:
        """Start a live view for *user_id* that follows every committed change."""
        session = ViewSession(
            self._feed,
            self._resolve,
            (self._relations.item_table, self._relations.share_table),
            queue_size=self._config.queue_size,
        )
        await session.start(user_id)
        self._sessions = [s for s in self._sessions if not s.closed]
        self._sessions.append(session)
        return session

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def relations(self) -> RelationStore:
        return self._relations
