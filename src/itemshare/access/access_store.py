"""AccessStore — computes a user's owned and shared items.

Resolution composes reads against the item and grant relations.  It is
recomputed from scratch every time; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .types import EffectivePermission, EffectiveView, ItemInfo, ViewEntry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.models.items import ItemBase

    from .relations import RelationStore

logger = logging.getLogger(__name__)


class AccessStore:
    def __init__(self, relations: RelationStore) -> None:
        self._relations = relations

    async def resolve_owned(self, session: AsyncSession, user_id: str) -> list[ItemBase]:
        """Items owned by *user_id*, ordered by ``created_at`` descending."""
        return await self._relations.query_owned(session, user_id)

    async def resolve_shared(
        self, session: AsyncSession, user_id: str
    ) -> list[tuple[ItemBase, bool]]:
        """Items shared with *user_id*, each paired with its ``can_edit`` flag.

        When the user holds no grants, no item lookup is issued at all.
        Grants whose item no longer exists are dropped silently.
        """
        grants = await self._relations.query_shared(session, user_id)
        if not grants:
            return []

        can_edit_by_item = {g.item_id: g.can_edit for g in grants}
        items = await self._relations.query_items(session, list(can_edit_by_item))

        stale = len(can_edit_by_item) - len(items)
        if stale:
            logger.debug("Dropped %d stale grant(s) for %s", stale, user_id)

        return [
            (item, can_edit_by_item[item.id])
            for item in items
            if item.user_id != user_id
        ]

    async def resolve_view(self, session: AsyncSession, user_id: str) -> EffectiveView:
        """Owned entries (``owner``) followed by shared entries (``editor``/``viewer``)."""
        owned = await self.resolve_owned(session, user_id)
        shared = await self.resolve_shared(session, user_id)
        return EffectiveView(
            user_id=user_id,
            owned=tuple(
                ViewEntry(ItemInfo.from_model(item), EffectivePermission.OWNER)
                for item in owned
            ),
            shared=tuple(
                ViewEntry(ItemInfo.from_model(item), EffectivePermission.for_grant(can_edit))
                for item, can_edit in shared
            ),
        )

    async def effective_permission(
        self, session: AsyncSession, user_id: str, item_id: str
    ) -> EffectivePermission | None:
        """Permission *user_id* holds on *item_id*, or None if the item is not visible."""
        item = await self._relations.get_item(session, item_id)
        if item is None:
            return None
        if item.user_id == user_id:
            return EffectivePermission.OWNER
        grant = await self._relations.get_grant(session, item_id, user_id)
        if grant is None:
            return None
        return EffectivePermission.for_grant(grant.can_edit)
