"""ShareRegistry — grant creation and validation.

Stateless service that receives its collaborators at construction and a
session at call time.  Grants are create-only: a second grant for the
same ``(item, grantee)`` pair is rejected, never merged into the first.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import (
    DuplicateGrantError,
    ItemNotFoundError,
    SelfShareForbiddenError,
    UnauthorizedError,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.models.shares import SharedItemBase

    from .identity import IdentityResolver
    from .relations import RelationStore

logger = logging.getLogger(__name__)


class ShareRegistry:
    """Creates access grants between an item's owner and other users."""

    def __init__(self, relations: RelationStore, identity: IdentityResolver) -> None:
        self._relations = relations
        self._identity = identity

    async def grant(
        self,
        session: AsyncSession,
        requester_id: str,
        item_id: str,
        grantee_identifier: str,
        can_edit: bool = False,
    ) -> SharedItemBase:
        """Grant *grantee_identifier* access to *item_id*.  Flushes but does not commit.

        Checks run in order: grantee resolution, self-share, ownership,
        existing grant.  The requester must own the item; this is checked
        here rather than trusted from the caller.
        """
        grantee_id = await self._identity.resolve(session, grantee_identifier)
        if grantee_id == requester_id:
            raise SelfShareForbiddenError("Cannot share an item with yourself")

        item = await self._relations.get_item(session, item_id)
        if item is None:
            raise ItemNotFoundError(f"Item not found: {item_id}")
        if item.user_id != requester_id:
            raise UnauthorizedError(
                f"Access denied: {requester_id!r} does not own item {item_id!r}"
            )

        existing = await self._relations.get_grant(session, item_id, grantee_id)
        if existing is not None:
            raise DuplicateGrantError(
                f"Item {item_id!r} is already shared with {grantee_id!r}"
            )

        grant = await self._relations.insert_grant(
            session, item_id, requester_id, grantee_id, can_edit
        )
        logger.debug(
            "Granted %s on %s to %s (can_edit=%s)",
            requester_id, item_id, grantee_id, can_edit,
        )
        return grant

    async def list_grants_for_item(
        self,
        session: AsyncSession,
        requester_id: str,
        item_id: str,
    ) -> list[SharedItemBase]:
        """List grants on *item_id*.  Only the owner may see them."""
        item = await self._relations.get_item(session, item_id)
        if item is None:
            raise ItemNotFoundError(f"Item not found: {item_id}")
        if item.user_id != requester_id:
            raise UnauthorizedError(
                f"Access denied: {requester_id!r} does not own item {item_id!r}"
            )
        return await self._relations.query_grants_on_item(session, item_id)

    async def list_shared_with(
        self,
        session: AsyncSession,
        grantee_id: str,
    ) -> list[SharedItemBase]:
        """List all grants held by *grantee_id*, including stale ones."""
        return await self._relations.query_shared(session, grantee_id)
