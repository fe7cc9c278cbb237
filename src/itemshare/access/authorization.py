"""MutationAuthorizer — who may create, update and delete an item."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import ItemNotFoundError, UnauthorizedError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.models.items import ItemBase

    from .relations import RelationStore


class MutationAuthorizer:
    """Permission checks for item mutations.

    - create: any authenticated user
    - update: the owner, or a grantee whose grant has ``can_edit``
    - delete: the owner only
    """

    def __init__(self, relations: RelationStore) -> None:
        self._relations = relations

    async def _load(self, session: AsyncSession, item_id: str) -> ItemBase:
        item = await self._relations.get_item(session, item_id)
        if item is None:
            raise ItemNotFoundError(f"Item not found: {item_id}")
        return item

    @staticmethod
    def check_create(requester_id: str) -> None:
        if not requester_id:
            raise UnauthorizedError("Access denied: an authenticated user is required")

    async def can_update(self, session: AsyncSession, requester_id: str, item_id: str) -> bool:
        item = await self._load(session, item_id)
        if item.user_id == requester_id:
            return True
        grant = await self._relations.get_grant(session, item_id, requester_id)
        return grant is not None and grant.can_edit

    async def can_delete(self, session: AsyncSession, requester_id: str, item_id: str) -> bool:
        item = await self._load(session, item_id)
        return item.user_id == requester_id

    async def check_update(
        self, session: AsyncSession, requester_id: str, item_id: str
    ) -> ItemBase:
        """Return the item if *requester_id* may update it, else raise ``UnauthorizedError``."""
        if not await self.can_update(session, requester_id, item_id):
            raise UnauthorizedError(
                f"Access denied: {requester_id!r} cannot edit item {item_id!r}"
            )
        return await self._load(session, item_id)

    async def check_delete(
        self, session: AsyncSession, requester_id: str, item_id: str
    ) -> ItemBase:
        """Return the item if *requester_id* owns it, else raise ``UnauthorizedError``."""
        item = await self._load(session, item_id)
        if item.user_id != requester_id:
            raise UnauthorizedError(
                f"Access denied: only the owner can delete item {item_id!r}"
            )
        return item
