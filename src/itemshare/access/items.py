"""ItemService — item create/update/delete with authorization enforced."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import ItemNotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.models.items import ItemBase

    from .authorization import MutationAuthorizer
    from .relations import RelationStore

logger = logging.getLogger(__name__)


def clean_name(name: str) -> str:
    """Trim *name* and reject it if nothing is left."""
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("Item name must not be empty")
    return cleaned


class ItemService:
    def __init__(self, relations: RelationStore, authorizer: MutationAuthorizer) -> None:
        self._relations = relations
        self._authorizer = authorizer

    async def create_item(
        self,
        session: AsyncSession,
        user_id: str,
        name: str,
        description: str = "",
    ) -> ItemBase:
        self._authorizer.check_create(user_id)
        item = await self._relations.insert_item(
            session, user_id, clean_name(name), description.strip()
        )
        logger.debug("Created item %s for %s", item.id, user_id)
        return item

    async def update_item(
        self,
        session: AsyncSession,
        user_id: str,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> ItemBase:
        """Update name and/or description.  Owner or an editor grantee only."""
        new_name = clean_name(name) if name is not None else None
        new_description = description.strip() if description is not None else None
        item = await self._authorizer.check_update(session, user_id, item_id)
        return await self._relations.update_item(
            session, item, name=new_name, description=new_description
        )

    async def delete_item(self, session: AsyncSession, user_id: str, item_id: str) -> None:
        """Delete an item.  Owner only; grants on it become stale."""
        item = await self._authorizer.check_delete(session, user_id, item_id)
        await self._relations.delete_item(session, item)
        logger.debug("Deleted item %s for %s", item_id, user_id)

    async def get_item(self, session: AsyncSession, user_id: str, item_id: str) -> ItemBase:
        """Fetch an item visible to *user_id*.

        Items the user can neither own nor see through a grant are reported
        as not found.
        """
        item = await self._relations.get_item(session, item_id)
        if item is None:
            raise ItemNotFoundError(f"Item not found: {item_id}")
        if item.user_id != user_id:
            grant = await self._relations.get_grant(session, item_id, user_id)
            if grant is None:
                raise ItemNotFoundError(f"Item not found: {item_id}")
        return item
