"""RelationStore — typed, named operations over the item, grant and profile tables.

Stateless service that receives the concrete models at construction and a
session at call time.  Every storage failure leaves this module as an
``ItemShareError``: uniqueness violations on grant insert become
``DuplicateGrantError`` and anything else from SQLAlchemy becomes
``TransientFailureError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from itemshare.models.items import Item
from itemshare.models.profiles import Profile
from itemshare.models.shares import SharedItem

from .exceptions import DuplicateGrantError, TransientFailureError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.models.items import ItemBase
    from itemshare.models.profiles import ProfileBase
    from itemshare.models.shares import SharedItemBase

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Map SQLAlchemy failures raised inside the block to ``TransientFailureError``."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.warning("Storage failure during %s", operation, exc_info=True)
        raise TransientFailureError(f"Storage unavailable during {operation}") from e


class RelationStore:
    """Named reads and writes against ``items``, ``shared_items`` and ``profiles``.

    Constructor receives the concrete models so callers can use custom
    SQLModel subclasses with different table names.
    """

    def __init__(
        self,
        item_model: type[ItemBase] | None = None,
        share_model: type[SharedItemBase] | None = None,
        profile_model: type[ProfileBase] | None = None,
    ) -> None:
        self.item_model: type[ItemBase] = item_model or Item
        self.share_model: type[SharedItemBase] = share_model or SharedItem
        self.profile_model: type[ProfileBase] = profile_model or Profile

    @property
    def item_table(self) -> str:
        return self.item_model.__tablename__  # type: ignore[return-value]

    @property
    def share_table(self) -> str:
        return self.share_model.__tablename__  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def insert_item(
        self,
        session: AsyncSession,
        owner_id: str,
        name: str,
        description: str = "",
    ) -> ItemBase:
        """Insert an item owned by *owner_id*. Flushes but does not commit."""
        item = self.item_model(user_id=owner_id, name=name, description=description)
        with _storage_errors("insert_item"):
            session.add(item)
            await session.flush()
        return item

    async def get_item(self, session: AsyncSession, item_id: str) -> ItemBase | None:
        with _storage_errors("get_item"):
            return await session.get(self.item_model, item_id)

    async def update_item(
        self,
        session: AsyncSession,
        item: ItemBase,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> ItemBase:
        """Apply the given field changes and bump ``updated_at``."""
        if name is not None:
            item.name = name
        if description is not None:
            item.description = description
        item.updated_at = datetime.now(UTC)
        with _storage_errors("update_item"):
            session.add(item)
            await session.flush()
        return item

    async def delete_item(self, session: AsyncSession, item: ItemBase) -> None:
        """Delete *item*.  Grants referencing it are left in place."""
        with _storage_errors("delete_item"):
            await session.delete(item)
            await session.flush()

    async def query_owned(self, session: AsyncSession, owner_id: str) -> list[ItemBase]:
        """Items owned by *owner_id*, newest first.  Ties are broken by id."""
        model = self.item_model
        with _storage_errors("query_owned"):
            result = await session.execute(
                select(model)
                .where(model.user_id == owner_id)
                .order_by(model.created_at.desc(), model.id)  # type: ignore[attr-defined]
            )
            return list(result.scalars().all())

    async def query_items(
        self, session: AsyncSession, item_ids: Iterable[str]
    ) -> list[ItemBase]:
        """Batch-fetch items by id.  Missing ids are simply absent from the result."""
        ids = list(item_ids)
        model = self.item_model
        with _storage_errors("query_items"):
            result = await session.execute(
                select(model).where(model.id.in_(ids))  # type: ignore[union-attr]
            )
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    async def insert_grant(
        self,
        session: AsyncSession,
        item_id: str,
        owner_id: str,
        grantee_id: str,
        can_edit: bool,
    ) -> SharedItemBase:
        """Insert a grant.  Flushes but does not commit.

        A uniqueness violation on ``(item_id, shared_with)`` raises
        ``DuplicateGrantError``.  The session must be rolled back afterwards.
        """
        grant = self.share_model(
            item_id=item_id,
            shared_by=owner_id,
            shared_with=grantee_id,
            can_edit=can_edit,
        )
        try:
            session.add(grant)
            await session.flush()
        except IntegrityError as e:
            raise DuplicateGrantError(
                f"Item {item_id!r} is already shared with {grantee_id!r}"
            ) from e
        except SQLAlchemyError as e:
            logger.warning("Storage failure during insert_grant", exc_info=True)
            raise TransientFailureError("Storage unavailable during insert_grant") from e
        return grant

    async def get_grant(
        self, session: AsyncSession, item_id: str, grantee_id: str
    ) -> SharedItemBase | None:
        model = self.share_model
        with _storage_errors("get_grant"):
            result = await session.execute(
                select(model).where(
                    model.item_id == item_id,
                    model.shared_with == grantee_id,
                )
            )
            return result.scalar_one_or_none()

    async def query_shared(
        self, session: AsyncSession, grantee_id: str
    ) -> list[SharedItemBase]:
        """All grants held by *grantee_id*."""
        model = self.share_model
        with _storage_errors("query_shared"):
            result = await session.execute(
                select(model).where(model.shared_with == grantee_id)
            )
            return list(result.scalars().all())

    async def query_grants_on_item(
        self, session: AsyncSession, item_id: str
    ) -> list[SharedItemBase]:
        model = self.share_model
        with _storage_errors("query_grants_on_item"):
            result = await session.execute(
                select(model)
                .where(model.item_id == item_id)
                .order_by(model.created_at)  # type: ignore[arg-type]
            )
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def insert_profile(
        self,
        session: AsyncSession,
        user_id: str,
        email: str,
        display_name: str = "",
    ) -> ProfileBase:
        profile = self.profile_model(user_id=user_id, email=email, display_name=display_name)
        with _storage_errors("insert_profile"):
            session.add(profile)
            await session.flush()
        return profile

    async def find_profile_by_email(
        self, session: AsyncSession, email: str
    ) -> ProfileBase | None:
        model = self.profile_model
        with _storage_errors("find_profile_by_email"):
            result = await session.execute(select(model).where(model.email == email))
            return result.scalar_one_or_none()
