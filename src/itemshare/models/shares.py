"""SharedItem model — one directed access grant from an owner to a grantee.

Provides ``SharedItemBase`` (non-table) and ``SharedItem`` (concrete table).
The concrete table carries the ``(item_id, shared_with)`` uniqueness
constraint; custom subclasses must declare their own.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


class SharedItemBase(SQLModel):
    """Base fields for a grant record. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    item_id: str = Field(index=True)
    shared_by: str = Field(index=True)
    shared_with: str = Field(index=True)
    can_edit: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class SharedItem(SharedItemBase, table=True):
    """Default grant table — ``shared_items``."""

    __tablename__ = "shared_items"
    __table_args__ = (
        UniqueConstraint("item_id", "shared_with", name="uq_shared_items_item_grantee"),
    )
