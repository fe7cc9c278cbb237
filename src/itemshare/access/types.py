"""Result types: ItemInfo, GrantInfo, EffectiveView, ItemResult, etc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from itemshare.models.items import ItemBase
    from itemshare.models.profiles import ProfileBase
    from itemshare.models.shares import SharedItemBase

    from .exceptions import ErrorKind


class EffectivePermission(str, Enum):
    """Resolved access level a user has on an item."""

    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"

    @classmethod
    def for_grant(cls, can_edit: bool) -> EffectivePermission:
        return cls.EDITOR if can_edit else cls.VIEWER

    @property
    def can_edit(self) -> bool:
        return self is not EffectivePermission.VIEWER


@dataclass(frozen=True)
class ItemInfo:
    """Detached snapshot of an item row."""

    id: str
    owner_id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, item: ItemBase) -> ItemInfo:
        return cls(
            id=item.id,
            owner_id=item.user_id,
            name=item.name,
            description=item.description,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


@dataclass(frozen=True)
class GrantInfo:
    """Detached snapshot of a grant row."""

    item_id: str
    owner_id: str
    grantee_id: str
    can_edit: bool
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, grant: SharedItemBase) -> GrantInfo:
        return cls(
            item_id=grant.item_id,
            owner_id=grant.shared_by,
            grantee_id=grant.shared_with,
            can_edit=grant.can_edit,
            created_at=grant.created_at,
        )


@dataclass(frozen=True)
class ProfileInfo:
    """Detached snapshot of a profile row."""

    user_id: str
    email: str
    display_name: str

    @classmethod
    def from_model(cls, profile: ProfileBase) -> ProfileInfo:
        return cls(
            user_id=profile.user_id,
            email=profile.email,
            display_name=profile.display_name,
        )


@dataclass(frozen=True)
class ViewEntry:
    """One item in a user's effective view, tagged with its permission."""

    item: ItemInfo
    permission: EffectivePermission


@dataclass(frozen=True)
class EffectiveView:
    """A user's owned and shared items at one point in time."""

    user_id: str
    owned: tuple[ViewEntry, ...] = ()
    shared: tuple[ViewEntry, ...] = ()

    @property
    def entries(self) -> tuple[ViewEntry, ...]:
        return self.owned + self.shared

    def permission_for(self, item_id: str) -> EffectivePermission | None:
        """Return the permission on *item_id*, or None if it is not visible."""
        for entry in self.entries:
            if entry.item.id == item_id:
                return entry.permission
        return None

    def item_ids(self) -> list[str]:
        return [e.item.id for e in self.entries]


@dataclass
class ProfileResult:
    """Result of a profile registration."""

    success: bool
    message: str
    profile: ProfileInfo | None = None
    error: ErrorKind | None = None


@dataclass
class ItemResult:
    """Result of an item create/update/get operation."""

    success: bool
    message: str
    item: ItemInfo | None = None
    error: ErrorKind | None = None


@dataclass
class DeleteResult:
    """Result of an item delete operation."""

    success: bool
    message: str
    item_id: str | None = None
    error: ErrorKind | None = None


@dataclass
class GrantResult:
    """Result of a grant operation."""

    success: bool
    message: str
    grant: GrantInfo | None = None
    error: ErrorKind | None = None


@dataclass
class ListGrantsResult:
    """Result of a list grants operation."""

    success: bool
    message: str
    grants: list[GrantInfo] = field(default_factory=list)
    error: ErrorKind | None = None


@dataclass
class ViewResult:
    """Result of an effective view resolution."""

    success: bool
    message: str
    view: EffectiveView | None = None
    error: ErrorKind | None = None
