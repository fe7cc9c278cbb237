"""itemshare: owned records, access grants and live per-user views.

Grant read or read/write access on your items, resolve each user's
effective view, and keep connected sessions in sync as changes commit.
"""

__version__ = "0.1.0"

from itemshare._itemshare import ItemShare
from itemshare._itemshare_async import ItemShareAsync
from itemshare.access.exceptions import (
    DuplicateGrantError,
    ErrorKind,
    ItemNotFoundError,
    ItemShareError,
    NotFoundError,
    SelfShareForbiddenError,
    TransientFailureError,
    UnauthorizedError,
    ValidationError,
)
from itemshare.access.types import (
    DeleteResult,
    EffectivePermission,
    EffectiveView,
    GrantInfo,
    GrantResult,
    ItemInfo,
    ItemResult,
    ListGrantsResult,
    ProfileInfo,
    ProfileResult,
    ViewEntry,
    ViewResult,
)
from itemshare.config import ItemShareConfig
from itemshare.events import ChangeEvent, ChangeFeed, ChangeKind, Subscription
from itemshare.realtime import ListenerState, ViewSession

__all__ = [
    "ChangeEvent",
    "ChangeFeed",
    "ChangeKind",
    "DeleteResult",
    "DuplicateGrantError",
    "EffectivePermission",
    "EffectiveView",
    "ErrorKind",
    "GrantInfo",
    "GrantResult",
    "ItemInfo",
    "ItemNotFoundError",
    "ItemResult",
    "ItemShare",
    "ItemShareAsync",
    "ItemShareConfig",
    "ItemShareError",
    "ListGrantsResult",
    "ProfileInfo",
    "ProfileResult",
    "ListenerState",
    "NotFoundError",
    "SelfShareForbiddenError",
    "Subscription",
    "TransientFailureError",
    "UnauthorizedError",
    "ValidationError",
    "ViewEntry",
    "ViewResult",
    "ViewSession",
    "__version__",
]
