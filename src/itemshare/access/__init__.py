"""Access layer: relations, identity, grants, resolution and authorization."""

from .access_store import AccessStore
from .authorization import MutationAuthorizer
from .exceptions import (
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
from .identity import IdentityResolver
from .items import ItemService
from .relations import RelationStore
from .sharing import ShareRegistry
from .types import (
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

__all__ = [
    "AccessStore",
    "DeleteResult",
    "DuplicateGrantError",
    "EffectivePermission",
    "EffectiveView",
    "ErrorKind",
    "GrantInfo",
    "GrantResult",
    "IdentityResolver",
    "ItemInfo",
    "ItemNotFoundError",
    "ItemResult",
    "ItemService",
    "ItemShareError",
    "ListGrantsResult",
    "ProfileInfo",
    "ProfileResult",
    "MutationAuthorizer",
    "NotFoundError",
    "RelationStore",
    "SelfShareForbiddenError",
    "ShareRegistry",
    "TransientFailureError",
    "UnauthorizedError",
    "ValidationError",
    "ViewEntry",
    "ViewResult",
]
