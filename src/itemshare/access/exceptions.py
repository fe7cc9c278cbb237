"""Custom exception hierarchy for the itemshare access layer."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stable failure category carried by every error and failed result."""

    NOT_FOUND = "not_found"
    SELF_SHARE_FORBIDDEN = "self_share_forbidden"
    DUPLICATE_GRANT = "duplicate_grant"
    UNAUTHORIZED = "unauthorized"
    TRANSIENT_FAILURE = "transient_failure"
    VALIDATION = "validation"


class ItemShareError(Exception):
    """Base exception for all itemshare errors."""

    kind: ErrorKind = ErrorKind.TRANSIENT_FAILURE


class NotFoundError(ItemShareError):
    """Raised when an identifier (e.g. an email) does not resolve to a user."""

    kind = ErrorKind.NOT_FOUND


class ItemNotFoundError(NotFoundError):
    """Raised when an item id does not exist."""


class SelfShareForbiddenError(ItemShareError):
    """Raised when an owner tries to grant access to themselves."""

    kind = ErrorKind.SELF_SHARE_FORBIDDEN


class DuplicateGrantError(ItemShareError):
    """Raised when a grant for the same (item, grantee) pair already exists."""

    kind = ErrorKind.DUPLICATE_GRANT


class UnauthorizedError(ItemShareError):
    """Raised when the requester lacks permission for a mutation or grant."""

    kind = ErrorKind.UNAUTHORIZED


class TransientFailureError(ItemShareError):
    """Raised on storage backend failures (DB connection, lock timeouts, etc.)."""

    kind = ErrorKind.TRANSIENT_FAILURE


class ValidationError(ItemShareError):
    """Raised when input fails validation (e.g. an empty item name)."""

    kind = ErrorKind.VALIDATION
