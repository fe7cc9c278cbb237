"""IdentityResolver — email to user id lookup through the profiles table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.models.profiles import ProfileBase

    from .relations import RelationStore


def normalize_email(email: str) -> str:
    return email.strip()


def default_display_name(email: str) -> str:
    """Local part of *email*, used when a profile is registered without a name."""
    return normalize_email(email).split("@", 1)[0]


class IdentityResolver:
    def __init__(self, relations: RelationStore) -> None:
        self._relations = relations

    async def resolve(self, session: AsyncSession, identifier: str) -> str:
        """Return the user id registered under *identifier*.

        Raises ``NotFoundError`` when no profile matches.
        """
        email = normalize_email(identifier)
        if not email:
            raise NotFoundError("No user found for an empty identifier")
        profile = await self._relations.find_profile_by_email(session, email)
        if profile is None:
            raise NotFoundError(f"No user found with email {email!r}")
        return profile.user_id

    async def register(
        self,
        session: AsyncSession,
        user_id: str,
        email: str,
        display_name: str | None = None,
    ) -> ProfileBase:
        """Create the profile row the identity collaborator would normally own."""
        email = normalize_email(email)
        if not user_id or not email:
            raise ValidationError("user_id and email are required")
        if await self._relations.find_profile_by_email(session, email) is not None:
            raise ValidationError(f"Email {email!r} is already registered")
        name = display_name.strip() if display_name else default_display_name(email)
        return await self._relations.insert_profile(session, user_id, email, name)
