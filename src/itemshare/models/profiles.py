"""Profile model — maps a user id to the email other users know them by."""

from __future__ import annotations

from sqlmodel import Field, SQLModel


class ProfileBase(SQLModel):
    """Base fields for a profile. Subclass with ``table=True`` for a concrete table."""

    user_id: str = Field(primary_key=True)
    email: str = Field(index=True, unique=True)
    display_name: str = Field(default="")


class Profile(ProfileBase, table=True):
    """Default profile table — ``profiles``."""

    __tablename__ = "profiles"
