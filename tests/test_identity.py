"""Tests for IdentityResolver — email lookup and profile registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from itemshare.access.exceptions import NotFoundError, ValidationError
from itemshare.access.identity import IdentityResolver, default_display_name

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.access.relations import RelationStore


@pytest.fixture
def identity(relations: RelationStore) -> IdentityResolver:
    return IdentityResolver(relations)


class TestResolve:
    async def test_resolves_registered_email(
        self, identity: IdentityResolver, async_session: AsyncSession
    ):
        await identity.register(async_session, "bob", "bob@example.com")
        assert await identity.resolve(async_session, "bob@example.com") == "bob"

    async def test_trims_identifier(
        self, identity: IdentityResolver, async_session: AsyncSession
    ):
        await identity.register(async_session, "bob", "bob@example.com")
        assert await identity.resolve(async_session, "  bob@example.com ") == "bob"

    async def test_unknown_email(self, identity: IdentityResolver, async_session: AsyncSession):
        with pytest.raises(NotFoundError, match="No user found"):
            await identity.resolve(async_session, "ghost@example.com")

    async def test_empty_identifier(
        self, identity: IdentityResolver, async_session: AsyncSession
    ):
        with pytest.raises(NotFoundError):
            await identity.resolve(async_session, "   ")


class TestRegister:
    async def test_default_display_name(
        self, identity: IdentityResolver, async_session: AsyncSession
    ):
        profile = await identity.register(async_session, "bob", " bob@example.com ")
        assert profile.email == "bob@example.com"
        assert profile.display_name == "bob"

    async def test_explicit_display_name(
        self, identity: IdentityResolver, async_session: AsyncSession
    ):
        profile = await identity.register(async_session, "bob", "bob@example.com", " Bobby ")
        assert profile.display_name == "Bobby"

    async def test_duplicate_email(
        self, identity: IdentityResolver, async_session: AsyncSession
    ):
        await identity.register(async_session, "bob", "bob@example.com")
        with pytest.raises(ValidationError, match="already registered"):
            await identity.register(async_session, "bob2", "bob@example.com")

    async def test_missing_fields(
        self, identity: IdentityResolver, async_session: AsyncSession
    ):
        with pytest.raises(ValidationError):
            await identity.register(async_session, "", "bob@example.com")


def test_default_display_name_helper():
    assert default_display_name("carol@example.com") == "carol"
    assert default_display_name("no-at-sign") == "no-at-sign"
