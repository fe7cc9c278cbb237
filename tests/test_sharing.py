"""Tests for ShareRegistry — grant creation, validation and listing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from itemshare.access.exceptions import (
    DuplicateGrantError,
    ItemNotFoundError,
    NotFoundError,
    SelfShareForbiddenError,
    UnauthorizedError,
)
from itemshare.access.identity import IdentityResolver
from itemshare.access.sharing import ShareRegistry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from itemshare.access.relations import RelationStore


@pytest.fixture
def sharing(relations: RelationStore) -> ShareRegistry:
    return ShareRegistry(relations, IdentityResolver(relations))


@pytest.fixture
async def people(relations: RelationStore, async_session: AsyncSession) -> None:
    identity = IdentityResolver(relations)
    await identity.register(async_session, "alice", "alice@example.com")
    await identity.register(async_session, "bob", "bob@example.com")
    await identity.register(async_session, "carol", "carol@example.com")


@pytest.fixture
async def report_id(
    relations: RelationStore, async_session: AsyncSession, people: None
) -> str:
    item = await relations.insert_item(async_session, "alice", "Report")
    return item.id


# ---------------------------------------------------------------------------
# grant
# ---------------------------------------------------------------------------


class TestGrant:
    async def test_grant_viewer(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        grant = await sharing.grant(
            async_session, "alice", report_id, "bob@example.com", can_edit=False
        )
        assert grant.item_id == report_id
        assert grant.shared_by == "alice"
        assert grant.shared_with == "bob"
        assert grant.can_edit is False
        assert grant.id

    async def test_grant_editor(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        grant = await sharing.grant(
            async_session, "alice", report_id, "bob@example.com", can_edit=True
        )
        assert grant.can_edit is True

    async def test_unknown_grantee(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        with pytest.raises(NotFoundError):
            await sharing.grant(async_session, "alice", report_id, "ghost@example.com")

    async def test_self_share_forbidden(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        with pytest.raises(SelfShareForbiddenError):
            await sharing.grant(async_session, "alice", report_id, "alice@example.com")

    async def test_self_share_checked_before_ownership(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        """Sharing with yourself fails the same way whether or not you own the item."""
        with pytest.raises(SelfShareForbiddenError):
            await sharing.grant(async_session, "bob", report_id, "bob@example.com")
        with pytest.raises(SelfShareForbiddenError):
            await sharing.grant(async_session, "bob", "missing-item", "bob@example.com")

    async def test_non_owner_cannot_grant(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        with pytest.raises(UnauthorizedError):
            await sharing.grant(async_session, "bob", report_id, "carol@example.com")

    async def test_editor_grantee_cannot_regrant(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        await sharing.grant(async_session, "alice", report_id, "bob@example.com", can_edit=True)
        with pytest.raises(UnauthorizedError):
            await sharing.grant(async_session, "bob", report_id, "carol@example.com")

    async def test_missing_item(
        self, sharing: ShareRegistry, async_session: AsyncSession, people: None
    ):
        with pytest.raises(ItemNotFoundError):
            await sharing.grant(async_session, "alice", "missing-item", "bob@example.com")

    async def test_duplicate_rejected_and_original_kept(
        self,
        sharing: ShareRegistry,
        relations: RelationStore,
        async_session: AsyncSession,
        report_id: str,
    ):
        await sharing.grant(async_session, "alice", report_id, "bob@example.com", can_edit=False)
        with pytest.raises(DuplicateGrantError):
            await sharing.grant(
                async_session, "alice", report_id, "bob@example.com", can_edit=True
            )
        grant = await relations.get_grant(async_session, report_id, "bob")
        assert grant is not None
        assert grant.can_edit is False

    async def test_same_grantee_different_items(
        self,
        sharing: ShareRegistry,
        relations: RelationStore,
        async_session: AsyncSession,
        report_id: str,
    ):
        other = await relations.insert_item(async_session, "alice", "Budget")
        await sharing.grant(async_session, "alice", report_id, "bob@example.com")
        await sharing.grant(async_session, "alice", other.id, "bob@example.com")
        grants = await sharing.list_shared_with(async_session, "bob")
        assert {g.item_id for g in grants} == {report_id, other.id}


# ---------------------------------------------------------------------------
# listing
# ---------------------------------------------------------------------------


class TestListGrants:
    async def test_owner_lists_grants(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        await sharing.grant(async_session, "alice", report_id, "bob@example.com")
        await sharing.grant(async_session, "alice", report_id, "carol@example.com", can_edit=True)
        grants = await sharing.list_grants_for_item(async_session, "alice", report_id)
        assert {(g.shared_with, g.can_edit) for g in grants} == {("bob", False), ("carol", True)}

    async def test_grantee_cannot_list(
        self, sharing: ShareRegistry, async_session: AsyncSession, report_id: str
    ):
        await sharing.grant(async_session, "alice", report_id, "bob@example.com")
        with pytest.raises(UnauthorizedError):
            await sharing.list_grants_for_item(async_session, "bob", report_id)

    async def test_list_shared_with_empty(
        self, sharing: ShareRegistry, async_session: AsyncSession, people: None
    ):
        assert await sharing.list_shared_with(async_session, "carol") == []
