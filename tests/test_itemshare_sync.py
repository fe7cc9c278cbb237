"""Tests for the synchronous ItemShare wrapper."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from itemshare import ErrorKind, EffectivePermission, ItemShare, ItemShareConfig

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def share(tmp_path: Path) -> Iterator[ItemShare]:
    app = ItemShare(f"sqlite+aiosqlite:///{tmp_path / 'sync.db'}")
    assert app.register_profile("alice", "alice@example.com").success
    assert app.register_profile("bob", "bob@example.com", "Bobby").success
    yield app
    app.close()


class TestItemShareSync:
    def test_create_and_share(self, share: ItemShare):
        created = share.create_item("alice", "Report", "Q3")
        assert created.success
        assert created.item is not None
        item_id = created.item.id

        granted = share.share_item("alice", item_id, " bob@example.com ", can_edit=True)
        assert granted.success
        assert "bob@example.com" in granted.message

        view = share.resolve_view("bob").view
        assert view is not None
        assert view.permission_for(item_id) is EffectivePermission.EDITOR

        updated = share.update_item("bob", item_id, name="Report v2")
        assert updated.success
        assert share.get_item("alice", item_id).item.name == "Report v2"  # type: ignore[union-attr]

    def test_errors_are_results(self, share: ItemShare):
        item_id = share.create_item("alice", "Report").item.id  # type: ignore[union-attr]
        assert share.share_item("alice", item_id, "alice@example.com").error is (
            ErrorKind.SELF_SHARE_FORBIDDEN
        )
        assert share.delete_item("bob", item_id).error is ErrorKind.UNAUTHORIZED
        assert share.list_shares("bob", item_id).error is ErrorKind.UNAUTHORIZED

    def test_listing(self, share: ItemShare):
        item_id = share.create_item("alice", "Report").item.id  # type: ignore[union-attr]
        share.share_item("alice", item_id, "bob@example.com")
        assert [g.grantee_id for g in share.list_shares("alice", item_id).grants] == ["bob"]
        assert [g.item_id for g in share.list_shared_with_me("bob").grants] == [item_id]
        assert share.delete_item("alice", item_id).success

    def test_close_idempotent(self, tmp_path: Path):
        app = ItemShare(f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
        app.close()
        app.close()

    def test_context_manager_with_config(self, tmp_path: Path):
        config = ItemShareConfig(database_url=f"sqlite+aiosqlite:///{tmp_path / 'cfg.db'}")
        with ItemShare(config=config) as app:
            assert app.register_profile("carol", "carol@example.com").success
            assert not app.register_profile("dave", "carol@example.com").success
