"""Shared fixtures for itemshare tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import itemshare.models  # noqa: F401  (registers tables on SQLModel.metadata)
from itemshare._itemshare_async import ItemShareAsync
from itemshare.access.relations import RelationStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with all tables created."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Async SQLModel session, rolled back after each test."""
    factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with factory() as session:
        yield session


@pytest.fixture
def relations() -> RelationStore:
    return RelationStore()


@pytest.fixture
async def file_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite engine so concurrent sessions get separate connections."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'itemshare.db'}", echo=False)
    yield eng
    await eng.dispose()


@pytest.fixture
async def app(file_engine: AsyncEngine) -> AsyncIterator[ItemShareAsync]:
    """Opened facade with alice, bob and carol registered."""
    instance = ItemShareAsync(file_engine)
    await instance.open()
    assert (await instance.register_profile("alice", "alice@example.com")).success
    assert (await instance.register_profile("bob", "bob@example.com")).success
    assert (await instance.register_profile("carol", "carol@example.com")).success
    yield instance
    await instance.close()
