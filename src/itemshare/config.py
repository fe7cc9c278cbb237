"""ItemShareConfig — settings for the itemshare facades."""

from __future__ import annotations

import os
from dataclasses import dataclass

from itemshare.events import DEFAULT_QUEUE_SIZE

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///itemshare.db"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ItemShareConfig:
    """Configuration for an ``ItemShareAsync`` instance."""

    database_url: str = DEFAULT_DATABASE_URL
    """SQLAlchemy async URL used when no engine is passed in."""

    queue_size: int = DEFAULT_QUEUE_SIZE
    """Capacity of each live session's change-event queue."""

    echo: bool = False
    """Log every SQL statement (SQLAlchemy ``echo``)."""

    def __post_init__(self) -> None:
        if not self.database_url:
            raise ValueError("database_url must not be empty")
        if self.queue_size < 1:
            raise ValueError(f"queue_size must be positive, got {self.queue_size}")

    @classmethod
    def from_env(cls) -> ItemShareConfig:
        """Load configuration from ``ITEMSHARE_*`` environment variables."""
        raw_size = os.environ.get("ITEMSHARE_QUEUE_SIZE", str(DEFAULT_QUEUE_SIZE))
        try:
            queue_size = int(raw_size)
        except ValueError:
            raise ValueError(f"ITEMSHARE_QUEUE_SIZE must be an integer, got {raw_size!r}") from None
        return cls(
            database_url=os.environ.get("ITEMSHARE_DATABASE_URL", DEFAULT_DATABASE_URL),
            queue_size=queue_size,
            echo=os.environ.get("ITEMSHARE_ECHO", "").strip().lower() in _TRUE_VALUES,
        )
