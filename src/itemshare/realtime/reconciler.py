"""Reconciler — full re-resolution of a user's view.

There is no incremental diff: every pass re-reads the owned and shared
sets and republishes the whole view.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from itemshare.access.exceptions import ItemShareError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from itemshare.access.types import EffectiveView

    from .store import ViewStore

logger = logging.getLogger(__name__)


class Reconciler:
    """Runs reconciliation passes and publishes their results to a ``ViewStore``.

    Each pass takes the next sequence number when it starts.  A pass that
    finishes after ``invalidate()`` (session teardown or user switch)
    is discarded instead of published.
    """

    def __init__(
        self,
        resolve: Callable[[str], Awaitable[EffectiveView]],
        store: ViewStore,
    ) -> None:
        self._resolve = resolve
        self._store = store
        self._seq = 0
        self._generation = 0
        self.passes = 0

    @property
    def generation(self) -> int:
        return self._generation

    def invalidate(self) -> int:
        """Discard results of every pass currently in flight.  Returns the new generation."""
        self._generation += 1
        return self._generation

    async def reconcile(self, user_id: str) -> bool:
        """Resolve *user_id*'s view and publish it.  Return True if the result was published."""
        generation = self._generation
        self._seq += 1
        seq = self._seq
        self.passes += 1

        try:
            view = await self._resolve(user_id)
        except ItemShareError as e:
            logger.warning("Reconciliation %d for %s failed: %s", seq, user_id, e)
            # A newer pass may already have published a good view.
            if generation == self._generation and seq > self._store.last_seq:
                self._store.fail(e)
            return False

        if generation != self._generation:
            logger.debug("Discarding reconciliation %d for %s: session changed", seq, user_id)
            return False
        return self._store.publish(view, seq)
