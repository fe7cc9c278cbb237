"""ViewStore — the effective view owned by one session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from itemshare.access.exceptions import ItemShareError
    from itemshare.access.types import EffectiveView

logger = logging.getLogger(__name__)


class ViewStore:
    """Holds the latest published view and notifies consumers.

    Publications carry a sequence number; anything not newer than the last
    accepted publication is ignored, so a slow pass can never overwrite a
    result that completed after it started.  Once closed, the store
    accepts nothing.
    """

    def __init__(self) -> None:
        self._view: EffectiveView | None = None
        self._last_seq = 0
        self._closed = False
        self._listeners: list[Callable[[EffectiveView], None]] = []
        self.last_error: ItemShareError | None = None

    @property
    def view(self) -> EffectiveView | None:
        return self._view

    @property
    def last_seq(self) -> int:
        return self._last_seq

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, view: EffectiveView, seq: int) -> bool:
        """Accept *view* if *seq* is newer than the last publication.  Return True if accepted."""
        if self._closed:
            logger.debug("Ignoring publication %d on closed store", seq)
            return False
        if seq <= self._last_seq:
            logger.debug("Ignoring stale publication %d (last %d)", seq, self._last_seq)
            return False
        self._view = view
        self._last_seq = seq
        self.last_error = None
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.warning("View listener %r failed", listener, exc_info=True)
        return True

    def fail(self, error: ItemShareError) -> None:
        """Record a failed refresh.  The previous view stays in place."""
        if not self._closed:
            self.last_error = error

    def reset(self) -> None:
        """Forget the current view (on user switch).  Sequence numbers keep increasing."""
        self._view = None
        self.last_error = None

    def subscribe(self, listener: Callable[[EffectiveView], None]) -> Callable[[], None]:
        """Call *listener* with every accepted view.  Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._closed = True
        self._listeners.clear()
