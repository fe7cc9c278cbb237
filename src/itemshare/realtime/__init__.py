"""Realtime view synchronisation: store, reconciler, listener and session."""

from .listener import ChangeFeedListener, ListenerState
from .reconciler import Reconciler
from .session import ViewSession
from .store import ViewStore

__all__ = [
    "ChangeFeedListener",
    "ListenerState",
    "Reconciler",
    "ViewSession",
    "ViewStore",
]
