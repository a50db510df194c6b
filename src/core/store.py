"""
Snapshot store - the dashboard's single read model.

Holds one Snapshot reference. Publishing swaps the reference in one step,
so readers see either the previous complete snapshot or the new one.
"""

from typing import Callable

from loguru import logger

from src.core.models import Snapshot

SnapshotListener = Callable[[Snapshot], None]


class SnapshotStore:
    """Current snapshot plus change notification."""

    def __init__(self, initial: Snapshot):
        self._snapshot = initial
        self._loaded = False
        self._listeners: list[SnapshotListener] = []

    @property
    def current(self) -> Snapshot:
        return self._snapshot

    @property
    def is_loaded(self) -> bool:
        """True once at least one synchronization cycle has been published."""
        return self._loaded

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the current snapshot and notify listeners."""
        self._snapshot = snapshot
        self._loaded = True

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener error: {e}")

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a listener called after every publish.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
