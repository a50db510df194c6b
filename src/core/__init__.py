"""Core data components."""

from .gateway import DataGateway
from .models import Resource, Snapshot
from .store import SnapshotStore

__all__ = ["DataGateway", "Resource", "Snapshot", "SnapshotStore"]
