"""Storage layer for snapshots."""

from .snapshot import Snapshot, SnapshotStatus
from .store import SnapshotStore, safe_basename

__all__ = ["Snapshot", "SnapshotStatus", "SnapshotStore", "safe_basename"]
