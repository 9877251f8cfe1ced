from .writer import SnapshotNotFoundError, SnapshotStore, build_snapshot

__all__ = ["SnapshotNotFoundError", "SnapshotStore", "build_snapshot"]
