"""Storage module for holder snapshots."""

from .json_store import DEFAULT_OUTPUT_PATH, SnapshotStore

__all__ = ["DEFAULT_OUTPUT_PATH", "SnapshotStore"]
