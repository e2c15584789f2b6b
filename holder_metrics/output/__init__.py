"""Output formatting and snapshot assembly module."""

from .formatters import (
    OutputFormatter,
    JSONFormatter,
    TableFormatter,
    snapshot_from_payload,
    snapshot_to_payload,
)
from .snapshot import SnapshotAssembler

__all__ = [
    "OutputFormatter",
    "JSONFormatter",
    "TableFormatter",
    "SnapshotAssembler",
    "snapshot_from_payload",
    "snapshot_to_payload",
]
