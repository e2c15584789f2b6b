"""
JSON file storage for holder snapshots.

One document per output path. A write is skipped when the serialized
snapshot is byte-identical to what is already on disk.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..core.models import Snapshot
from ..output.formatters import JSONFormatter, snapshot_from_payload

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = Path("public") / "data" / "holders.json"


class SnapshotStore:
    """
    File-based storage for the published holder snapshot.

    Usage:
        store = SnapshotStore(Path("public/data/holders.json"))

        # Save snapshot (no-op if nothing changed)
        changed = store.write(snapshot)

        # Load previous snapshot
        previous = store.load()
    """

    def __init__(self, path: Optional[Path] = None, formatter: Optional[JSONFormatter] = None):
        """Initialize store with the output path."""
        self.path = Path(path) if path is not None else DEFAULT_OUTPUT_PATH
        self.formatter = formatter or JSONFormatter()

    def read_text(self) -> Optional[str]:
        """Current file contents, or None if the file does not exist."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, snapshot: Snapshot) -> bool:
        """
        Serialize and save a snapshot if it differs from the stored one.

        Returns True if the file was written.
        """
        serialized = self.formatter.format(snapshot)

        if self.read_text() == serialized:
            logger.info("No changes detected; data file remains unchanged.")
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8", newline="\n") as f:
            f.write(serialized)

        logger.info(f"Updated holder snapshot -> {self.path}")
        return True

    def load_payload(self) -> Optional[dict[str, Any]]:
        """Previously written document as a dict, or None if absent."""
        text = self.read_text()
        if text is None:
            return None
        return json.loads(text)

    def load(self) -> Optional[Snapshot]:
        """Previously written snapshot, or None if absent."""
        payload = self.load_payload()
        if payload is None:
            return None
        return snapshot_from_payload(payload)

    def exists(self) -> bool:
        return self.path.exists()
