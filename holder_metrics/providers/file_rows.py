"""Local file provider for holder balance rows.

Accepts either a plain JSON list of rows or a saved Dune results
document (``{"result": {"rows": [...]}}``). Useful for offline runs and
for replaying a previous query export.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..core.exceptions import DataSourceError
from ..core.types import DataSource
from .base import BaseProvider

logger = logging.getLogger(__name__)


class FileRowsProvider(BaseProvider):
    """Reads raw balance rows from a JSON file."""

    SOURCE = DataSource.FILE

    def __init__(self, path: Path | str):
        super().__init__()
        self.path = Path(path)

    def is_available(self) -> bool:
        return self.path.exists()

    def fetch_rows(self) -> list[dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise DataSourceError(self.SOURCE.value, f"File not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise DataSourceError(self.SOURCE.value, f"Invalid JSON in {self.path}: {e}") from e

        if isinstance(data, dict):
            data = (data.get("result") or {}).get("rows", data.get("rows"))

        if not isinstance(data, list):
            raise DataSourceError(
                self.SOURCE.value,
                f"{self.path} must contain a list of rows or a Dune results document",
            )

        logger.info(f"Loaded {len(data)} rows from {self.path}")
        return data
