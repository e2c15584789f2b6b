"""Base classes for holder data providers."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from ..core.types import DataSource

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for all holder row providers."""

    # Subclasses must define their data source
    SOURCE: DataSource = DataSource.UNKNOWN

    def __init__(
        self,
        rate_limit_calls: int = 60,
        rate_limit_period: int = 60,
    ):
        """
        Initialize provider with rate limiting.

        Args:
            rate_limit_calls: Maximum calls per period
            rate_limit_period: Period in seconds
        """
        self.rate_limit_calls = rate_limit_calls
        self.rate_limit_period = rate_limit_period
        self._call_timestamps: list[float] = []

    def _wait_for_rate_limit(self) -> None:
        """Enforce rate limiting by sleeping if necessary."""
        now = time.time()
        # Clean old timestamps
        self._call_timestamps = [
            ts for ts in self._call_timestamps if now - ts < self.rate_limit_period
        ]

        if len(self._call_timestamps) >= self.rate_limit_calls:
            sleep_time = self._call_timestamps[0] + self.rate_limit_period - now
            if sleep_time > 0:
                logger.debug(
                    f"[{self.SOURCE.value}] Rate limit: sleeping {sleep_time:.1f}s"
                )
                time.sleep(sleep_time)

        self._call_timestamps.append(time.time())

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available and configured."""
        pass

    @abstractmethod
    def fetch_rows(self) -> list[dict[str, Any]]:
        """Return every raw balance row across all chains."""
        pass


def group_rows_by_chain(
    rows: list[dict[str, Any]],
    chain_fields: tuple[str, ...] = ("blockchain", "chain"),
) -> dict[str, list[dict[str, Any]]]:
    """
    Split rows by chain key.

    The key is the first non-empty chain field, lower-cased. Rows with
    no chain are skipped.
    """
    grouped: dict[str, list[dict[str, Any]]] = {}
    skipped = 0
    for row in rows:
        key = ""
        for field in chain_fields:
            if row.get(field):
                key = str(row[field]).lower()
                break
        if not key:
            skipped += 1
            continue
        grouped.setdefault(key, []).append(row)

    if skipped:
        logger.debug(f"Skipped {skipped} rows without a chain")
    return grouped
