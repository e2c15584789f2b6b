"""Dune Analytics provider for holder balance rows.

Runs a saved Dune query, waits for it to finish and pages through the
results.

API Documentation: https://docs.dune.com/api-reference/
"""

import logging
import time
from typing import Any, Optional

import httpx

from ..core.config import APIConfig
from ..core.exceptions import DataSourceError, QueryExecutionError, RateLimitError
from ..core.types import DataSource
from .base import BaseProvider

logger = logging.getLogger(__name__)

COMPLETED_STATE = "QUERY_STATE_COMPLETED"
FAILED_STATES = ("QUERY_STATE_FAILED", "QUERY_STATE_CANCELLED")


class DuneProvider(BaseProvider):
    """Fetches holder balance rows from a Dune query."""

    SOURCE = DataSource.DUNE

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        client: Optional[httpx.Client] = None,
        poll_interval: float = 5.0,
        timeout: float = 600.0,
        page_size: int = 50_000,
        rate_limit_calls: int = 40,
        rate_limit_period: int = 60,
    ):
        """
        Initialize Dune provider.

        Args:
            config: API configuration (loaded from environment if not provided)
            client: Pre-built httpx client, mainly for tests
            poll_interval: Seconds between status checks
            timeout: Seconds to wait for the query before giving up
            page_size: Rows requested per results page
            rate_limit_calls: Rate limit per period
            rate_limit_period: Period in seconds
        """
        super().__init__(
            rate_limit_calls=rate_limit_calls,
            rate_limit_period=rate_limit_period,
        )
        self.config = config or APIConfig.load()
        self.client = client or httpx.Client(base_url=self.config.dune_base_url, timeout=60.0)
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.page_size = page_size

    def is_available(self) -> bool:
        """Check if Dune API is configured."""
        return self.config.has_dune()

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        """Send one authenticated request and decode the JSON body."""
        api_key = self.config.require_dune_key()
        self._wait_for_rate_limit()

        headers = {
            "Content-Type": "application/json",
            "X-Dune-API-Key": api_key,
        }

        try:
            response = self.client.request(method, endpoint, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=str(e),
                endpoint=endpoint,
            ) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                source=self.SOURCE.value,
                retry_after_seconds=int(retry_after) if retry_after and retry_after.isdigit() else None,
                endpoint=endpoint,
            )

        if response.is_error:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=f"Dune API error ({response.status_code}): {response.text}",
                endpoint=endpoint,
                status_code=response.status_code,
            )

        return response.json()

    def execute_query(self, query_id: str) -> str:
        """
        Start a query execution.

        Returns:
            The execution ID
        """
        endpoint = f"/query/{query_id}/execute"
        data = self._request("POST", endpoint)
        execution_id = data.get("execution_id")
        if not execution_id:
            raise DataSourceError(
                source=self.SOURCE.value,
                message="Dune response missing execution_id",
                endpoint=endpoint,
            )
        logger.info(f"Executing Dune query {query_id} (execution {execution_id})")
        return execution_id

    def wait_for_completion(self, execution_id: str) -> None:
        """Poll the execution status until it completes, fails, or times out."""
        start = time.monotonic()

        while True:
            status = self._request("GET", f"/execution/{execution_id}/status")
            state = status.get("state")
            logger.debug(f"Execution {execution_id}: {state}")

            if state == COMPLETED_STATE:
                return

            if state in FAILED_STATES:
                raise QueryExecutionError(
                    source=self.SOURCE.value,
                    execution_id=execution_id,
                    state=state,
                    message=f"Dune query failed: {status}",
                )

            if time.monotonic() - start > self.timeout:
                raise QueryExecutionError(
                    source=self.SOURCE.value,
                    execution_id=execution_id,
                    state=state or "UNKNOWN",
                    message="Timed out waiting for Dune query to finish",
                )

            time.sleep(self.poll_interval)

    def fetch_results(self, execution_id: str) -> list[dict[str, Any]]:
        """Collect every result row, following next_offset until exhausted."""
        rows: list[dict[str, Any]] = []
        offset = 0

        while True:
            data = self._request(
                "GET",
                f"/execution/{execution_id}/results",
                params={"limit": self.page_size, "offset": offset},
            )
            result = data.get("result") or {}
            rows.extend(result.get("rows") or [])

            next_offset = _next_offset(data)
            if next_offset is None:
                break
            offset = next_offset

        logger.info(f"Fetched {len(rows)} rows from execution {execution_id}")
        return rows

    def fetch_rows(self, query_id: Optional[str] = None) -> list[dict[str, Any]]:
        """Execute the query, wait for it and return all rows."""
        execution_id = self.execute_query(query_id or self.config.dune_query_id)
        self.wait_for_completion(execution_id)
        return self.fetch_results(execution_id)

    def close(self) -> None:
        self.client.close()


def _next_offset(data: dict[str, Any]) -> Optional[int]:
    # The cursor shows up at the top level, under result, or under result.metadata
    result = data.get("result") or {}
    for candidate in (
        data.get("next_offset"),
        result.get("next_offset"),
        (result.get("metadata") or {}).get("next_offset"),
    ):
        if candidate is not None:
            return candidate
    return None
