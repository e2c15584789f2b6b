"""Custom exceptions for the holder snapshot tool.

The aggregation core never raises; these cover the driver around it
(configuration, data fetching, output).
"""


class HolderSnapshotError(Exception):
    """Base exception for all holder snapshot tool errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DataSourceError(HolderSnapshotError):
    """Raised when a data source fails or returns invalid data."""

    def __init__(
        self,
        source: str,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        full_message = f"[{source}] {message}"
        super().__init__(
            full_message,
            {
                "source": source,
                "endpoint": endpoint,
                "status_code": status_code,
            },
        )
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code


class RateLimitError(DataSourceError):
    """Raised when API rate limit is hit."""

    def __init__(
        self,
        source: str,
        retry_after_seconds: int | None = None,
        endpoint: str | None = None,
    ):
        message = "Rate limit exceeded"
        if retry_after_seconds:
            message += f", retry after {retry_after_seconds}s"
        super().__init__(source, message, endpoint=endpoint, status_code=429)
        self.retry_after_seconds = retry_after_seconds


class QueryExecutionError(DataSourceError):
    """Raised when a remote query fails, is cancelled, or times out."""

    def __init__(self, source: str, execution_id: str, state: str, message: str | None = None):
        super().__init__(
            source,
            message or f"Query execution {execution_id} ended in state {state}",
            endpoint=f"/execution/{execution_id}/status",
        )
        self.execution_id = execution_id
        self.state = state


class ConfigurationError(HolderSnapshotError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key


class EmptyDatasetError(HolderSnapshotError):
    """Raised when the data source returned no rows at all."""

    def __init__(self, source: str):
        super().__init__(f"{source} returned no rows", {"source": source})
        self.source = source
