"""Core module - data models, types, address handling and exceptions."""

from .addresses import normalize_address
from .models import (
    BalanceRecord,
    Classification,
    Holder,
    TopNShare,
    DistributionBucket,
    MetricsReport,
    HolderAggregate,
    ChainAggregate,
    CombinedAggregate,
    Thresholds,
    SupplyTotals,
    Snapshot,
)
from .types import (
    RecordKind,
    DataSource,
    TOP_N_SIZES,
)
from .exceptions import (
    HolderSnapshotError,
    DataSourceError,
    RateLimitError,
    QueryExecutionError,
    ConfigurationError,
    EmptyDatasetError,
)

__all__ = [
    # Addresses
    "normalize_address",
    # Models
    "BalanceRecord",
    "Classification",
    "Holder",
    "TopNShare",
    "DistributionBucket",
    "MetricsReport",
    "HolderAggregate",
    "ChainAggregate",
    "CombinedAggregate",
    "Thresholds",
    "SupplyTotals",
    "Snapshot",
    # Types
    "RecordKind",
    "DataSource",
    "TOP_N_SIZES",
    # Exceptions
    "HolderSnapshotError",
    "DataSourceError",
    "RateLimitError",
    "QueryExecutionError",
    "ConfigurationError",
    "EmptyDatasetError",
]
