"""Type definitions and enums for the holder snapshot tool."""

from enum import Enum


class RecordKind(str, Enum):
    """Classification of a single raw balance record."""

    DROPPED = "dropped"              # Empty address or non-finite balance
    EXCLUDED = "excluded"            # Denylisted or above the mega-holder threshold
    RETAIL = "retail"                # Becomes a Holder
    SUB_THRESHOLD = "sub_threshold"  # Below the retail threshold, only counted as processed


class DataSource(str, Enum):
    """Data source identifiers."""

    DUNE = "dune"
    FILE = "file"
    UNKNOWN = "unknown"


# Type aliases for common patterns
Percentage = float  # 0-100 scale
TokenAmount = float  # Number of tokens

# Top-N cut-offs reported for every holder list
TOP_N_SIZES: tuple[int, ...] = (10, 25, 50, 100)

COMBINED_KEY = "combined"
COMBINED_LABEL = "Combined"
