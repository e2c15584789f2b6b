"""Record classifier - sorts raw balance rows into retail, excluded and the rest.

Evaluation order is fixed:
1. empty address or non-finite balance -> DROPPED
2. denylisted or above the mega-holder threshold -> EXCLUDED
3. at or above the retail threshold -> RETAIL
4. otherwise -> SUB_THRESHOLD
"""

import math
from typing import Any

from ..core.addresses import normalize_address
from ..core.config import EngineConfig
from ..core.models import Classification
from ..core.types import RecordKind, TokenAmount


def parse_balance(value: Any) -> TokenAmount | None:
    """
    Coerce a raw balance to a finite float.

    Missing values count as zero. Unparseable strings, NaN and infinities
    return None. Digit separators ("1_000") are not numbers on the wire.
    """
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
        if "_" in value:
            return None
    try:
        balance = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(balance):
        return None
    return balance


class RecordClassifier:
    """Classifies records against one run's thresholds and denylist."""

    def __init__(self, config: EngineConfig):
        self.config = config

    def classify(self, raw_address: Any, raw_balance: Any) -> Classification:
        """
        Classify a single record.

        Args:
            raw_address: Address in any supported encoding
            raw_balance: Number or numeric string

        Returns:
            Classification carrying the normalized address and parsed balance
        """
        address = normalize_address(raw_address)
        balance = parse_balance(raw_balance)

        if not address or balance is None:
            return Classification(kind=RecordKind.DROPPED, address=address, balance=balance)

        if self.config.is_denylisted(address) or balance > self.config.mega_holder_threshold:
            kind = RecordKind.EXCLUDED
        elif balance >= self.config.retail_threshold:
            kind = RecordKind.RETAIL
        else:
            kind = RecordKind.SUB_THRESHOLD

        return Classification(kind=kind, address=address, balance=balance)
