"""Per-chain aggregation of classified balance records."""

import logging
from typing import Iterable

from ..calculator.metrics import MetricsCalculator
from ..core.config import EngineConfig
from ..core.models import BalanceRecord, ChainAggregate, Holder
from ..core.types import RecordKind
from .classifier import RecordClassifier

logger = logging.getLogger(__name__)


class ChainAggregator:
    """Builds one immutable ChainAggregate per chain."""

    def __init__(
        self,
        config: EngineConfig,
        calculator: MetricsCalculator | None = None,
    ):
        self.config = config
        self.classifier = RecordClassifier(config)
        self.calculator = calculator or MetricsCalculator()

    def aggregate(
        self,
        chain_key: str,
        label: str,
        records: Iterable[BalanceRecord],
    ) -> ChainAggregate:
        """
        Classify every record of a chain and roll it up.

        Args:
            chain_key: Chain identifier (e.g. "ethereum")
            label: Display label stamped on every holder
            records: Raw records for this chain

        Returns:
            ChainAggregate with holders sorted descending by balance
        """
        holders: list[Holder] = []
        excluded: dict[str, None] = {}  # ordered set
        excluded_balance = 0.0
        total_processed = 0.0
        counts = {kind: 0 for kind in RecordKind}

        for record in records:
            result = self.classifier.classify(record.address, record.balance)
            counts[result.kind] += 1

            if result.kind is RecordKind.DROPPED:
                continue

            total_processed += result.balance

            if result.kind is RecordKind.EXCLUDED:
                excluded[result.address] = None
                excluded_balance += result.balance
            elif result.kind is RecordKind.RETAIL:
                holders.append(Holder(address=result.address, balance=result.balance, chain=label))
            # SUB_THRESHOLD only counts toward total_processed

        holders.sort(key=lambda h: h.balance, reverse=True)
        total_retail_supply = sum((h.balance for h in holders), 0.0)

        logger.debug(
            f"[{chain_key}] retail={counts[RecordKind.RETAIL]} "
            f"excluded={counts[RecordKind.EXCLUDED]} "
            f"sub_threshold={counts[RecordKind.SUB_THRESHOLD]} "
            f"dropped={counts[RecordKind.DROPPED]}"
        )

        return ChainAggregate(
            key=chain_key,
            label=label,
            holders=holders,
            excluded_addresses=list(excluded),
            excluded_balance=excluded_balance,
            total_processed=total_processed,
            metrics=self.calculator.compute(holders, total_retail_supply),
        )
