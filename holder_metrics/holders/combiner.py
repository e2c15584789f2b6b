"""Cross-chain combiner.

Merges per-chain aggregates into a single combined view. Metrics are
always recomputed from the merged holder list, never summed from the
per-chain reports.
"""

import logging
from typing import Mapping

from ..calculator.metrics import MetricsCalculator
from ..core.models import ChainAggregate, CombinedAggregate, Holder
from ..core.types import TokenAmount

logger = logging.getLogger(__name__)


class ChainCombiner:
    """Combines ChainAggregates into a CombinedAggregate."""

    def __init__(self, calculator: MetricsCalculator | None = None):
        self.calculator = calculator or MetricsCalculator()

    def combine(self, aggregates: Mapping[str, ChainAggregate]) -> CombinedAggregate:
        """
        Merge chain aggregates.

        Args:
            aggregates: Chain key -> ChainAggregate, in report order

        Returns:
            CombinedAggregate with holders re-sorted descending by balance
        """
        holders: list[Holder] = []
        excluded: dict[str, None] = {}
        excluded_balances: dict[str, TokenAmount] = {}
        processed_by_chain: dict[str, TokenAmount] = {}

        for aggregate in aggregates.values():
            holders.extend(
                h if h.chain == aggregate.label else h.model_copy(update={"chain": aggregate.label})
                for h in aggregate.holders
            )
            _merge_additive(excluded_balances, aggregate.excluded_balances)
            _merge_additive(processed_by_chain, aggregate.total_processed_by_chain)
            excluded.update(dict.fromkeys(aggregate.excluded_addresses))

        holders.sort(key=lambda h: h.balance, reverse=True)
        total_retail_supply = sum((h.balance for h in holders), 0.0)

        logger.debug(
            f"Combined {len(aggregates)} chains: {len(holders)} holders, "
            f"{len(excluded)} excluded addresses"
        )

        return CombinedAggregate(
            holders=holders,
            excluded_addresses=list(excluded),
            excluded_balances=excluded_balances,
            total_processed_by_chain=processed_by_chain,
            metrics=self.calculator.compute(holders, total_retail_supply),
        )


def _merge_additive(target: dict[str, TokenAmount], source: Mapping[str, TokenAmount]) -> None:
    for key, value in source.items():
        target[key] = target.get(key, 0.0) + value
