"""Main orchestrator for the holder snapshot pipeline.

Groups raw rows by chain, aggregates every chain, combines them and
assembles the final Snapshot.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any

from .calculator.metrics import MetricsCalculator
from .core.config import EngineConfig
from .core.exceptions import EmptyDatasetError
from .core.models import BalanceRecord, ChainAggregate, Snapshot
from .holders.aggregator import ChainAggregator
from .holders.combiner import ChainCombiner
from .output.snapshot import SnapshotAssembler
from .providers.base import BaseProvider, group_rows_by_chain

logger = logging.getLogger(__name__)


class SnapshotOrchestrator:
    """Orchestrates the complete holder snapshot pipeline."""

    def __init__(self, config: EngineConfig, max_workers: int = 1):
        """
        Initialize the orchestrator.

        Args:
            config: Thresholds, chains and denylist for this run
            max_workers: Chains aggregated in parallel (1 = sequential)
        """
        self.config = config
        self.max_workers = max(1, max_workers)

        calculator = MetricsCalculator()
        self.aggregator = ChainAggregator(config, calculator=calculator)
        self.combiner = ChainCombiner(calculator=calculator)
        self.assembler = SnapshotAssembler(config)

    def _chain_keys(self, grouped: dict[str, list[dict[str, Any]]]) -> list[str]:
        if not self.config.chains:
            return list(grouped)

        unknown = [key for key in grouped if key not in self.config.chains]
        if unknown:
            logger.warning(f"Ignoring rows for unconfigured chains: {', '.join(unknown)}")
        return self.config.chain_order

    def _aggregate_chain(self, chain_key: str, rows: list[dict[str, Any]]) -> ChainAggregate:
        records = [
            BalanceRecord.from_row(row, self.config.balance_fields, self.config.chain_fields)
            for row in rows
        ]
        return self.aggregator.aggregate(chain_key, self.config.label_for(chain_key), records)

    def aggregate_chains(self, rows: list[dict[str, Any]]) -> dict[str, ChainAggregate]:
        """
        Aggregate every chain.

        Chains configured but absent from the rows get an empty aggregate.

        Returns:
            Chain key -> ChainAggregate, in chain order
        """
        grouped = group_rows_by_chain(rows, self.config.chain_fields)
        keys = self._chain_keys(grouped)

        if self.max_workers > 1 and len(keys) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = pool.map(
                    lambda key: self._aggregate_chain(key, grouped.get(key, [])), keys
                )
                aggregates = dict(zip(keys, results))
        else:
            aggregates = {key: self._aggregate_chain(key, grouped.get(key, [])) for key in keys}

        for key, aggregate in aggregates.items():
            logger.info(
                f"{aggregate.label}: {aggregate.retail_holder_count} retail holders, "
                f"{len(aggregate.excluded_addresses)} excluded"
            )
        return aggregates

    def build(self, rows: list[dict[str, Any]], generated_at: datetime | None = None) -> Snapshot:
        """
        Build a snapshot from raw rows.

        Args:
            rows: Raw balance rows for all chains
            generated_at: Timestamp to stamp (defaults to now)

        Returns:
            Complete Snapshot
        """
        if not rows:
            raise EmptyDatasetError("query")

        chains = self.aggregate_chains(rows)
        combined = self.combiner.combine(chains)
        logger.info(
            f"Combined: {combined.retail_holder_count} retail holders, "
            f"gini={combined.metrics.gini:.4f}"
        )
        return self.assembler.assemble(chains, combined, generated_at=generated_at)

    def run(self, provider: BaseProvider, generated_at: datetime | None = None) -> Snapshot:
        """Fetch rows from a provider and build the snapshot."""
        rows = provider.fetch_rows()
        if not rows:
            raise EmptyDatasetError(provider.SOURCE.value)
        return self.build(rows, generated_at=generated_at)
