"""Snapshot assembly.

Composes per-chain and combined aggregates with the run's thresholds
and supply totals. No statistics are computed here.
"""

from datetime import datetime, timezone
from typing import Mapping

from ..core.config import EngineConfig
from ..core.models import (
    ChainAggregate,
    CombinedAggregate,
    Snapshot,
    SupplyTotals,
    Thresholds,
)


class SnapshotAssembler:
    """Wraps aggregates and global settings into a Snapshot."""

    def __init__(self, config: EngineConfig):
        self.config = config

    def assemble(
        self,
        chains: Mapping[str, ChainAggregate],
        combined: CombinedAggregate,
        generated_at: datetime | None = None,
    ) -> Snapshot:
        """
        Build the snapshot for one run.

        Args:
            chains: Chain key -> aggregate
            combined: Combined aggregate over the same chains
            generated_at: Timestamp to stamp; defaults to now (UTC)

        Returns:
            Snapshot with chain_order taken from the config, falling back
            to the order of ``chains`` when no chains are configured
        """
        chain_order = self.config.chain_order or list(chains)
        return Snapshot(
            generated_at=generated_at or datetime.now(timezone.utc),
            thresholds=Thresholds(
                retail=self.config.retail_threshold,
                mega_holder=self.config.mega_holder_threshold,
            ),
            totals=SupplyTotals(total_supply=self.config.total_supply),
            chains=dict(chains),
            combined=combined,
            chain_order=chain_order,
        )
