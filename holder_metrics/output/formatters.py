"""Output formatters for holder snapshots.

Provides two output formats:
- JSON: The published payload, byte-stable for identical input
- Table: Human-readable CLI summary
"""

import io
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.table import Table

from ..core.models import (
    ChainAggregate,
    CombinedAggregate,
    DistributionBucket,
    Holder,
    HolderAggregate,
    MetricsReport,
    Snapshot,
    SupplyTotals,
    Thresholds,
    TopNShare,
)

logger = logging.getLogger(__name__)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def metrics_to_payload(metrics: MetricsReport) -> dict[str, Any]:
    """Flatten a MetricsReport to the published layout (top10 ... top100, gini, ...)."""
    payload: dict[str, Any] = {}
    for n, share in metrics.top_n.items():
        payload[f"top{n}"] = share.model_dump()
    payload["gini"] = metrics.gini
    payload["stdDev"] = metrics.std_dev
    payload["distribution"] = [
        {"label": b.label, "count": b.count, "totalBalance": b.total_balance}
        for b in metrics.distribution
    ]
    return payload


def aggregate_to_payload(aggregate: HolderAggregate) -> dict[str, Any]:
    """Serialize a chain or combined aggregate. Both share one layout."""
    return {
        "key": aggregate.key,
        "label": aggregate.label,
        "holders": [h.model_dump() for h in aggregate.holders],
        "totalRetailSupply": aggregate.total_retail_supply,
        "retailHolderCount": aggregate.retail_holder_count,
        "excludedAddresses": list(aggregate.excluded_addresses),
        "excludedBalances": dict(aggregate.excluded_balances),
        "totalProcessedByChain": dict(aggregate.total_processed_by_chain),
        "metrics": metrics_to_payload(aggregate.metrics),
    }


def snapshot_to_payload(snapshot: Snapshot) -> dict[str, Any]:
    """Build the JSON-ready document for a snapshot."""
    return {
        "generatedAt": format_timestamp(snapshot.generated_at),
        "thresholds": {
            "retail": snapshot.thresholds.retail,
            "megaHolder": snapshot.thresholds.mega_holder,
        },
        "totals": {
            "totalSupply": snapshot.totals.total_supply,
        },
        "chains": {key: aggregate_to_payload(agg) for key, agg in snapshot.chains.items()},
        "combined": aggregate_to_payload(snapshot.combined),
        "chainOrder": list(snapshot.chain_order),
    }


def _metrics_from_payload(data: dict[str, Any]) -> MetricsReport:
    top_n = {
        int(key[3:]): TopNShare(**value)
        for key, value in data.items()
        if key.startswith("top") and key[3:].isdigit()
    }
    return MetricsReport(
        top_n=top_n,
        gini=data.get("gini", 0.0),
        std_dev=data.get("stdDev", 0.0),
        distribution=[
            DistributionBucket(
                label=b["label"], count=b["count"], total_balance=b["totalBalance"]
            )
            for b in data.get("distribution", [])
        ],
    )


def snapshot_from_payload(payload: dict[str, Any]) -> Snapshot:
    """Rebuild a Snapshot from a previously published document."""
    chains = {}
    for key, data in payload.get("chains", {}).items():
        chains[key] = ChainAggregate(
            key=data["key"],
            label=data["label"],
            holders=[Holder(**h) for h in data.get("holders", [])],
            excluded_addresses=data.get("excludedAddresses", []),
            excluded_balance=sum(data.get("excludedBalances", {}).values(), 0.0),
            total_processed=sum(data.get("totalProcessedByChain", {}).values(), 0.0),
            metrics=_metrics_from_payload(data.get("metrics", {})),
        )

    combined = payload.get("combined", {})
    return Snapshot(
        generated_at=datetime.fromisoformat(payload["generatedAt"].replace("Z", "+00:00")),
        thresholds=Thresholds(
            retail=payload["thresholds"]["retail"],
            mega_holder=payload["thresholds"]["megaHolder"],
        ),
        totals=SupplyTotals(total_supply=payload["totals"]["totalSupply"]),
        chains=chains,
        combined=CombinedAggregate(
            holders=[Holder(**h) for h in combined.get("holders", [])],
            excluded_addresses=combined.get("excludedAddresses", []),
            excluded_balances=combined.get("excludedBalances", {}),
            total_processed_by_chain=combined.get("totalProcessedByChain", {}),
            metrics=_metrics_from_payload(combined.get("metrics", {})),
        ),
        chain_order=payload.get("chainOrder", list(chains)),
    )


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, snapshot: Snapshot) -> str:
        """Format the snapshot as a string."""
        pass


class JSONFormatter(OutputFormatter):
    """Formats snapshots as the published JSON document."""

    def __init__(self, indent: int = 2):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation level
        """
        self.indent = indent

    def format(self, snapshot: Snapshot) -> str:
        """Serialize with fixed key order and a single trailing newline."""
        payload = snapshot_to_payload(snapshot)
        return json.dumps(payload, indent=self.indent, ensure_ascii=False) + "\n"


class TableFormatter(OutputFormatter):
    """Formats snapshots as human-readable tables for CLI output."""

    def __init__(self, width: int = 100, top_holders: int = 10, color: bool = True):
        """
        Initialize table formatter.

        Args:
            width: Maximum table width
            top_holders: Number of holders listed per aggregate
            color: Emit ANSI colors
        """
        self.width = width
        self.top_holders = top_holders
        self.color = color

    def format(self, snapshot: Snapshot) -> str:
        """Format snapshot as readable tables."""
        output = io.StringIO()
        console = Console(
            file=output,
            force_terminal=self.color,
            no_color=not self.color,
            width=self.width,
        )

        console.print(
            f"[bold]Holder snapshot[/] generated {format_timestamp(snapshot.generated_at)}\n"
            f"[dim]Retail threshold: {snapshot.thresholds.retail:,.0f}  "
            f"Mega-holder threshold: {snapshot.thresholds.mega_holder:,.0f}  "
            f"Total supply: {snapshot.totals.total_supply:,.0f}[/]"
        )
        console.print(self.summary_table(snapshot))

        aggregates = [snapshot.chains[k] for k in snapshot.chain_order if k in snapshot.chains]
        aggregates.append(snapshot.combined)
        for aggregate in aggregates:
            console.print(self._concentration_table(aggregate))
            console.print(self._distribution_table(aggregate))
            if self.top_holders and aggregate.holders:
                console.print(self._holders_table(aggregate))

        return output.getvalue()

    def summary_table(self, snapshot: Snapshot) -> Table:
        """One row per chain plus the combined totals."""
        table = Table(title="Chains")
        table.add_column("Chain", style="cyan")
        table.add_column("Holders", justify="right")
        table.add_column("Retail Supply", justify="right", style="green")
        table.add_column("% of Supply", justify="right")
        table.add_column("Excluded", justify="right", style="dim")
        table.add_column("Processed", justify="right", style="dim")
        table.add_column("Gini", justify="right")

        def add(aggregate: HolderAggregate, **kwargs: Any) -> None:
            share = snapshot.totals.share_of_supply(aggregate.total_retail_supply)
            table.add_row(
                aggregate.label,
                f"{aggregate.retail_holder_count:,}",
                f"{aggregate.total_retail_supply:,.0f}",
                f"{share:.2f}%",
                f"{aggregate.excluded_balance:,.0f}",
                f"{aggregate.total_processed:,.0f}",
                f"{aggregate.metrics.gini:.4f}",
                **kwargs,
            )

        for key in snapshot.chain_order:
            if key in snapshot.chains:
                add(snapshot.chains[key])
        table.add_section()
        add(snapshot.combined, style="bold")
        return table

    def _concentration_table(self, aggregate: HolderAggregate) -> Table:
        metrics = aggregate.metrics
        table = Table(title=f"{aggregate.label} - Concentration", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")
        for n, share in metrics.top_n.items():
            table.add_row(f"Top {n} ({share.count})", f"{share.balance:,.0f} ({share.percentage}%)")
        table.add_row("Gini", f"{metrics.gini:.4f}")
        table.add_row("Std deviation", f"{metrics.std_dev:,.2f}")
        return table

    def _distribution_table(self, aggregate: HolderAggregate) -> Table:
        table = Table(title=f"{aggregate.label} - Distribution")
        table.add_column("Bracket", style="cyan")
        table.add_column("Holders", justify="right")
        table.add_column("Balance", justify="right", style="green")
        for bucket in aggregate.metrics.distribution:
            table.add_row(bucket.label, f"{bucket.count:,}", f"{bucket.total_balance:,.0f}")
        return table

    def _holders_table(self, aggregate: HolderAggregate) -> Table:
        table = Table(title=f"{aggregate.label} - Top {self.top_holders} Holders")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Address", style="cyan")
        table.add_column("Chain")
        table.add_column("Balance", justify="right", style="green")
        for rank, holder in enumerate(aggregate.holders[: self.top_holders], 1):
            table.add_row(str(rank), holder.address, holder.chain, f"{holder.balance:,.0f}")
        return table
