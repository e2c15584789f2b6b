"""Pydantic data models for the holder snapshot tool.

All data structures are immutable (frozen) after creation so that
per-chain aggregates can be built independently and combined later
without shared mutable state.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .types import (
    COMBINED_KEY,
    COMBINED_LABEL,
    Percentage,
    RecordKind,
    TokenAmount,
)


class BalanceRecord(BaseModel):
    """A raw balance row as delivered by the data source (before normalization)."""

    address: Any = None  # 0x-hex, \x-hex or bare hex; may be missing
    balance: Any = None  # Number or numeric string
    chain: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_row(
        cls,
        row: dict[str, Any],
        balance_fields: tuple[str, ...] = ("telcoin_balance", "amount"),
        chain_fields: tuple[str, ...] = ("blockchain", "chain"),
    ) -> "BalanceRecord":
        """Pick address, balance and chain out of a loosely-shaped result row."""
        balance = None
        for field in balance_fields:
            if row.get(field) is not None:
                balance = row[field]
                break

        chain = ""
        for field in chain_fields:
            if row.get(field):
                chain = str(row[field]).lower()
                break

        return cls(address=row.get("address"), balance=balance, chain=chain)


class Classification(BaseModel):
    """Outcome of classifying one record. Exactly one kind per record."""

    kind: RecordKind
    address: str | None = None
    balance: TokenAmount | None = None

    model_config = {"frozen": True}


class Holder(BaseModel):
    """A retail holder with a canonical address."""

    address: str
    balance: TokenAmount
    chain: str  # Chain label, not key

    model_config = {"frozen": True}


class TopNShare(BaseModel):
    """Balance held by the N largest holders."""

    count: int
    balance: TokenAmount
    percentage: str  # Two decimals, e.g. "42.17"

    model_config = {"frozen": True}


class DistributionBucket(BaseModel):
    """Holders falling into one balance bracket."""

    label: str
    count: int = 0
    total_balance: TokenAmount = 0.0

    model_config = {"frozen": True}


class MetricsReport(BaseModel):
    """Concentration statistics over one holder list."""

    top_n: dict[int, TopNShare] = Field(default_factory=dict)
    gini: float = 0.0
    std_dev: float = 0.0
    distribution: list[DistributionBucket] = Field(default_factory=list)

    model_config = {"frozen": True}


class HolderAggregate(BaseModel):
    """Fields shared by per-chain and combined aggregates."""

    key: str
    label: str
    holders: list[Holder] = Field(default_factory=list)  # Descending by balance
    excluded_addresses: list[str] = Field(default_factory=list)  # Unique, first-seen order
    metrics: MetricsReport = Field(default_factory=MetricsReport)

    model_config = {"frozen": True}

    @property
    def total_retail_supply(self) -> TokenAmount:
        """Sum of holder balances, always derived from the holder list."""
        return sum((h.balance for h in self.holders), 0.0)

    @property
    def retail_holder_count(self) -> int:
        return len(self.holders)


class ChainAggregate(HolderAggregate):
    """Holders and roll-up totals for a single chain."""

    excluded_balance: TokenAmount = 0.0
    total_processed: TokenAmount = 0.0

    @property
    def excluded_balances(self) -> dict[str, TokenAmount]:
        return {self.key: self.excluded_balance}

    @property
    def total_processed_by_chain(self) -> dict[str, TokenAmount]:
        return {self.key: self.total_processed}


class CombinedAggregate(HolderAggregate):
    """All chains merged into one holder list."""

    key: str = COMBINED_KEY
    label: str = COMBINED_LABEL
    excluded_balances: dict[str, TokenAmount] = Field(default_factory=dict)
    total_processed_by_chain: dict[str, TokenAmount] = Field(default_factory=dict)

    @property
    def excluded_balance(self) -> TokenAmount:
        return sum(self.excluded_balances.values(), 0.0)

    @property
    def total_processed(self) -> TokenAmount:
        return sum(self.total_processed_by_chain.values(), 0.0)


class Thresholds(BaseModel):
    """Retail and mega-holder thresholds the snapshot was built with."""

    retail: TokenAmount
    mega_holder: TokenAmount

    model_config = {"frozen": True}


class SupplyTotals(BaseModel):
    """Global supply figures."""

    total_supply: TokenAmount

    model_config = {"frozen": True}

    def share_of_supply(self, amount: TokenAmount) -> Percentage:
        """Percentage of the total supply represented by amount (0 if unknown)."""
        if self.total_supply <= 0:
            return 0.0
        return amount / self.total_supply * 100


class Snapshot(BaseModel):
    """Complete output of one run."""

    generated_at: datetime
    thresholds: Thresholds
    totals: SupplyTotals
    chains: dict[str, ChainAggregate] = Field(default_factory=dict)
    combined: CombinedAggregate = Field(default_factory=CombinedAggregate)
    chain_order: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}
