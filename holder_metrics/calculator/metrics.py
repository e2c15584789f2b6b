"""Concentration metrics over a holder list.

All calculations use explicit formulas:
- Top-N share = sum of the N largest balances / total supply × 100
- Gini = (n + 1 - 2 × Σ (n - i + 1) × v_i / Σ v) / n, v ascending, i from 1
- Std deviation = sqrt(Σ (v - mean)² / n)  (population, exact arithmetic)
- Distribution = count and sum of balances per fixed bracket

Every function is total: empty lists and zero supply fall back to zero
values instead of raising.
"""

import logging
import math
import statistics
from typing import Sequence

from ..core.models import DistributionBucket, Holder, MetricsReport, TopNShare
from ..core.types import TOP_N_SIZES, TokenAmount

logger = logging.getLogger(__name__)


# (min, max, label); max is exclusive, None means unbounded
DISTRIBUTION_BRACKETS: tuple[tuple[float, float | None, str], ...] = (
    (1_000, 10_000, "1K-10K"),
    (10_000, 100_000, "10K-100K"),
    (100_000, 1_000_000, "100K-1M"),
    (1_000_000, 10_000_000, "1M-10M"),
    (10_000_000, 100_000_000, "10M-100M"),
    (100_000_000, None, "100M+"),
)


class MetricsCalculator:
    """Computes a MetricsReport for a holder list sorted descending by balance."""

    def __init__(self, top_n_sizes: Sequence[int] = TOP_N_SIZES):
        self.top_n_sizes = tuple(top_n_sizes)

    def compute(self, holders: Sequence[Holder], total_supply: TokenAmount) -> MetricsReport:
        """
        Calculate concentration metrics.

        Args:
            holders: Holders, already sorted descending by balance
            total_supply: Denominator for top-N percentages

        Returns:
            MetricsReport with top-N shares, Gini, std deviation and distribution
        """
        balances = [h.balance for h in holders]

        report = MetricsReport(
            top_n={n: calc_top_n(balances, n, total_supply) for n in self.top_n_sizes},
            gini=calc_gini(balances),
            std_dev=calc_std_dev(balances),
            distribution=calc_distribution(balances),
        )
        logger.debug(
            f"Metrics over {len(balances)} holders: gini={report.gini:.4f}, "
            f"std_dev={report.std_dev:,.2f}"
        )
        return report


def format_percentage(part: TokenAmount, total: TokenAmount) -> str:
    """Share of total as a two-decimal string; "0.00" when total is not positive."""
    if total <= 0:
        return "0.00"
    return f"{part / total * 100:.2f}"


def calc_top_n(balances: Sequence[TokenAmount], n: int, total_supply: TokenAmount) -> TopNShare:
    """
    Share held by the first n balances.

    The input must already be sorted descending; it is not re-sorted here.

    Args:
        balances: Balances, largest first
        n: Number of holders to include
        total_supply: Denominator for the percentage

    Returns:
        TopNShare with count = min(n, len(balances))
    """
    top = balances[:n]
    top_balance = sum(top, 0.0)
    return TopNShare(
        count=min(n, len(balances)),
        balance=top_balance,
        percentage=format_percentage(top_balance, total_supply),
    )


def calc_gini(values: Sequence[TokenAmount]) -> float:
    """
    Calculate the Gini coefficient.

    Formula: G = (n + 1 - 2 × Σ_{i=1..n} (n - i + 1) × v_i / Σ v) / n
    with v sorted ascending.

    Args:
        values: Balances in any order

    Returns:
        Gini in [0, 1); 0 for empty input or zero total
    """
    if not values:
        return 0.0

    ordered = sorted(values)
    # Equal balances are perfectly even; skip the float formula
    if ordered[0] == ordered[-1]:
        return 0.0

    n = len(ordered)
    total = math.fsum(ordered)
    if total == 0:
        return 0.0

    # 0-indexed i gives weight n - i == (n - (i+1) + 1)
    cumulative = math.fsum((n - i) * v for i, v in enumerate(ordered))
    gini = (n + 1 - 2 * cumulative / total) / n
    return min(max(gini, 0.0), (n - 1) / n)


def calc_std_dev(values: Sequence[TokenAmount]) -> float:
    """
    Calculate the population standard deviation.

    Formula: σ = sqrt(Σ (v - mean)² / n)

    Args:
        values: Balances

    Returns:
        Standard deviation, 0 for empty input
    """
    if not values:
        return 0.0

    return float(statistics.pstdev(values))


def calc_distribution(values: Sequence[TokenAmount]) -> list[DistributionBucket]:
    """
    Bucket balances into fixed brackets.

    Brackets are half-open [min, max); the last one is unbounded.
    Balances below 1,000 fall into no bracket.

    Args:
        values: Balances

    Returns:
        One DistributionBucket per bracket, in bracket order
    """
    buckets = []
    for low, high, label in DISTRIBUTION_BRACKETS:
        in_bracket = [v for v in values if v >= low and (high is None or v < high)]
        buckets.append(
            DistributionBucket(
                label=label,
                count=len(in_bracket),
                total_balance=sum(in_bracket, 0.0),
            )
        )
    return buckets
