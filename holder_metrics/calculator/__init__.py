"""Distribution metrics calculation module."""

from .metrics import (
    MetricsCalculator,
    calc_distribution,
    calc_gini,
    calc_std_dev,
    calc_top_n,
)

__all__ = [
    "MetricsCalculator",
    "calc_distribution",
    "calc_gini",
    "calc_std_dev",
    "calc_top_n",
]
