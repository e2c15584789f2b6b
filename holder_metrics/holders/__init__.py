"""Holder classification and aggregation module.

Classifies raw balance rows, rolls them up per chain and merges the
per-chain results into a combined view.
"""

from .aggregator import ChainAggregator
from .classifier import RecordClassifier, parse_balance
from .combiner import ChainCombiner

__all__ = ["ChainAggregator", "ChainCombiner", "RecordClassifier", "parse_balance"]
