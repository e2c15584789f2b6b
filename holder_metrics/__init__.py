"""Holder Snapshot Tool.

Aggregates token-holder balances across chains and computes a deterministic
distribution snapshot: top-N shares, Gini coefficient, standard deviation
and a bucketed balance histogram.
"""

__version__ = "0.1.0"
