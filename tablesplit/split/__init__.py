"""Delimited file splitting utilities."""
from tablesplit.split.orchestrator import SplitResult, split_csv

__all__ = [
    "SplitResult",
    "split_csv",
]
