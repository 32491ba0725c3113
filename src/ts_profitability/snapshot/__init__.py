"""Snapshot construction and the month-by-month historical walk."""

from .builder import (
    SnapshotBuilder,
    SnapshotOptions,
    count_test_cases,
    format_snapshot_date,
)
from .walker import HistoricalWalker, WalkOptions, add_month, iter_months

__all__ = [
    "SnapshotBuilder",
    "SnapshotOptions",
    "count_test_cases",
    "format_snapshot_date",
    "HistoricalWalker",
    "WalkOptions",
    "add_month",
    "iter_months",
]
