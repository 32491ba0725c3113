"""Symbol aggregation and metric formulas."""

from .aggregator import aggregate
from .metrics import HalsteadAccumulator, compute_gaffney, floor_halstead, gaffney_bugs

__all__ = [
    "aggregate",
    "HalsteadAccumulator",
    "compute_gaffney",
    "floor_halstead",
    "gaffney_bugs",
]
