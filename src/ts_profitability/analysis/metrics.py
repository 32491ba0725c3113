"""Metric formulas: Gaffney bug estimate and Halstead accumulation.

Raw Halstead primitives come from a per-function analyzer; this module only
sums them across a snapshot and floors the totals once at the end.
"""

from __future__ import annotations

import math
from threading import Lock
from typing import Iterable

from ..models import HalsteadMeasurement, MetricGaffney, MetricHalstead

GAFFNEY_CONSTANT = 4.2
GAFFNEY_COEFFICIENT = 0.0015
GAFFNEY_EXPONENT = 4 / 3

# measurement attribute -> MetricHalstead attribute
_SCALAR_FIELDS = (
    ("length", "length"),
    ("vocabulary", "vocabulary"),
    ("volume", "volume"),
    ("difficulty", "difficulty"),
    ("effort", "effort"),
    ("time", "time"),
    ("bugs", "bugs_delivered"),
)


def gaffney_bugs(loc: int) -> int:
    """Estimated defect count for ``loc`` lines: floor(4.2 + 0.0015 * loc^(4/3)).

    ``gaffney_bugs(0) == 4``.
    """
    if loc < 0:
        raise ValueError(f"loc must be non-negative, got {loc}")
    return math.floor(GAFFNEY_CONSTANT + GAFFNEY_COEFFICIENT * loc**GAFFNEY_EXPONENT)


def compute_gaffney(loc_including_tests: int, loc_excluding_tests: int, loc_tests_only: int) -> MetricGaffney:
    return MetricGaffney(
        bugs_including_tests=gaffney_bugs(loc_including_tests),
        bugs_excluding_tests=gaffney_bugs(loc_excluding_tests),
        bugs_tests_only=gaffney_bugs(loc_tests_only),
    )


class HalsteadAccumulator:
    """Running Halstead totals across every function of a snapshot.

    ``add`` is safe to call from several worker threads; summation order does
    not change the totals beyond float rounding.
    """

    def __init__(self) -> None:
        self._totals = MetricHalstead()
        self._lock = Lock()
        self.measurements = 0

    def add(self, measurement: HalsteadMeasurement) -> None:
        with self._lock:
            for source, target in _SCALAR_FIELDS:
                value = getattr(measurement, source)
                if value is None or math.isnan(value):
                    continue
                setattr(self._totals, target, getattr(self._totals, target) + value)
            # distinct identifier lists are not carried at snapshot level
            self._totals.operands += measurement.operands.total
            self._totals.operators += measurement.operators.total
            self.measurements += 1

    def add_all(self, measurements: Iterable[HalsteadMeasurement]) -> None:
        for measurement in measurements:
            self.add(measurement)

    def totals(self) -> MetricHalstead:
        """Unfloored copy of the running totals."""
        with self._lock:
            t = self._totals
            return MetricHalstead(
                length=t.length,
                vocabulary=t.vocabulary,
                volume=t.volume,
                difficulty=t.difficulty,
                effort=t.effort,
                time=t.time,
                bugs_delivered=t.bugs_delivered,
                operands=t.operands,
                operators=t.operators,
            )

    def result(self) -> MetricHalstead:
        """Totals floored to integers."""
        return floor_halstead(self.totals())


def floor_halstead(metric: MetricHalstead) -> MetricHalstead:
    return MetricHalstead(
        length=math.floor(metric.length),
        vocabulary=math.floor(metric.vocabulary),
        volume=math.floor(metric.volume),
        difficulty=math.floor(metric.difficulty),
        effort=math.floor(metric.effort),
        time=math.floor(metric.time),
        bugs_delivered=math.floor(metric.bugs_delivered),
        operands=math.floor(metric.operands),
        operators=math.floor(metric.operators),
    )
