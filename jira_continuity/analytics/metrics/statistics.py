"""Small numeric helpers shared by the scoring metrics."""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up (``2.5 -> 3``, ``-2.5 -> -2``)."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return statistics.fmean(values)


def pstdev(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return statistics.pstdev(values)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation divided by the mean; 0 for empty or zero-mean input."""
    avg = mean(values)
    if avg == 0:
        return 0.0
    return pstdev(values) / avg
