"""Numeric helpers shared by the scoring components."""

from __future__ import annotations

import math
from typing import Iterable


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, as the dashboards display it."""
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int = 1) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def safe_div(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def mean(values: Iterable[float]) -> float:
    collected = list(values)
    return safe_div(sum(collected), len(collected))
