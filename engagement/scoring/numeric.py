"""Small numeric helpers shared by the calculators."""
from __future__ import annotations

import math
from typing import Optional, Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity.

    ``round()`` uses banker's rounding (``round(12.5) == 12``); indices such as
    eNPS and percentile are published with half-up rounding (12.5 → 13,
    -12.5 → -12).
    """
    return math.floor(value + 0.5)


def mean(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, ``None`` for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def population_std_dev(values: Sequence[float]) -> Optional[float]:
    """Population (divide-by-n) standard deviation, ``None`` when empty."""
    avg = mean(values)
    if avg is None:
        return None
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient of two equal-length samples.

    Uses ``r = (nΣxy − ΣxΣy) / sqrt[(nΣx² − (Σx)²)(nΣy² − (Σy)²)]`` and returns
    ``0.0`` for empty input or a zero denominator (constant sample).
    """
    if len(x) != len(y):
        raise ValueError("pearson() needs samples of equal length")
    n = len(x)
    if n == 0:
        return 0.0

    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_x2 = sum(xi * xi for xi in x)
    sum_y2 = sum(yi * yi for yi in y)

    numerator = n * sum_xy - sum_x * sum_y
    radicand = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    # Float cancellation can leave a tiny negative radicand for constant input
    if radicand <= 0:
        return 0.0
    denominator = math.sqrt(radicand)
    if denominator == 0:
        return 0.0
    return numerator / denominator
