"""Statistical helpers for spec scoring."""

import math
import statistics
from typing import Sequence


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if denominator is zero.

    Args:
        numerator: The numerator
        denominator: The denominator
        default: Value to return if denominator is zero

    Returns:
        Result of division or default value
    """
    return numerator / denominator if denominator > 0 else default


def safe_median(values: Sequence[float], default: float = math.nan) -> float:
    """
    Median of values, or ``default`` when there are none.

    Args:
        values: Numeric values
        default: Value to return if the sequence is empty
    """
    return statistics.median(values) if values else default


def percentile(values: Sequence[float], fraction: float) -> float:
    """
    Linear-interpolated percentile (same convention as numpy's default).

    Args:
        values: Numeric values, any order
        fraction: Percentile as a fraction in [0, 1]

    Returns:
        The interpolated value, or NaN for an empty sequence
    """
    if not values:
        return math.nan

    ordered = sorted(values)
    position = (len(ordered) - 1) * min(max(fraction, 0.0), 1.0)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return ordered[lower]
    weight = position - lower
    return ordered[lower] + (ordered[upper] - ordered[lower]) * weight
