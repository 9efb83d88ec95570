"""Min-max normalization of raw scores onto a 0-100 scale."""

import math
from typing import Sequence

TIED_SCORE = 50.0


def normalize_to_hundred(values: Sequence[float]) -> list[float]:
    """Map the minimum to 0 and the maximum to 100.

    When every value is equal, each one maps to exactly 50.
    """
    if not values:
        return []

    low = min(values)
    high = max(values)
    if low == high:
        return [TIED_SCORE for _ in values]

    return [(value - low) / (high - low) * 100 for value in values]


def clamp_score(score: float) -> float:
    """Round to 2 decimals and clamp to [0, 100]; NaN becomes 0."""
    if math.isnan(score):
        return 0.0
    return min(100.0, max(0.0, round(score, 2)))
