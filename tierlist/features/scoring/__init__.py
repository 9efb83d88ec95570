"""Scoring feature - per-spec aggregation, normalization and tiering."""

from .engine import score_entries, score_mythic_plus, score_raid
from .normalize import clamp_score, normalize_to_hundred
from .schemas import RankedSpec, SpecAggregate
from .statistics import percentile, safe_median
from .tiering import assign_tier

__all__ = [
    "assign_tier",
    "clamp_score",
    "normalize_to_hundred",
    "percentile",
    "RankedSpec",
    "safe_median",
    "score_entries",
    "score_mythic_plus",
    "score_raid",
    "SpecAggregate",
]
