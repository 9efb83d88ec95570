"""Tier assignment from normalized scores."""

from tierlist.core.enums import Tier
from tierlist.features.app_config.schemas import AppConfig


def assign_tier(score: float, config: AppConfig) -> Tier:
    """Map a normalized score to its configured tier.

    Ranges are checked best first; a score that falls in a gap, or outside
    every range, gets the lowest configured tier.
    """
    ranges = sorted(config.tiers, key=lambda tier_range: tier_range.min_score, reverse=True)
    if not ranges:
        return Tier.C

    for tier_range in ranges:
        if tier_range.min_score <= score <= tier_range.max_score:
            return tier_range.tier

    return ranges[-1].tier
