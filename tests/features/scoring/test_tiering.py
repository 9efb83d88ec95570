"""
Tests for tier assignment.
"""

import pytest

from tierlist.core.enums import Tier
from tierlist.features.app_config.schemas import AppConfig, TierRange
from tierlist.features.scoring import assign_tier


@pytest.fixture
def config():
    return AppConfig()


class TestAssignTier:
    """Test cases for assign_tier."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, Tier.S),
            (95, Tier.S),
            (94.99, Tier.A_PLUS),
            (90, Tier.A_PLUS),
            (85, Tier.A),
            (70, Tier.B_PLUS),
            (60, Tier.B),
            (59.99, Tier.C),
            (0, Tier.C),
        ],
    )
    def test_default_ranges(self, config, score, expected):
        assert assign_tier(score, config) is expected

    def test_gap_falls_back_to_lowest_tier(self, config):
        """A score between two ranges (94.995) gets the lowest configured tier."""
        assert assign_tier(94.995, config) is Tier.C

    @pytest.mark.parametrize("score", [-5.0, 150.0, 1e9])
    def test_out_of_range_never_raises(self, config, score):
        assert assign_tier(score, config) is Tier.C

    def test_unordered_configuration(self):
        """Ranges are checked by descending minimum regardless of configured order."""
        config = AppConfig(
            tiers=[
                TierRange(tier=Tier.B, min_score=0, max_score=100),
                TierRange(tier=Tier.S, min_score=80, max_score=100),
            ]
        )

        assert assign_tier(90, config) is Tier.S
        assert assign_tier(50, config) is Tier.B

    def test_lowest_tier_is_by_min_score(self):
        config = AppConfig(
            tiers=[
                TierRange(tier=Tier.A, min_score=50, max_score=100),
                TierRange(tier=Tier.B_PLUS, min_score=20, max_score=40),
            ]
        )

        assert assign_tier(45, config) is Tier.B_PLUS

    def test_empty_configuration(self):
        assert assign_tier(50, AppConfig(tiers=[])) is Tier.C
