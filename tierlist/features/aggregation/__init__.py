"""Aggregation feature - build and stat derivation from top performers."""

from .builds import derive_most_common_build
from .schemas import (
    DerivedBuild,
    DerivedStatPriority,
    ImportStringBuild,
    NodeRatesBuild,
    StatPriority,
    UnavailableBuild,
    UnavailableStatPriority,
)
from .stats import derive_stat_priority

__all__ = [
    "derive_most_common_build",
    "derive_stat_priority",
    "DerivedBuild",
    "DerivedStatPriority",
    "ImportStringBuild",
    "NodeRatesBuild",
    "StatPriority",
    "UnavailableBuild",
    "UnavailableStatPriority",
]
