"""Shared enums used across features.

This module provides a single source of truth for enums used in both models and schemas.
"""

from enum import Enum


class Mode(str, Enum):
    """Top-level content category, each with its own scoring formula."""

    MYTHIC_PLUS = "MYTHIC_PLUS"
    RAID = "RAID"


class RefreshMode(str, Enum):
    """Mode requested by a refresh trigger; ALL expands to every mode."""

    MYTHIC_PLUS = "MYTHIC_PLUS"
    RAID = "RAID"
    ALL = "ALL"

    def modes(self) -> list[Mode]:
        """Expand the requested mode into concrete modes, in refresh order."""
        if self is RefreshMode.ALL:
            return [Mode.MYTHIC_PLUS, Mode.RAID]
        return [Mode(self.value)]


class Role(str, Enum):
    """Role classification of a spec."""

    DPS = "DPS"
    TANK = "TANK"
    HEALER = "HEALER"


class Tier(str, Enum):
    """Discrete tier labels, best first."""

    S = "S"
    A_PLUS = "A_PLUS"
    A = "A"
    B_PLUS = "B_PLUS"
    B = "B"
    C = "C"


class JobStatus(str, Enum):
    """Enumeration of job run statuses."""

    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class Trigger(str, Enum):
    """Source that requested a refresh run."""

    MANUAL = "manual"
    CRON = "cron"
    INTERVAL = "interval"
    SEED = "seed"
