"""Pydantic schemas for the tunable application configuration."""

from pydantic import BaseModel, ConfigDict, Field

from tierlist.core.enums import Mode, Tier


class TierRange(BaseModel):
    """Inclusive normalized-score range mapped to a tier."""

    model_config = ConfigDict(frozen=True)

    tier: Tier
    min_score: float
    max_score: float


class MythicPlusConfig(BaseModel):
    """Dungeon-mode scoring parameters."""

    model_config = ConfigDict(frozen=True)

    top_n: int = Field(200, gt=0, description="Entries kept per spec")
    timed_bonus: float = Field(0.25, description="Added to timed runs' key level")
    overtime_penalty: float = Field(
        -0.25, description="Added to untimed runs' key level"
    )
    min_sample_size: int = Field(20, ge=0)


class RaidConfig(BaseModel):
    """Raid-mode scoring parameters."""

    model_config = ConfigDict(frozen=True)

    top_n: int = Field(200, gt=0, description="Entries kept per spec")
    percentile: float = Field(
        0.95, ge=0.5, le=0.999, description="Percentile of top-N metrics used as raw score"
    )
    min_sample_size: int = Field(20, ge=0)


class FetchConfig(BaseModel):
    """Upstream fetch parameters."""

    model_config = ConfigDict(frozen=True)

    cache_ttl_seconds: int = Field(900, gt=0)
    retry_count: int = Field(4, ge=0)
    retry_base_delay_ms: int = Field(500, gt=0)
    api_concurrency: int = Field(4, gt=0)


def default_tiers() -> list[TierRange]:
    """Default tier ranges, best first."""
    return [
        TierRange(tier=Tier.S, min_score=95, max_score=100),
        TierRange(tier=Tier.A_PLUS, min_score=90, max_score=94.99),
        TierRange(tier=Tier.A, min_score=80, max_score=89.99),
        TierRange(tier=Tier.B_PLUS, min_score=70, max_score=79.99),
        TierRange(tier=Tier.B, min_score=60, max_score=69.99),
        TierRange(tier=Tier.C, min_score=0, max_score=59.99),
    ]


class AppConfig(BaseModel):
    """Immutable configuration value passed explicitly into every pipeline stage."""

    model_config = ConfigDict(frozen=True)

    tiers: list[TierRange] = Field(default_factory=default_tiers)
    mythic_plus: MythicPlusConfig = Field(default_factory=MythicPlusConfig)
    raid: RaidConfig = Field(default_factory=RaidConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)

    def top_n_for(self, mode: Mode) -> int:
        """Top-N truncation size of the given mode."""
        if mode is Mode.MYTHIC_PLUS:
            return self.mythic_plus.top_n
        return self.raid.top_n

    def min_sample_size_for(self, mode: Mode) -> int:
        """Minimum surviving sample size of the given mode."""
        if mode is Mode.MYTHIC_PLUS:
            return self.mythic_plus.min_sample_size
        return self.raid.min_sample_size


DEFAULT_APP_CONFIG = AppConfig()
