"""Per-spec aggregates produced by the scoring engine."""

from typing import List

from pydantic import BaseModel, Field

from tierlist.core.enums import Mode, Role
from tierlist.features.providers.schemas import PerformanceEntry

MAX_EVIDENCE_URLS = 5


class SpecAggregate(BaseModel):
    """Aggregate of one (mode, role, class, spec) for one refresh run."""

    mode: Mode
    role: Role
    class_name: str
    spec_name: str
    score_raw: float
    score_normalized: float = Field(0.0, ge=0, le=100)
    sample_size: int = Field(..., description="Contributing entries after top-N truncation")
    entry_count: int = Field(..., description="Entries observed before truncation")
    evidence_urls: List[str] = Field(default_factory=list)
    raw_entries: List[PerformanceEntry] = Field(
        default_factory=list, description="Top-N contributing entries, metric descending"
    )

    @property
    def spec_key(self) -> str:
        """Key identifying the spec within a snapshot."""
        return f"{self.role.value}|{self.class_name}|{self.spec_name}"


class RankedSpec(SpecAggregate):
    """Aggregate with its dense 1-based rank within its role."""

    rank: int = Field(..., ge=1)
