"""Pydantic schemas for the snapshot read view."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tierlist.core.enums import Mode, Role, Tier


class SpecView(BaseModel):
    """One spec of a snapshot, joined with its build and stats rows."""

    id: int
    mode: Mode
    role: Role
    class_name: str
    spec_name: str
    score: float = Field(..., ge=0, le=100, description="Normalized score")
    tier: Tier
    sample_size: int
    rank: int
    previous_rank: Optional[int] = None
    raw_json: Optional[Dict[str, Any]] = None
    build: Optional[Dict[str, Any]] = None
    build_source: Optional[str] = None
    build_import_string: Optional[str] = None
    stats: Optional[Dict[str, Any]] = None
    rank_delta: int = Field(
        0, description="Positions gained since the previous snapshot; 0 when the spec is new"
    )


class SnapshotView(BaseModel):
    """Snapshot with every spec, ordered by role then rank."""

    snapshot_id: int
    mode: Mode
    created_at: datetime
    metadata_json: Optional[Dict[str, Any]] = None
    specs: List[SpecView] = Field(default_factory=list)


class SnapshotSummary(BaseModel):
    """Snapshot header without per-spec rows."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    mode: Mode
    created_at: datetime
    metadata_json: Optional[Dict[str, Any]] = None
