"""Pydantic schemas for refresh triggers and job runs."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from tierlist.core.enums import JobStatus, Mode, RefreshMode, Trigger


class RefreshJobPayload(BaseModel):
    """Payload delivered by a trigger (API, scheduler, seed) to the orchestrator."""

    mode: RefreshMode = Field(RefreshMode.ALL, description="Mode to refresh")
    trigger: Trigger = Field(Trigger.MANUAL, description="What requested the refresh")


class RefreshResult(BaseModel):
    """Outcome of a successful refresh run."""

    updated: int = Field(..., description="Specs written across all refreshed modes")
    job_run_id: int


class RefreshAccepted(BaseModel):
    """Response for an accepted refresh request."""

    status: str = "accepted"
    mode: RefreshMode
    trigger: Trigger


class JobRunResponse(BaseModel):
    """Schema for job run response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    mode: Optional[Mode] = None
    status: JobStatus
    trigger: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    duration_ms: Optional[int] = None
    items_updated: int = 0
    error_message: Optional[str] = None
    metadata_json: Optional[Dict[str, Any]] = None


class RefreshRequest(BaseModel):
    """Optional body of the refresh endpoints."""

    mode: Optional[RefreshMode] = Field(None, description="Mode to refresh; defaults to ALL")
