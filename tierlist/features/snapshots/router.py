"""Tier list endpoints backed by the latest snapshot per mode."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
import structlog

from tierlist.core.enums import Mode
from .dependencies import SnapshotServiceDep
from .schemas import SnapshotSummary, SnapshotView

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/tier", tags=["tier"])


@router.get("", response_model=SnapshotView)
async def get_tier_list(
    snapshot_service: SnapshotServiceDep,
    mode: Mode = Query(Mode.MYTHIC_PLUS, description="Content mode"),
):
    """
    Get the latest tier list for a mode.

    Returns 404 until the first snapshot of the mode has been written.
    """
    try:
        view = await snapshot_service.get_latest(mode)
    except Exception as e:
        logger.error(
            "Failed to load tier list", mode=mode.value, error=str(e), exc_info=True
        )
        raise HTTPException(
            status_code=500,
            detail="Internal server error retrieving tier list",
        )

    if view is None:
        raise HTTPException(status_code=404, detail=f"No snapshot for mode {mode.value}")
    return view


@router.get("/history", response_model=List[SnapshotSummary])
async def get_snapshot_history(
    snapshot_service: SnapshotServiceDep,
    mode: Optional[Mode] = Query(None, description="Filter by mode"),
    limit: int = Query(20, ge=1, le=100, description="Number of snapshots to return"),
):
    """List recent snapshots, newest first."""
    try:
        return await snapshot_service.list_history(mode=mode, limit=limit)
    except Exception as e:
        logger.error("Failed to list snapshots", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Internal server error listing snapshots",
        )


@router.get("/snapshots/{snapshot_id}", response_model=SnapshotView)
async def get_snapshot(snapshot_id: int, snapshot_service: SnapshotServiceDep):
    """Get a specific snapshot by id."""
    try:
        view = await snapshot_service.get_by_id(snapshot_id)
    except Exception as e:
        logger.error(
            "Failed to load snapshot", snapshot_id=snapshot_id, error=str(e), exc_info=True
        )
        raise HTTPException(
            status_code=500,
            detail="Internal server error retrieving snapshot",
        )

    if view is None:
        raise HTTPException(status_code=404, detail="Snapshot not found")
    return view
