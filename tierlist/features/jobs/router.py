"""Refresh trigger and job run endpoints."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query
import structlog

from tierlist.core.enums import JobStatus, RefreshMode, Trigger
from .dependencies import JobServiceDep
from .refresh import run_refresh
from .schemas import JobRunResponse, RefreshAccepted, RefreshJobPayload, RefreshRequest

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["jobs"])


async def _run_refresh_in_background(payload: RefreshJobPayload) -> None:
    """Background task wrapper; failures are already recorded on the JobRun."""
    try:
        await run_refresh(payload)
    except Exception as e:
        logger.error(
            "Background refresh failed",
            mode=payload.mode.value,
            trigger=payload.trigger.value,
            error=str(e),
            error_type=type(e).__name__,
        )


def _schedule_refresh(
    background_tasks: BackgroundTasks,
    body: Optional[RefreshRequest],
    mode: Optional[RefreshMode],
    trigger: Trigger,
) -> RefreshAccepted:
    """Resolve the requested mode (body, then query, then ALL) and queue the run."""
    requested = (body.mode if body else None) or mode or RefreshMode.ALL
    payload = RefreshJobPayload(mode=requested, trigger=trigger)
    background_tasks.add_task(_run_refresh_in_background, payload)
    logger.info(
        "Refresh scheduled", mode=payload.mode.value, trigger=payload.trigger.value
    )
    return RefreshAccepted(mode=payload.mode, trigger=payload.trigger)


@router.post("/refresh", response_model=RefreshAccepted, status_code=202)
async def trigger_refresh(
    background_tasks: BackgroundTasks,
    body: Optional[RefreshRequest] = None,
    mode: Optional[RefreshMode] = Query(None, description="Mode to refresh"),
):
    """
    Schedule a manual refresh run.

    The run executes after the response is sent; follow its progress via
    ``/jobs/runs``.
    """
    return _schedule_refresh(background_tasks, body, mode, Trigger.MANUAL)


@router.api_route(
    "/cron/refresh",
    methods=["GET", "POST"],
    response_model=RefreshAccepted,
    status_code=202,
)
async def trigger_cron_refresh(
    background_tasks: BackgroundTasks,
    body: Optional[RefreshRequest] = None,
    mode: Optional[RefreshMode] = Query(None, description="Mode to refresh"),
):
    """Schedule a refresh requested by an external cron service."""
    return _schedule_refresh(background_tasks, body, mode, Trigger.CRON)


@router.get("/jobs/runs", response_model=List[JobRunResponse])
async def list_job_runs(
    job_service: JobServiceDep,
    limit: int = Query(25, ge=1, le=200, description="Number of runs to return"),
    status: Optional[JobStatus] = Query(None, description="Filter by status"),
):
    """List recent job runs, newest first."""
    try:
        return await job_service.get_latest_job_runs(limit=limit, status=status)
    except Exception as e:
        logger.error("Failed to list job runs", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Internal server error retrieving job runs",
        )


@router.get("/jobs/runs/{job_run_id}", response_model=JobRunResponse)
async def get_job_run(job_run_id: int, job_service: JobServiceDep):
    """Get a single job run."""
    try:
        job_run = await job_service.get_job_run(job_run_id)
    except Exception as e:
        logger.error(
            "Failed to get job run", job_run_id=job_run_id, error=str(e), exc_info=True
        )
        raise HTTPException(
            status_code=500,
            detail="Internal server error retrieving job run",
        )

    if job_run is None:
        raise HTTPException(status_code=404, detail=f"Job run {job_run_id} not found")
    return job_run
