"""Job run queries for the jobs API."""

from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tierlist.core.enums import JobStatus
from .models import JobRun
from .schemas import JobRunResponse


class JobService:
    """Service for reading job run history."""

    def __init__(self, db: AsyncSession):
        """Initialize job service."""
        self.db = db

    async def get_latest_job_runs(
        self, limit: int = 25, status: Optional[JobStatus] = None
    ) -> List[JobRunResponse]:
        """
        Get the most recent job runs.

        :param limit: Maximum number of runs to return
        :param status: Optional status filter
        :returns: Job runs, newest first
        """
        stmt = select(JobRun).order_by(desc(JobRun.started_at), desc(JobRun.id)).limit(limit)
        if status is not None:
            stmt = stmt.where(JobRun.status == status)

        result = await self.db.execute(stmt)
        return [JobRunResponse.model_validate(run) for run in result.scalars()]

    async def get_job_run(self, job_run_id: int) -> Optional[JobRunResponse]:
        """Get a single job run by id."""
        job_run = await self.db.get(JobRun, job_run_id)
        if job_run is None:
            return None
        return JobRunResponse.model_validate(job_run)
