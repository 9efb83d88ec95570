"""
Tests for job run queries.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from tierlist.core.enums import JobStatus, Mode
from tierlist.features.jobs.models import JobRun
from tierlist.features.jobs.service import JobService

BASE_TIME = datetime(2026, 10, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def seeded_runs(db_session):
    runs = [
        JobRun(
            mode=Mode.RAID,
            status=JobStatus.SUCCESS,
            trigger="interval",
            started_at=BASE_TIME,
            items_updated=10,
        ),
        JobRun(
            mode=None,
            status=JobStatus.FAILED,
            trigger="manual",
            started_at=BASE_TIME + timedelta(minutes=30),
            error_message="upstream down",
        ),
        JobRun(
            mode=Mode.MYTHIC_PLUS,
            status=JobStatus.RUNNING,
            trigger="cron",
            started_at=BASE_TIME + timedelta(minutes=60),
        ),
    ]
    db_session.add_all(runs)
    await db_session.commit()
    return runs


class TestJobService:
    """Test cases for JobService."""

    @pytest.mark.asyncio
    async def test_latest_runs_newest_first(self, db_session, seeded_runs):
        runs = await JobService(db_session).get_latest_job_runs()

        assert [run.trigger for run in runs] == ["cron", "manual", "interval"]
        assert runs[2].items_updated == 10

    @pytest.mark.asyncio
    async def test_filter_by_status_and_limit(self, db_session, seeded_runs):
        service = JobService(db_session)

        failed = await service.get_latest_job_runs(status=JobStatus.FAILED)
        limited = await service.get_latest_job_runs(limit=1)

        assert [run.error_message for run in failed] == ["upstream down"]
        assert [run.status for run in limited] == [JobStatus.RUNNING]

    @pytest.mark.asyncio
    async def test_get_job_run(self, db_session, seeded_runs):
        service = JobService(db_session)

        found = await service.get_job_run(seeded_runs[1].id)

        assert found.status == JobStatus.FAILED
        assert found.mode is None
        assert await service.get_job_run(9999) is None
