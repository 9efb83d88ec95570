"""Worker scheduling: seed refresh on start and the interval refresh job."""

from typing import Optional

import structlog
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tierlist.core.config import Settings, get_global_settings
from tierlist.core.database import db_manager
from tierlist.core.enums import RefreshMode, Trigger
from tierlist.features.snapshots.repository import SnapshotRepository
from .refresh import run_refresh
from .schemas import RefreshJobPayload

logger = structlog.get_logger(__name__)

REFRESH_JOB_ID = "refresh-tier-data"

# Global scheduler instance
_scheduler: Optional[AsyncIOScheduler] = None


def get_scheduler() -> Optional[AsyncIOScheduler]:
    """Get the global scheduler instance.

    Returns:
        The scheduler instance if initialized, None otherwise.
    """
    return _scheduler


async def bootstrap_seed(
    settings: Optional[Settings] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> bool:
    """Run a full seed refresh when no snapshot exists yet.

    :returns: True when a seed refresh ran
    """
    settings = settings or get_global_settings()
    if not settings.enable_seed_on_start:
        return False

    session_factory = session_factory or db_manager.async_session_factory
    async with session_factory() as db:
        existing_snapshots = await SnapshotRepository(db).count_snapshots()

    if existing_snapshots > 0:
        logger.info(
            "Skipping seed refresh; snapshots already exist",
            existing_snapshots=existing_snapshots,
        )
        return False

    logger.info("No snapshots found; running seed refresh immediately")
    await run_refresh(
        RefreshJobPayload(mode=RefreshMode.ALL, trigger=Trigger.SEED), settings=settings
    )
    logger.info("Seed refresh completed on startup")
    return True


async def run_interval_refresh() -> None:
    """Scheduled job body: refresh every mode, logging failures."""
    try:
        await run_refresh(RefreshJobPayload(mode=RefreshMode.ALL, trigger=Trigger.INTERVAL))
    except Exception as e:
        logger.error(
            "Interval refresh failed",
            error=str(e),
            error_type=type(e).__name__,
        )


def start_scheduler(settings: Optional[Settings] = None) -> AsyncIOScheduler:
    """Create and start the scheduler with the interval refresh job.

    Must be called from within a running event loop.
    """
    global _scheduler

    settings = settings or get_global_settings()
    if _scheduler is not None:
        logger.warning("Scheduler already initialized")
        return _scheduler

    _scheduler = AsyncIOScheduler(
        executors={"default": AsyncIOExecutor()},
        job_defaults={
            "coalesce": True,  # Combine multiple missed runs into one
            "max_instances": 1,
            "misfire_grace_time": 60,
        },
        timezone="UTC",
    )
    _scheduler.add_job(
        run_interval_refresh,
        trigger="interval",
        minutes=settings.refresh_interval_minutes,
        id=REFRESH_JOB_ID,
        name="Refresh tier data",
        replace_existing=True,
    )
    _scheduler.start()

    logger.info(
        "Interval scheduler enabled",
        interval_minutes=settings.refresh_interval_minutes,
    )
    return _scheduler


def shutdown_scheduler() -> None:
    """Stop the scheduler if it is running."""
    global _scheduler

    if _scheduler is None:
        return

    _scheduler.shutdown(wait=False)
    _scheduler = None
    logger.info("Scheduler shut down")
