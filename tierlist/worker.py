"""Refresh worker process.

Runs a seed refresh when the database has no snapshot yet, then either
schedules the interval refresh (``WORKER_MODE=interval``) or idles while
refreshes arrive through the API's cron endpoint (``WORKER_MODE=cron``).

Usage:
    python -m tierlist.worker
"""

import asyncio
import signal

import structlog

from tierlist.core import db_manager, get_global_settings
from tierlist.core.logging import setup_logging
from tierlist.features.jobs.scheduler import (
    bootstrap_seed,
    run_interval_refresh,
    shutdown_scheduler,
    start_scheduler,
)

logger = structlog.get_logger(__name__)


async def run_worker() -> None:
    """Run the worker until SIGINT or SIGTERM."""
    settings = get_global_settings()
    logger.info("Starting worker", worker_mode=settings.worker_mode)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        seeded = await bootstrap_seed(settings)

        if settings.worker_mode == "interval":
            if not seeded:
                await run_interval_refresh()
            start_scheduler(settings)
        else:
            logger.info(
                "Cron mode enabled; expecting external trigger via the cron refresh endpoint"
            )

        await stop_event.wait()
    finally:
        logger.info("Shutting down worker")
        shutdown_scheduler()
        await db_manager.close()


def main() -> None:
    """Entry point for the worker process."""
    settings = get_global_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        asyncio.run(run_worker())
    except Exception as e:
        logger.error("Worker startup failed", error=str(e), error_type=type(e).__name__)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
