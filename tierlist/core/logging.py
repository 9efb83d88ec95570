"""Logging configuration using structlog.

Both processes (API and refresh worker) call ``setup_logging`` once at start.
Per-run context such as ``job_run_id`` is bound through structlog contextvars
by the refresh orchestrator and merged into every event logged during the run.
"""

import logging

import structlog
from structlog import contextvars as structlog_contextvars

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "apscheduler.executors.default")


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Configure structlog for structured logging.

    :param log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :param log_format: ``json`` for machine-readable lines, ``console`` for local development
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog_contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
