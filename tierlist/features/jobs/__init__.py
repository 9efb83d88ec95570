"""Jobs feature - refresh orchestration, job run history and scheduling."""

from .models import JobRun
from .refresh import RefreshOrchestrator, run_refresh
from .router import router as jobs_router
from .scheduler import bootstrap_seed, get_scheduler, shutdown_scheduler, start_scheduler
from .schemas import JobRunResponse, RefreshJobPayload, RefreshResult
from .service import JobService

__all__ = [
    "bootstrap_seed",
    "get_scheduler",
    "JobRun",
    "JobRunResponse",
    "JobService",
    "jobs_router",
    "RefreshJobPayload",
    "RefreshOrchestrator",
    "RefreshResult",
    "run_refresh",
    "shutdown_scheduler",
    "start_scheduler",
]
