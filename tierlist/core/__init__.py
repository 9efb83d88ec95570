"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import Settings, get_settings, get_global_settings
from .database import DatabaseManager, get_db, db_manager
from .enums import JobStatus, Mode, RefreshMode, Role, Tier, Trigger
from .errors import (
    UpstreamError,
    UpstreamHTTPError,
    UpstreamRetryExhaustedError,
    MissingCredentialsError,
)
from .models import Base, JSONType, utc_now

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    # Database
    "DatabaseManager",
    "get_db",
    "db_manager",
    # Enums
    "JobStatus",
    "Mode",
    "RefreshMode",
    "Role",
    "Tier",
    "Trigger",
    # Errors
    "UpstreamError",
    "UpstreamHTTPError",
    "UpstreamRetryExhaustedError",
    "MissingCredentialsError",
    # Models
    "Base",
    "JSONType",
    "utc_now",
]
