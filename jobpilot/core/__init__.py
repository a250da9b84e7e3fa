"""Core application components."""

from jobpilot.core.config import settings
from jobpilot.core.exceptions import (
    AuthError,
    OracleError,
    PersistenceError,
    PipelineError,
    PlatformError,
)
from jobpilot.core.storage import Base, async_session, init_models

__all__ = [
    "AuthError",
    "Base",
    "OracleError",
    "PersistenceError",
    "PipelineError",
    "PlatformError",
    "async_session",
    "init_models",
    "settings",
]
