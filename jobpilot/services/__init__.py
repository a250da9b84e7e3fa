"""Pipeline services."""

from jobpilot.services.scheduler_service import JobSearchScheduler, create_scheduler

__all__ = ["JobSearchScheduler", "create_scheduler"]
