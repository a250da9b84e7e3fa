"""jobpilot - autonomous job search pipeline for hh.ru."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from jobpilot.core.config import settings
from jobpilot.core.storage import init_models
from jobpilot.services.scheduler_service import create_scheduler

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Initializing application...")
    await init_models()

    scheduler = create_scheduler()
    app.state.scheduler = scheduler

    if settings.scheduler_enabled:
        logger.info("Starting job search scheduler...")
        await scheduler.start()

    logger.info("Application initialized")

    yield

    logger.info("Shutting down...")
    await scheduler.stop()
    await scheduler.hh_client.close()
    logger.info("Shutdown complete")


app = FastAPI(
    title="jobpilot",
    description="Autonomous job search pipeline for hh.ru",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    scheduler = getattr(app.state, "scheduler", None)
    return {
        "status": "healthy",
        "service": "jobpilot",
        "scheduler": scheduler.status() if scheduler else None,
    }
