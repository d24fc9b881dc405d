from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Header, HTTPException
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from src.config import get_settings
from src.scheduler.jobs import run_scheduled_checks
from src.scheduler.runner import start_scheduler

settings = get_settings()
scheduler: Optional[object] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global scheduler
    logger.info("Starting up...")

    if settings.scheduler_enabled:
        scheduler = start_scheduler(settings)
    else:
        logger.warning("Scheduler disabled by configuration")

    yield

    if scheduler:
        scheduler.shutdown()
    logger.info("Shutting down...")


# Disable interactive docs in production
docs_url = None if settings.is_production else "/docs"
redoc_url = None if settings.is_production else "/redoc"

app = FastAPI(
    title="Poker League Notifier",
    description="Scheduled registration auto-open and member notifications",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url,
)


def _require_admin(x_admin_key: Optional[str]) -> None:
    """Admin endpoints are open in development and key-protected in production."""
    if settings.is_production:
        if not settings.admin_api_key:
            raise HTTPException(status_code=503, detail="Admin API not configured")
        if x_admin_key != settings.admin_api_key:
            raise HTTPException(status_code=401, detail="Invalid admin key")


def _describe_job(job) -> dict:
    next_run = job.next_run_time.isoformat() if job.next_run_time else None
    return {"id": job.id, "name": job.name, "next_run": next_run}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/api/admin/status")
async def admin_status(x_admin_key: str = Header(None)):
    _require_admin(x_admin_key)

    running = bool(scheduler and scheduler.running)
    jobs = [_describe_job(job) for job in scheduler.get_jobs()] if scheduler else []
    return {"scheduler_running": running, "jobs": jobs}


@app.post("/api/admin/run-checks")
async def admin_run_checks(x_admin_key: str = Header(None)):
    _require_admin(x_admin_key)
    results = await run_in_threadpool(run_scheduled_checks, settings)
    if results.get("skipped"):
        raise HTTPException(status_code=409, detail="A tick is already running")
    return results
