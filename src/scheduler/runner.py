from __future__ import annotations

from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.schedulers.base import BaseScheduler
from loguru import logger

from src.config import Settings, get_settings
from src.scheduler.jobs import run_scheduled_checks


def create_scheduler(settings: Optional[Settings] = None, blocking: bool = False) -> BaseScheduler:
    settings = settings or get_settings()
    scheduler = BlockingScheduler() if blocking else BackgroundScheduler()

    # fixed interval, plus one eager run at start-up
    scheduler.add_job(
        run_scheduled_checks,
        "interval",
        minutes=settings.check_interval_minutes,
        kwargs={"settings": settings},
        id="league_checks",
        name="League Checks",
        next_run_time=datetime.now(),
        max_instances=1,
        coalesce=True,
    )

    logger.info(
        f"Scheduler configured: league checks every {settings.check_interval_minutes} min"
    )
    return scheduler


def start_scheduler(settings: Optional[Settings] = None) -> BaseScheduler:
    scheduler = create_scheduler(settings)
    scheduler.start()
    logger.info("Scheduler started")
    return scheduler
