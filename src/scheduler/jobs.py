from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger

from src.backend.client import BackendClient
from src.backend.repository import LeagueRepository
from src.config import Settings, get_settings
from src.notifications.dispatcher import NotificationDispatcher
from src.notifications.twilio import TwilioSender
from src.scheduler.checks import (
    check_auto_open,
    check_game_day_reminders,
    check_registration_notifications,
)
from src.scheduler.windows import now_in
from src.services.members import MemberResolver

_tick_lock = threading.Lock()


def get_backend_client(settings: Settings) -> BackendClient:
    return BackendClient(settings)


def run_scheduled_checks(
    settings: Optional[Settings] = None, now: Optional[datetime] = None
) -> Dict[str, Any]:
    """One tick: auto-open, registration notices, game-day reminders.

    Each check is isolated; a failing check is logged and the next one runs.
    A tick that starts while another is still running is skipped.

    Returns:
        Dict with check names as keys and their summaries (or an "error") as values.
    """
    if not _tick_lock.acquire(blocking=False):
        logger.warning("Previous tick still running, skipping this one")
        return {"skipped": True}

    try:
        settings = settings or get_settings()
        now = now or now_in(settings.timezone)
        logger.info(f"Starting scheduled checks at {now.isoformat()}")

        results: Dict[str, Any] = {}
        with get_backend_client(settings) as client:
            repository = LeagueRepository(client)
            resolver = MemberResolver(repository, settings.default_display_name)
            dispatcher = NotificationDispatcher(settings, TwilioSender(settings))

            checks = [
                ("auto_open", lambda: check_auto_open(repository, settings, now)),
                (
                    "registration_notifications",
                    lambda: check_registration_notifications(
                        repository, resolver, dispatcher, settings
                    ),
                ),
                (
                    "game_day_reminders",
                    lambda: check_game_day_reminders(
                        repository, resolver, dispatcher, settings, now
                    ),
                ),
            ]
            for name, check in checks:
                try:
                    results[name] = check()
                    logger.info(f"{name}: {results[name]}")
                except Exception as e:
                    results[name] = {"error": str(e)}
                    logger.error(f"Error in {name} check: {e}")

        logger.info("Scheduled checks completed")
        return results
    finally:
        _tick_lock.release()
