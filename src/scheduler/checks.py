from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict

from loguru import logger

from src.backend.client import BackendError
from src.backend.repository import LeagueRepository
from src.config import Settings
from src.models import NotificationType
from src.notifications.dispatcher import NotificationDispatcher
from src.notifications.formatter import (
    format_game_reminder,
    format_registration_open,
    registration_link,
)
from src.scheduler.windows import matches_reminder, matches_weekly_time
from src.services.members import MemberResolver


class GroupNames:
    """Group display names, fetched lazily and cached for one check."""

    def __init__(self, repository: LeagueRepository):
        self.repository = repository
        self._names: Dict[str, str] = {}

    def get(self, group_id: str) -> str:
        if group_id not in self._names:
            try:
                group = self.repository.get_group(group_id)
                self._names[group_id] = group.name if group else ""
            except BackendError as e:
                logger.warning(f"Could not load group {group_id}: {e}")
                self._names[group_id] = ""
        return self._names[group_id]


def check_auto_open(
    repository: LeagueRepository, settings: Settings, now: datetime
) -> Dict[str, int]:
    """Open registration for eligible games of groups whose weekly open time is now."""
    tolerance = timedelta(minutes=settings.match_tolerance_minutes)
    summary = {"groups_matched": 0, "games_opened": 0, "errors": 0}

    for config in repository.list_group_settings():
        if not config.auto_open_registration_enabled:
            continue
        if not matches_weekly_time(
            now,
            config.auto_open_registration_day,
            config.auto_open_registration_time,
            tolerance,
            settings.default_open_time,
        ):
            continue

        summary["groups_matched"] += 1
        logger.info(
            f"Auto-open window matched for group {config.group_id} "
            f"({config.auto_open_registration_day} {config.auto_open_registration_time})"
        )

        try:
            games = repository.list_group_games(config.group_id)
            for game in games:
                if not game.is_open_eligible(now):
                    continue
                repository.mark_registration_open(game.id)
                summary["games_opened"] += 1
                logger.info(f"Opened registration for game {game.id} in group {config.group_id}")
        except BackendError as e:
            summary["errors"] += 1
            logger.error(f"Auto-open failed for group {config.group_id}: {e}")

    return summary


def check_registration_notifications(
    repository: LeagueRepository,
    resolver: MemberResolver,
    dispatcher: NotificationDispatcher,
    settings: Settings,
) -> Dict[str, int]:
    """Tell a group's active members that registration opened, once per game.

    Games whose group has this notification turned off (or has no settings)
    are still marked as notified so they are not picked up on every tick.
    When nothing can be sent (no template, notifications switched off) the
    other games stay pending for a later tick.
    """
    summary = {
        "games": 0,
        "notified": 0,
        "skipped_disabled": 0,
        "deferred": 0,
        "sent": 0,
        "failed": 0,
        "errors": 0,
    }

    pending = [
        game for game in repository.list_registration_open_games()
        if game.needs_registration_notice()
    ]
    if not pending:
        logger.debug("No games waiting for a registration notice")
        return summary

    settings_by_group = {config.group_id: config for config in repository.list_group_settings()}
    group_names = GroupNames(repository)
    summary["games"] = len(pending)
    ready = dispatcher.is_ready(
        NotificationType.registration_open, settings.template_registration_open
    )

    for game in pending:
        config = settings_by_group.get(game.group_id)
        try:
            if config is None or not config.send_reminder_on_registration_open:
                logger.info(
                    f"Registration notice disabled for group {game.group_id}, "
                    f"marking game {game.id} as notified"
                )
                repository.mark_registration_notified(game.id)
                summary["skipped_disabled"] += 1
                continue

            if not ready:
                summary["deferred"] += 1
                continue

            recipients = resolver.resolve(game.group_id)
            group_name = group_names.get(game.group_id)
            link = registration_link(settings.app_base_url, game.group_id)
            result = dispatcher.fan_out(
                NotificationType.registration_open,
                settings.template_registration_open,
                recipients,
                lambda member: format_registration_open(member, group_name, link),
            )
            # at most one dispatch attempt per game, whatever the delivery outcome
            repository.mark_registration_notified(game.id)
            summary["notified"] += 1
            summary["sent"] += result.sent
            summary["failed"] += result.failed
        except BackendError as e:
            summary["errors"] += 1
            logger.error(f"Registration notice failed for game {game.id}: {e}")

    return summary


def check_game_day_reminders(
    repository: LeagueRepository,
    resolver: MemberResolver,
    dispatcher: NotificationDispatcher,
    settings: Settings,
    now: datetime,
) -> Dict[str, int]:
    """Remind seated players of a game at the group's offset before start."""
    tolerance = timedelta(minutes=settings.match_tolerance_minutes)
    summary = {"groups": 0, "reminders": 0, "deferred": 0, "sent": 0, "failed": 0, "errors": 0}
    group_names = GroupNames(repository)
    ready = dispatcher.is_ready(NotificationType.game_reminder, settings.template_game_reminder)

    for config in repository.list_group_settings():
        if not config.day_of_game_push_enabled:
            continue
        summary["groups"] += 1

        try:
            games = repository.list_group_games(config.group_id)
            for game in games:
                if not game.is_reminder_eligible():
                    continue
                if not matches_reminder(
                    now, game.start_at, config.day_of_game_push_offset_minutes, tolerance
                ):
                    continue

                if not ready:
                    summary["deferred"] += 1
                    continue

                seated = game.seated_user_ids()
                recipients = [
                    member for member in resolver.resolve(config.group_id)
                    if member.user_id in seated
                ]
                group_name = group_names.get(config.group_id)
                logger.info(
                    f"Reminder window matched for game {game.id}: "
                    f"{len(recipients)} seated recipients"
                )
                result = dispatcher.fan_out(
                    NotificationType.game_reminder,
                    settings.template_game_reminder,
                    recipients,
                    lambda member: format_game_reminder(member, group_name),
                )
                repository.mark_reminder_sent(game.id)
                summary["reminders"] += 1
                summary["sent"] += result.sent
                summary["failed"] += result.failed
        except BackendError as e:
            summary["errors"] += 1
            logger.error(f"Game-day reminders failed for group {config.group_id}: {e}")

    return summary
