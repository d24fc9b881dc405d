"""Time-window matching for the scheduled checks.

A target "matches" when the current instant is within ``tolerance`` of it,
boundaries included. The tolerance is wider than the polling interval so a
window can't fall between two ticks; the one-way flags on games stop the
repeated matches on consecutive ticks from acting twice.
"""
from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from loguru import logger

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}
_WEEKDAY_ABBREVIATIONS = {name[:3]: index for name, index in WEEKDAYS.items()}


def now_in(tz_name: str) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def parse_weekday(name: Optional[str]) -> Optional[int]:
    """Map a weekday name ("Monday", "mon") to 0..6, or None if unknown."""
    if not name:
        return None
    key = name.strip().lower()
    if key in WEEKDAYS:
        return WEEKDAYS[key]
    return _WEEKDAY_ABBREVIATIONS.get(key)


def parse_time(value: Optional[str], default: str = "12:00") -> Optional[time]:
    """Parse "HH:MM"; blank falls back to ``default``, malformed gives None."""
    raw = (value or "").strip() or default
    try:
        return datetime.strptime(raw, "%H:%M").time()
    except ValueError:
        return None


def _elapsed(a: datetime, b: datetime) -> timedelta:
    # subtracting two datetimes that share a tzinfo gives wall-clock time;
    # going through UTC gives real elapsed time, also across DST changes
    return abs(a.astimezone(timezone.utc) - b.astimezone(timezone.utc))


def is_within_window(now: datetime, target: datetime, tolerance: timedelta) -> bool:
    return _elapsed(now, target) <= tolerance


def weekly_target(now: datetime, weekday: int, at: time) -> datetime:
    """Occurrence of (weekday, time) closest to ``now``, in ``now``'s timezone.

    Looks at last week, this week and next week so windows that straddle
    midnight or the week boundary still match.
    """
    this_week = now.date() + timedelta(days=weekday - now.weekday())
    candidates = [
        datetime.combine(this_week + timedelta(weeks=offset), at, tzinfo=now.tzinfo)
        for offset in (-1, 0, 1)
    ]
    return min(candidates, key=lambda candidate: _elapsed(now, candidate))


def matches_weekly_time(
    now: datetime,
    day_name: Optional[str],
    time_str: Optional[str],
    tolerance: timedelta,
    default_time: str = "12:00",
) -> bool:
    weekday = parse_weekday(day_name)
    if weekday is None:
        logger.warning(f"Unknown weekday {day_name!r}, skipping")
        return False

    at = parse_time(time_str, default_time)
    if at is None:
        logger.warning(f"Unparseable time {time_str!r}, skipping")
        return False

    return is_within_window(now, weekly_target(now, weekday, at), tolerance)


def reminder_instant(start_at: datetime, offset_minutes: int) -> datetime:
    return start_at - timedelta(minutes=offset_minutes)


def matches_reminder(
    now: datetime,
    start_at: Optional[datetime],
    offset_minutes: int,
    tolerance: timedelta,
) -> bool:
    if start_at is None:
        return False
    return is_within_window(now, reminder_instant(start_at, offset_minutes), tolerance)
