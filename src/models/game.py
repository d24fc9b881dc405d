from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import List, Optional, Set

from pydantic import field_validator

from src.models.base import EntityModel


class GameStatus(str, enum.Enum):
    scheduled = "scheduled"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


REMINDER_STATUSES = (GameStatus.scheduled.value, GameStatus.active.value)


class Seat(EntityModel):
    user_id: Optional[str] = None


class Game(EntityModel):
    id: str
    group_id: str
    # kept as a plain string so statuses added on the backend do not break parsing
    status: str = GameStatus.scheduled.value
    start_at: Optional[datetime] = None
    registration_open: bool = False
    registration_notification_sent: bool = False
    reminder_sent: bool = False
    seats: List[Seat] = []

    @field_validator("start_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_open_eligible(self, now: datetime) -> bool:
        """Scheduled, still closed, and starting strictly after ``now``."""
        return (
            self.status == GameStatus.scheduled.value
            and not self.registration_open
            and self.start_at is not None
            and self.start_at > now
        )

    def needs_registration_notice(self) -> bool:
        return self.registration_open and not self.registration_notification_sent

    def is_reminder_eligible(self) -> bool:
        return self.status in REMINDER_STATUSES and not self.reminder_sent

    def seated_user_ids(self) -> Set[str]:
        return {seat.user_id for seat in self.seats if seat.user_id}

    def __repr__(self) -> str:
        return f"<Game {self.id} group={self.group_id} status={self.status}>"
