from __future__ import annotations

from typing import Optional

from pydantic import Field

from src.models.base import EntityModel


class Group(EntityModel):
    id: str
    name: str = ""


class GroupSettings(EntityModel):
    id: Optional[str] = None
    group_id: str
    auto_open_registration_enabled: bool = False
    auto_open_registration_day: Optional[str] = None
    auto_open_registration_time: Optional[str] = None
    send_reminder_on_registration_open: bool = False
    day_of_game_push_enabled: bool = False
    day_of_game_push_offset_minutes: int = Field(default=0, ge=0)

    def __repr__(self) -> str:
        return (
            f"<GroupSettings group={self.group_id} "
            f"open={self.auto_open_registration_day}@{self.auto_open_registration_time}>"
        )
