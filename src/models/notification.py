from __future__ import annotations

import enum


class NotificationType(enum.Enum):
    registration_open = "registration_open"
    game_reminder = "game_reminder"
