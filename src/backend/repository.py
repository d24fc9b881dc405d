from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import ValidationError

from src.backend.client import BackendClient
from src.models import Game, Group, GroupMember, GroupSettings, User
from src.models.base import EntityModel

GROUP_SETTINGS = "GroupSettings"
GAME = "Game"
GROUP_MEMBER = "GroupMember"
USER = "User"
GROUP = "Group"

ModelT = TypeVar("ModelT", bound=EntityModel)


def _parse_row(model: Type[ModelT], row: Dict[str, Any]) -> Optional[ModelT]:
    try:
        return model.model_validate(row)
    except ValidationError as e:
        row_id = row.get("id") if isinstance(row, dict) else None
        logger.warning(
            f"Skipping malformed {model.__name__} row {row_id!r}: "
            f"{e.error_count()} validation error(s)"
        )
        return None


def _parse_rows(model: Type[ModelT], rows: Iterable[Dict[str, Any]]) -> List[ModelT]:
    """Validate each row on its own; malformed rows are dropped, not fatal."""
    parsed = (_parse_row(model, row) for row in rows)
    return [item for item in parsed if item is not None]


class LeagueRepository:
    """Typed access to the league entities.

    Flag writes only ever set a flag to true; nothing here reverts one.
    """

    def __init__(self, client: BackendClient):
        self.client = client

    def list_group_settings(self) -> List[GroupSettings]:
        return _parse_rows(GroupSettings, self.client.list(GROUP_SETTINGS))

    def list_group_games(self, group_id: str) -> List[Game]:
        return _parse_rows(Game, self.client.filter(GAME, groupId=group_id))

    def list_registration_open_games(self) -> List[Game]:
        return _parse_rows(Game, self.client.filter(GAME, registrationOpen=True))

    def list_active_members(self, group_id: str) -> List[GroupMember]:
        rows = self.client.filter(GROUP_MEMBER, groupId=group_id, isActive=True)
        return _parse_rows(GroupMember, rows)

    def list_users(self) -> List[User]:
        return _parse_rows(User, self.client.list(USER))

    def get_group(self, group_id: str) -> Optional[Group]:
        row = self.client.get(GROUP, group_id)
        return _parse_row(Group, row) if row else None

    def _set_flag(self, game_id: str, field: str) -> None:
        self.client.update(GAME, game_id, {field: True})
        logger.debug(f"Game {game_id}: {field} set")

    def mark_registration_open(self, game_id: str) -> None:
        self._set_flag(game_id, "registrationOpen")

    def mark_registration_notified(self, game_id: str) -> None:
        self._set_flag(game_id, "registrationNotificationSent")

    def mark_reminder_sent(self, game_id: str) -> None:
        self._set_flag(game_id, "reminderSent")
