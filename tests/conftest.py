from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from src.backend.client import BackendError
from src.backend.repository import LeagueRepository
from src.config import Settings
from src.notifications.dispatcher import NotificationDispatcher
from src.notifications.twilio import SendResult
from src.services.members import MemberResolver

TZ = ZoneInfo("Asia/Jerusalem")


class FakeBackend:
    """In-memory stand-in for BackendClient with the same list/filter/get/update calls."""

    def __init__(self, data: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.data = data or {}
        self.updates: List[tuple] = []
        self.fail_filters: List[Dict[str, Any]] = []

    def list(self, entity: str) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.data.get(entity, [])]

    def filter(self, entity: str, **predicates: Any) -> List[Dict[str, Any]]:
        for failing in self.fail_filters:
            if failing.get("entity") == entity and all(
                predicates.get(k) == v for k, v in failing.items() if k != "entity"
            ):
                raise BackendError(500, "boom")
        return [
            dict(row)
            for row in self.data.get(entity, [])
            if all(row.get(k) == v for k, v in predicates.items())
        ]

    def get(self, entity: str, entity_id: str) -> Dict[str, Any]:
        for row in self.data.get(entity, []):
            if row.get("id") == entity_id:
                return dict(row)
        raise BackendError(404, "not found")

    def update(self, entity: str, entity_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.updates.append((entity, entity_id, fields))
        for row in self.data.get(entity, []):
            if row.get("id") == entity_id:
                row.update(fields)
                return dict(row)
        raise BackendError(404, "not found")

    def game(self, game_id: str) -> Dict[str, Any]:
        return next(row for row in self.data["Game"] if row["id"] == game_id)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        backend_app_id="app123",
        backend_api_key="secret",
        template_registration_open="HXopen",
        template_game_reminder="HXremind",
        app_base_url="https://league.example.com",
        send_delay_seconds=0,
        timezone="Asia/Jerusalem",
        check_interval_minutes=1,
        match_tolerance_minutes=3,
    )


@pytest.fixture
def monday_noon():
    # 2026-10-19 is a Monday; 12:01 local time
    return datetime(2026, 10, 19, 12, 1, tzinfo=TZ)


@pytest.fixture
def league_data():
    return {
        "GroupSettings": [
            {
                "id": "s1",
                "groupId": "g1",
                "autoOpenRegistrationEnabled": True,
                "autoOpenRegistrationDay": "monday",
                "autoOpenRegistrationTime": "12:00",
                "sendReminderOnRegistrationOpen": True,
                "dayOfGamePushEnabled": True,
                "dayOfGamePushOffsetMinutes": 180,
            },
            {
                "id": "s2",
                "groupId": "g2",
                "autoOpenRegistrationEnabled": True,
                "autoOpenRegistrationDay": "tuesday",
                "autoOpenRegistrationTime": "20:00",
                "sendReminderOnRegistrationOpen": False,
                "dayOfGamePushEnabled": False,
                "dayOfGamePushOffsetMinutes": 60,
            },
        ],
        "Game": [
            {
                "id": "game1",
                "groupId": "g1",
                "status": "scheduled",
                "startAt": "2026-10-22T17:00:00Z",
                "registrationOpen": False,
                "seats": [],
            },
            {
                "id": "game2",
                "groupId": "g2",
                "status": "scheduled",
                "startAt": "2026-10-22T17:00:00Z",
                "registrationOpen": False,
                "seats": [],
            },
        ],
        "GroupMember": [
            {"id": "m1", "groupId": "g1", "userId": "u1", "isActive": True, "phone": "0500000001"},
            {"id": "m2", "groupId": "g1", "userId": "u2", "isActive": True, "displayName": "Dana"},
            {"id": "m3", "groupId": "g1", "userId": "u3", "isActive": True, "phone": "0500000003"},
            {"id": "m4", "groupId": "g1", "userId": "u4", "isActive": False, "phone": "0500000004"},
            {"id": "m5", "groupId": "g2", "userId": "u5", "isActive": True, "phone": "0500000005"},
        ],
        "User": [
            {"id": "u1", "phone": "050-111-1111", "displayName": "Avi"},
            {"id": "u2", "phone": "+972522222222", "displayName": None},
            {"id": "u3"},
            {"id": "u4", "phone": "0544444444", "displayName": "Inactive"},
            {"id": "u5", "phone": "0555555555", "displayName": "Other Group"},
        ],
        "Group": [
            {"id": "g1", "name": "Thursday Hold'em"},
            {"id": "g2", "name": "Other Club"},
        ],
    }


@pytest.fixture
def backend(league_data):
    return FakeBackend(league_data)


@pytest.fixture
def repository(backend):
    return LeagueRepository(backend)


@pytest.fixture
def resolver(repository):
    return MemberResolver(repository, "Player")


@pytest.fixture
def sender():
    mock_sender = MagicMock()
    mock_sender.send_template.return_value = SendResult(ok=True, sid="SM1")
    return mock_sender


@pytest.fixture
def dispatcher(settings, sender):
    return NotificationDispatcher(settings, sender, sleep=MagicMock())
