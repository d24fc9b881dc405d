from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app


@pytest.mark.asyncio
async def test_health():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_status_without_scheduler():
    with patch("src.main.scheduler", None):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/api/admin/status")
    assert resp.status_code == 200
    assert resp.json() == {"scheduler_running": False, "jobs": []}


@pytest.mark.asyncio
async def test_status_lists_jobs():
    job = MagicMock(id="league_checks", next_run_time=None)
    job.name = "League Checks"
    fake_scheduler = MagicMock(running=True)
    fake_scheduler.get_jobs.return_value = [job]

    with patch("src.main.scheduler", fake_scheduler):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/api/admin/status")

    data = resp.json()
    assert data["scheduler_running"] is True
    assert data["jobs"] == [{"id": "league_checks", "name": "League Checks", "next_run": None}]


@pytest.mark.asyncio
async def test_run_checks():
    results = {"auto_open": {"groups_matched": 0, "games_opened": 0, "errors": 0}}
    with patch("src.main.run_scheduled_checks", return_value=results) as mock_run:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.post("/api/admin/run-checks")

    assert resp.status_code == 200
    assert resp.json() == results
    mock_run.assert_called_once()


@pytest.mark.asyncio
async def test_run_checks_conflict_when_tick_running():
    with patch("src.main.run_scheduled_checks", return_value={"skipped": True}):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.post("/api/admin/run-checks")
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_admin_key_required_in_production():
    production = MagicMock(is_production=True, admin_api_key="k")
    with patch("src.main.settings", production):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            denied = await ac.get("/api/admin/status")
            allowed = await ac.get("/api/admin/status", headers={"X-Admin-Key": "k"})
    assert denied.status_code == 401
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_status_reports_next_run_as_iso_timestamp():
    job = MagicMock(id="league_checks", next_run_time=datetime(2026, 10, 19, 12, 1, tzinfo=timezone.utc))
    job.name = "League Checks"
    fake_scheduler = MagicMock(running=True)
    fake_scheduler.get_jobs.return_value = [job]

    with patch("src.main.scheduler", fake_scheduler):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/api/admin/status")

    assert resp.json()["jobs"][0]["next_run"] == "2026-10-19T12:01:00+00:00"
