from __future__ import annotations

import httpx
import pytest

from analytics_dashboard import api
from analytics_dashboard.analytics import aggregate_users
from analytics_dashboard.config import DashboardSettings, get_settings
from analytics_dashboard.token_store import InMemoryTokenStore


@pytest.fixture(autouse=True)
def _overrides():
    settings = DashboardSettings(_env_file=None, token_backend="memory")
    api.app.dependency_overrides[get_settings] = lambda: settings
    api.app.dependency_overrides[api.get_token_store] = lambda: InMemoryTokenStore()
    yield
    api.app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_healthz() -> None:
    transport = httpx.ASGITransport(app=api.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_stats_without_token_returns_empty_tables() -> None:
    transport = httpx.ASGITransport(app=api.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/stats")
    assert resp.status_code == 200
    assert resp.json() == {
        "userStats": [],
        "registrationStats": [],
        "genderStats": [],
        "approvalStats": [],
    }


@pytest.mark.asyncio
async def test_stats_returns_aggregate(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_load(token_store, settings, **kwargs):
        return aggregate_users([{"status": "active", "isApproved": True}])

    monkeypatch.setattr(api, "load_dashboard", fake_load)
    transport = httpx.ASGITransport(app=api.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/stats")
    data = resp.json()
    assert data["userStats"] == [{"name": "active", "value": 1}]
    assert data["approvalStats"] == [{"name": "Approved", "value": 1}]
