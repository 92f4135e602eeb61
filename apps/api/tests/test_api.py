"""HTTP-level tests for the catalog, favorites and tour endpoints."""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.db.session import get_session
from app.main import app
from app.repositories import properties as properties_repo
from app.services import tour as tour_module
from app.services.session_store import SESSION_HEADER, session_store


async def _fake_session():
    yield AsyncMock()


@pytest_asyncio.fixture
async def client():
    app.dependency_overrides[get_session] = _fake_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as http:
            yield http
    finally:
        app.dependency_overrides.pop(get_session, None)


@pytest.mark.asyncio
async def test_session_header_is_minted_and_reused(client):
    first = await client.get("/api/favorites")
    session_id = first.headers[SESSION_HEADER]

    second = await client.get("/api/favorites", headers={SESSION_HEADER: session_id})

    assert session_id
    assert second.headers[SESSION_HEADER] == session_id


@pytest.mark.asyncio
async def test_toggle_favorite_round_trip(client):
    headers = {SESSION_HEADER: "api-favorites"}

    added = await client.post("/api/favorites/prop-1/toggle", headers=headers)
    listed = await client.get("/api/favorites", headers=headers)
    removed = await client.post("/api/favorites/prop-1/toggle", headers=headers)

    assert added.json() == {"property_id": "prop-1", "is_favorite": True, "favorites": ["prop-1"]}
    assert listed.json() == {"favorites": ["prop-1"]}
    assert removed.json()["favorites"] == []


@pytest.mark.asyncio
async def test_search_endpoint_echoes_params(client, monkeypatch, make_record):
    records = [make_record("prop-garden-4a1c"), make_record("prop-loft-9b22", property_type="apartment")]
    monkeypatch.setattr(properties_repo, "query_properties", AsyncMock(return_value=records))

    response = await client.get(
        "/api/properties",
        params={"code": "9b2", "bedrooms": "lots"},
        headers={SESSION_HEADER: "api-search"},
    )

    body = response.json()
    assert response.status_code == 200
    assert [item["id"] for item in body["results"]] == ["prop-loft-9b22"]
    assert body["params"] == {"code": "9b2"}


@pytest.mark.asyncio
async def test_consent_endpoints(client):
    headers = {SESSION_HEADER: "api-consent"}

    initial = await client.get("/api/consent", headers=headers)
    saved = await client.put("/api/consent", json={"analytics": True}, headers=headers)
    cleared = await client.delete("/api/consent", headers=headers)

    assert initial.json()["has_consent"] is False
    assert saved.json()["preferences"]["analytics"] is True
    assert cleared.json()["has_consent"] is False


@pytest.mark.asyncio
async def test_tour_flow_through_sections(client, monkeypatch):
    monkeypatch.setattr(tour_module.settings, "tour_settle_delay_ms", 0)
    monkeypatch.setattr(tour_module.settings, "tour_transition_delay_ms", 0)
    session_id = "api-tour"
    headers = {SESSION_HEADER: session_id}

    mounted = await client.post("/api/admin/tour/mount", json={"path": "/admin", "targets": []}, headers=headers)
    assert mounted.json()["is_initialized"] is False

    await session_store.get(session_id).tour.drain()
    state = (await client.get("/api/admin/tour", headers=headers)).json()
    assert state["is_running"] is True
    assert state["current_step"]["target"] == "body"
    assert [step["target"] for step in state["steps"]] == ["body"]

    finished = await client.post("/api/admin/tour/advance", json={"action": "finished"}, headers=headers)
    assert finished.json()["is_running"] is False
    assert finished.json()["overall_status"] == "true"

    await session_store.get(session_id).tour.drain()
    state = (await client.get("/api/admin/tour", headers=headers)).json()
    assert state["current_path"] == "/admin/properties"
    assert state["current_section"] == "properties"
    assert state["completed_sections"] == ["dashboard"]
    assert state["is_running"] is True

    skipped = await client.post("/api/admin/tour/advance", json={"action": "skip"}, headers=headers)
    assert skipped.json()["overall_status"] == "completed"

    left = await client.delete("/api/admin/tour", headers=headers)
    assert left.json()["is_initialized"] is False
    session_store.clear(session_id)


@pytest.mark.asyncio
async def test_tour_restart_section_needs_confirmation(client):
    headers = {SESSION_HEADER: "api-tour-restart"}

    declined = await client.post("/api/admin/tour/restart-section", json={"section": "settings"}, headers=headers)
    restarted = await client.post(
        "/api/admin/tour/restart-section",
        json={"section": "settings", "confirmed": True},
        headers=headers,
    )

    assert declined.json()["is_running"] is False
    assert restarted.json()["is_running"] is True
    session_store.clear("api-tour-restart")
