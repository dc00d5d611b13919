"""REST API endpoint tests."""

from __future__ import annotations

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from torus_snake.config import RuntimeConfig
from torus_snake.server.app import create_app, install_registry

BASE = "http://test"


@pytest.fixture()
async def app():
    application = create_app()
    # Ticks are slow enough that nothing moves during a request.
    install_registry(application, RuntimeConfig(tick_interval=60.0))
    yield application
    await application.state.sessions.cleanup()


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c


async def _start(client, location="room", **body):
    payload = {"mode": "snake", "requester_id": 1, "player_ids": [1, 2]}
    payload.update(body)
    return await client.post(f"/sessions/{location}", json=payload)


class TestStartSession:
    @pytest.mark.asyncio
    async def test_start_multiplayer(self, client):
        resp = await _start(client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["location"] == "room"
        assert data["mode"] == "snake"
        assert data["status"] == "running"
        assert data["player_ids"] == [1, 2]
        assert data["tick"] == 0

    @pytest.mark.asyncio
    async def test_start_solo_ignores_mentions(self, client):
        resp = await _start(client, mode="solo", requester_id=7, player_ids=[1, 2])
        assert resp.status_code == 201
        assert resp.json()["player_ids"] == [7]

    @pytest.mark.asyncio
    async def test_duplicate_location_conflict(self, client):
        await _start(client)
        resp = await _start(client, player_ids=[3, 4])
        assert resp.status_code == 409
        assert "already in progress" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_single_player_rejected(self, client):
        resp = await _start(client, player_ids=[1])
        assert resp.status_code == 422
        assert "at least 2" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_role_rejected(self, client):
        resp = await _start(client, role_ids=[99])
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_mode(self, client):
        resp = await _start(client, mode="tron")
        assert resp.status_code == 422


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        resp = await client.get("/sessions")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_list_after_start(self, client):
        await _start(client, location="a")
        await _start(client, location="b")
        resp = await client.get("/sessions")
        assert sorted(s["location"] for s in resp.json()) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_get_detail(self, client):
        await _start(client)
        resp = await client.get("/sessions/room")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["board"].split("\n")) == 24
        assert [r["player_id"] for r in data["rankings"]] == [1, 2]
        assert data["rankings"][0]["alive"] is True
        assert data["display_names"] == {}

    @pytest.mark.asyncio
    async def test_display_names_echoed_in_detail(self, client):
        await _start(client, display_names={"1": "bo", "2": "ana"})
        data = (await client.get("/sessions/room")).json()
        assert data["display_names"] == {"1": "bo", "2": "ana"}

    @pytest.mark.asyncio
    async def test_get_not_found(self, client):
        resp = await client.get("/sessions/nowhere")
        assert resp.status_code == 404


class TestInput:
    @pytest.mark.asyncio
    async def test_accepted(self, client):
        await _start(client)
        resp = await client.post(
            "/sessions/room/input", json={"player_id": 1, "action": "up"},
        )
        assert resp.status_code == 202
        assert resp.json() == {"accepted": True}

    @pytest.mark.asyncio
    async def test_unknown_action_dropped(self, client):
        await _start(client)
        resp = await client.post(
            "/sessions/room/input", json={"player_id": 1, "action": "jump"},
        )
        assert resp.status_code == 202
        assert resp.json() == {"accepted": False}

    @pytest.mark.asyncio
    async def test_unknown_location_dropped(self, client):
        resp = await client.post(
            "/sessions/nowhere/input", json={"player_id": 1, "action": "up"},
        )
        assert resp.status_code == 202
        assert resp.json() == {"accepted": False}


class TestRoundEnds:
    @pytest.mark.asyncio
    async def test_cancel_ends_round_and_frees_location(self, app, client):
        install_registry(app, RuntimeConfig(tick_interval=0.01))
        await _start(client)
        await client.post(
            "/sessions/room/input", json={"player_id": 1, "action": "cancel"},
        )
        for _ in range(200):
            resp = await client.get("/sessions/room")
            if resp.status_code == 404:
                break
            await asyncio.sleep(0.01)
        assert resp.status_code == 404
        assert (await _start(client)).status_code == 201
        await app.state.sessions.cleanup()
