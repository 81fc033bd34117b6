"""Test fixtures: isolated JSON stores per test and a recorder in place of Socket.IO emit."""

import pytest
from fastapi.testclient import TestClient

from app.main import fastapi_app
from app.socket_manager import sio
from shared.database import devices_db, emergencies_db


@pytest.fixture
def stores(tmp_path, monkeypatch):
    monkeypatch.setattr(devices_db, "path", str(tmp_path / "devices.json"))
    monkeypatch.setattr(emergencies_db, "path", str(tmp_path / "emergencies.json"))
    return tmp_path


@pytest.fixture
def emitted(monkeypatch):
    """Every sio.emit call as (event, data, to)."""
    events = []

    async def fake_emit(event, data=None, to=None, **kwargs):
        events.append((event, data, to))

    monkeypatch.setattr(sio, "emit", fake_emit)
    return events


@pytest.fixture
def client(stores, emitted):
    with TestClient(fastapi_app) as c:
        yield c


@pytest.fixture
def register(client):
    def _register(device_id="D1", device_name="Reloj", **extra):
        resp = client.post(
            "/api/devices/register",
            json={"deviceId": device_id, "deviceName": device_name, **extra},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["device"]

    return _register
