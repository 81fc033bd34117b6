import json

from shared.database import emergencies_db
from shared.emergency_service import emergency_service


def read_log(stores):
    with open(stores / "emergencies.json", encoding="utf-8") as f:
        return json.load(f)["emergencies"]


def raise_sos(client, device_id="D1", lat=10, lon=20, **extra):
    return client.post(
        "/api/sos",
        json={"deviceId": device_id, "location": {"latitude": lat, "longitude": lon}, **extra},
    )


class TestRaise:
    def test_sos_creates_active_emergency_and_broadcasts(self, client, stores, emitted, register):
        register("D1", "Reloj de Ana", ownerName="Ana")

        resp = raise_sos(client)
        assert resp.status_code == 200
        emergency = resp.json()["emergency"]
        assert emergency["status"] == "active"
        assert emergency["resolvedAt"] is None
        assert emergency["deviceId"] == "D1"
        assert emergency["deviceName"] == "Reloj de Ana"
        assert emergency["location"] == {"latitude": 10, "longitude": 20, "address": ""}

        broadcasts = [e for e in emitted if e[0] == "new_emergency"]
        assert len(broadcasts) == 1
        _, data, to = broadcasts[0]
        assert to is None
        assert data["id"] == emergency["id"]
        assert data["location"]["latitude"] == 10
        assert data["location"]["longitude"] == 20

        assert read_log(stores) == [emergency]

    def test_unknown_device_creates_nothing(self, client, stores, emitted):
        resp = raise_sos(client, device_id="ghost")
        assert resp.status_code == 404
        assert resp.json()["success"] is False
        assert read_log(stores) == []
        assert emitted == []
        assert client.get("/api/emergencies").json()["emergencies"] == []

    def test_missing_coordinates(self, client, register):
        register("D1")
        resp = client.post("/api/sos", json={"deviceId": "D1", "location": {"latitude": 10}})
        assert resp.status_code == 400
        resp = client.post("/api/sos", json={"deviceId": "D1"})
        assert resp.status_code == 400

    def test_zero_is_a_valid_coordinate(self, client, register):
        register("D1")
        resp = raise_sos(client, lat=0, lon=0)
        assert resp.status_code == 200

    def test_display_name_resolution(self, client, register):
        register("D1", ownerName="Ana Pérez", ownerDisplayName="Abuela Ana")
        register("D2", ownerName="Luis")

        assert raise_sos(client, "D1", ownerDisplayName="Mamá").json()["emergency"]["ownerDisplayName"] == "Mamá"
        assert raise_sos(client, "D1").json()["emergency"]["ownerDisplayName"] == "Abuela Ana"
        assert raise_sos(client, "D2").json()["emergency"]["ownerDisplayName"] == "Luis"

    def test_log_write_failure(self, client, emitted, register, monkeypatch):
        register("D1")

        def failing_write(data):
            raise OSError("read-only filesystem")

        monkeypatch.setattr(emergencies_db, "_write", failing_write)
        resp = raise_sos(client)
        assert resp.status_code == 500
        assert resp.json()["success"] is False
        assert emitted == []
        assert emergency_service.session_ids == []


class TestResolve:
    def test_resolve_marks_log_and_broadcasts_once(self, client, stores, emitted, register):
        register("D1")
        emergency_id = raise_sos(client).json()["emergency"]["id"]

        resp = client.post(f"/api/emergencies/{emergency_id}/resolve")
        assert resp.status_code == 200
        resolved = resp.json()["emergency"]
        assert resolved["status"] == "resolved"
        assert resolved["resolvedAt"] is not None

        assert read_log(stores)[0]["status"] == "resolved"
        assert [e for e in emitted if e[0] == "emergency_resolved"] == [
            ("emergency_resolved", {"id": emergency_id}, None)
        ]

    def test_resolving_twice_succeeds_again(self, client, emitted, register):
        register("D1")
        emergency_id = raise_sos(client).json()["emergency"]["id"]

        assert client.post(f"/api/emergencies/{emergency_id}/resolve").status_code == 200
        second = client.post(f"/api/emergencies/{emergency_id}/resolve")
        assert second.status_code == 200
        assert second.json()["emergency"]["resolvedAt"] is not None
        assert len([e for e in emitted if e[0] == "emergency_resolved"]) == 2

    def test_unknown_id(self, client, emitted):
        resp = client.post("/api/emergencies/nope/resolve")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Emergencia no encontrada"}
        assert emitted == []

    def test_emergency_from_previous_session_cannot_be_resolved(self, client, register):
        register("D1")
        emergency_id = raise_sos(client).json()["emergency"]["id"]
        emergency_service.start_session()

        assert client.post(f"/api/emergencies/{emergency_id}/resolve").status_code == 404


class TestListing:
    def test_list_keeps_resolved_entries_in_order(self, client, register):
        register("D1")
        first = raise_sos(client).json()["emergency"]["id"]
        second = raise_sos(client).json()["emergency"]["id"]
        client.post(f"/api/emergencies/{first}/resolve")

        listed = client.get("/api/emergencies").json()["emergencies"]
        assert [(e["id"], e["status"]) for e in listed] == [(first, "resolved"), (second, "active")]

        active = client.get("/api/emergencies", params={"status": "active"}).json()["emergencies"]
        assert [e["id"] for e in active] == [second]

    def test_session_view_resets_but_history_keeps_everything(self, client, register):
        register("D1")
        emergency_id = raise_sos(client).json()["emergency"]["id"]
        emergency_service.start_session()

        assert client.get("/api/emergencies").json()["emergencies"] == []
        history = client.get("/api/emergencies/history").json()["emergencies"]
        assert [e["id"] for e in history] == [emergency_id]

    def test_deleting_device_keeps_its_emergencies(self, client, stores, register):
        register("D1")
        emergency = raise_sos(client).json()["emergency"]
        before = read_log(stores)

        assert client.delete("/api/devices/D1").status_code == 200

        assert read_log(stores) == before
        listed = client.get("/api/emergencies").json()["emergencies"]
        assert listed == [emergency]
