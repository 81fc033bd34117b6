from datetime import datetime, timedelta, timezone

from shared.business_logic import (
    build_location,
    is_online,
    parse_timestamp,
    refresh_presence,
    resolve_display_name,
    to_iso,
)

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def ago(seconds):
    return to_iso(NOW - timedelta(seconds=seconds))


def test_online_within_two_minutes():
    assert is_online(ago(90), NOW) is True


def test_offline_after_two_minutes():
    assert is_online(ago(121), NOW) is False


def test_window_is_exclusive():
    assert is_online(ago(120), NOW) is False


def test_never_reported_is_offline():
    assert is_online(None, NOW) is False


def test_unparseable_timestamp_is_offline():
    assert is_online("yesterday", NOW) is False


def test_to_iso_uses_z_suffix_and_milliseconds():
    moment = datetime(2026, 10, 19, 8, 15, 30, 123456, tzinfo=timezone.utc)
    assert to_iso(moment) == "2026-10-19T08:15:30.123Z"
    assert parse_timestamp("2026-10-19T08:15:30.123Z") == datetime(
        2026, 10, 19, 8, 15, 30, 123000, tzinfo=timezone.utc
    )


def test_refresh_presence_recomputes_each_device():
    devices = [
        {"deviceId": "A", "lastUpdate": ago(10), "isOnline": False},
        {"deviceId": "B", "lastUpdate": ago(600), "isOnline": True},
        {"deviceId": "C", "lastUpdate": None, "isOnline": False},
    ]
    refresh_presence(devices, NOW)
    assert [d["isOnline"] for d in devices] == [True, False, False]


class TestDisplayName:
    device = {"ownerDisplayName": "Abuela Ana", "ownerName": "Ana Pérez"}

    def test_explicit_name_wins(self):
        assert resolve_display_name(self.device, "Mamá") == "Mamá"

    def test_stored_display_name(self):
        assert resolve_display_name(self.device) == "Abuela Ana"

    def test_owner_name(self):
        assert resolve_display_name({"ownerDisplayName": None, "ownerName": "Ana Pérez"}) == "Ana Pérez"

    def test_fallback(self):
        assert resolve_display_name({}) == "Usuario"


def test_build_location_defaults_missing_parts():
    assert build_location({"latitude": 10}) == {"latitude": 10, "longitude": 0, "address": ""}
