from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List

ONLINE_WINDOW = timedelta(minutes=2)
DEFAULT_OWNER_NAME = "Adulto Mayor"
DEFAULT_DISPLAY_NAME = "Usuario"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Formats a datetime as the millisecond UTC string the mobile clients parse (e.g. 2026-10-19T08:15:30.123Z)."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_online(last_update: Optional[str], now: Optional[datetime] = None) -> bool:
    """
    Derives device presence from the last telemetry timestamp.

    Args:
        last_update: ISO timestamp of the last telemetry push, or None if the
                     device never reported.
        now: Reference time. Defaults to the current UTC time.

    Returns:
        True when the device reported within the last 2 minutes. There is no
        grace period: a device 2 minutes and 1 second stale is offline.
    """
    last = parse_timestamp(last_update)
    if last is None:
        return False
    now = now or utc_now()
    return (now - last) < ONLINE_WINDOW


def refresh_presence(devices: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Recomputes isOnline in place for every device record."""
    now = now or utc_now()
    for device in devices:
        device["isOnline"] = is_online(device.get("lastUpdate"), now)
    return devices


def resolve_display_name(device: Dict[str, Any], requested: Optional[str] = None) -> str:
    # Explicit name -> stored display name -> owner name -> fallback
    return (
        requested
        or device.get("ownerDisplayName")
        or device.get("ownerName")
        or DEFAULT_DISPLAY_NAME
    )


def build_location(location: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    location = location or {}
    return {
        "latitude": location.get("latitude") or 0,
        "longitude": location.get("longitude") or 0,
        "address": location.get("address") or "",
    }
