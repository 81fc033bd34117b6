import uuid
from datetime import datetime
from typing import Optional, Dict, Any, List
from shared.database import JsonStore, devices_db
from shared.business_logic import (
    DEFAULT_OWNER_NAME,
    build_location,
    is_online,
    refresh_presence,
    to_iso,
    utc_now,
)
from shared.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError

NOT_FOUND_MESSAGE = "Dispositivo no encontrado"
TELEMETRY_FIELDS = ("heartRate", "steps", "battery")


def _find(devices: List[Dict[str, Any]], device_id: str) -> Optional[Dict[str, Any]]:
    return next((d for d in devices if d.get("deviceId") == device_id), None)


class DeviceService:
    def __init__(self, db: JsonStore):
        self.db = db

    async def register(
        self,
        device_id: Optional[str],
        device_name: Optional[str],
        owner_name: Optional[str] = None,
        owner_display_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Registers a new wearable.

        Returns the stored record with zeroed health data and isOnline=False.

        Raises:
            ValidationError: deviceId or deviceName missing.
            ConflictError: deviceId already registered.
            PersistenceError: the store could not be written.
        """
        if not device_id or not device_name:
            raise ValidationError("deviceId y deviceName son requeridos")

        async with self.db.transaction("Error al guardar datos") as devices:
            if _find(devices, device_id):
                raise ConflictError("El dispositivo ya está registrado")

            device = {
                "id": str(uuid.uuid4()),
                "deviceId": device_id,
                "deviceName": device_name,
                "ownerName": owner_name or DEFAULT_OWNER_NAME,
                "ownerDisplayName": owner_display_name or None,
                "registeredAt": to_iso(utc_now()),
                "lastUpdate": None,
                "healthData": {
                    "heartRate": 0,
                    "steps": 0,
                    "battery": 0,
                    "location": build_location(None)
                },
                "isOnline": False
            }
            devices.append(device)

        print(f"📱 Device registered: {device_id} ({device_name})")
        return device

    async def update_telemetry(self, device_id: Optional[str], fields: Dict[str, Any]):
        """
        Applies a telemetry push.

        `fields` holds only the keys the device actually sent; an explicit None
        still overwrites. A location replaces the stored one as a whole.
        """
        if not device_id:
            raise ValidationError("deviceId es requerido")

        async with self.db.transaction("Error al guardar datos") as devices:
            device = _find(devices, device_id)
            if device is None:
                raise NotFoundError(NOT_FOUND_MESSAGE)

            device["lastUpdate"] = to_iso(utc_now())
            device["isOnline"] = True

            health = device.setdefault("healthData", {})
            for key in TELEMETRY_FIELDS:
                if key in fields:
                    health[key] = fields[key]

            if fields.get("location") is not None:
                health["location"] = build_location(fields["location"])

    async def list_devices(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        # Listing persists the recomputed presence flags
        devices = []
        try:
            async with self.db.transaction("Error al guardar datos") as stored:
                devices = refresh_presence(stored, now)
        except PersistenceError as e:
            print(f"⚠️ Presence refresh not persisted: {e.message}")
        return devices

    async def get_device(self, device_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        devices = await self.db.fetch_all()
        device = _find(devices, device_id)
        if device is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        device["isOnline"] = is_online(device.get("lastUpdate"), now)
        return device

    async def rename(
        self,
        device_id: str,
        device_name: Optional[str] = None,
        owner_name: Optional[str] = None,
        owner_display_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """Applies the non-empty display fields and returns the updated record."""
        async with self.db.transaction("Error al actualizar dispositivo") as devices:
            device = _find(devices, device_id)
            if device is None:
                raise NotFoundError(NOT_FOUND_MESSAGE)

            if device_name:
                device["deviceName"] = device_name
            if owner_name:
                device["ownerName"] = owner_name
            if owner_display_name:
                device["ownerDisplayName"] = owner_display_name

        return device

    async def delete(self, device_id: str):
        async with self.db.transaction("Error al eliminar dispositivo") as devices:
            device = _find(devices, device_id)
            if device is None:
                raise NotFoundError(NOT_FOUND_MESSAGE)
            devices.remove(device)

        print(f"🗑️ Device deleted: {device_id}")


device_service = DeviceService(devices_db)
