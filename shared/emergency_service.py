import uuid
from typing import Optional, Dict, Any, List
from shared.database import JsonStore, emergencies_db
from shared.device_service import DeviceService, device_service
from shared.business_logic import build_location, resolve_display_name, to_iso, utc_now
from shared.exceptions import NotFoundError, ValidationError

STATUS_ACTIVE = "active"
STATUS_RESOLVED = "resolved"


class EmergencyService:
    """
    SOS lifecycle over the emergency log.

    The log file is the only copy of emergency data. The service additionally
    remembers which ids were raised since start_session(); that session view is
    what caregivers get as "active emergencies" and it is lost on restart.
    Resolved entries stay in the view.
    """

    def __init__(self, db: JsonStore, devices: DeviceService):
        self.db = db
        self.devices = devices
        self.session_ids: List[str] = []

    def start_session(self):
        self.session_ids = []

    async def raise_sos(
        self,
        device_id: Optional[str],
        location: Optional[Dict[str, Any]],
        owner_display_name: Optional[str] = None
    ) -> Dict[str, Any]:
        if not device_id or not location:
            raise ValidationError("deviceId y location son requeridos")
        if location.get("latitude") is None or location.get("longitude") is None:
            raise ValidationError("location.latitude y location.longitude son requeridos")

        device = await self.devices.get_device(device_id)

        emergency = {
            "id": str(uuid.uuid4()),
            "deviceId": device_id,
            "ownerDisplayName": resolve_display_name(device, owner_display_name),
            "deviceName": device.get("deviceName"),
            "location": build_location(location),
            "timestamp": to_iso(utc_now()),
            "status": STATUS_ACTIVE,
            "resolvedAt": None
        }

        async with self.db.transaction("Error al guardar emergencia") as emergencies:
            emergencies.append(emergency)
        self.session_ids.append(emergency["id"])

        print(f"🚨 SOS from {device_id} ({emergency['ownerDisplayName']}) at "
              f"{emergency['location']['latitude']}, {emergency['location']['longitude']}")
        return emergency

    async def list_active(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        by_id = {e.get("id"): e for e in await self.db.fetch_all()}
        session = [by_id[i] for i in self.session_ids if i in by_id]
        if status:
            session = [e for e in session if e.get("status") == status]
        return session

    async def history(self) -> List[Dict[str, Any]]:
        return await self.db.fetch_all()

    async def resolve(self, emergency_id: str) -> Dict[str, Any]:
        # Resolving twice is allowed and re-stamps resolvedAt
        if emergency_id not in self.session_ids:
            raise NotFoundError("Emergencia no encontrada")

        async with self.db.transaction("Error al actualizar emergencia") as emergencies:
            emergency = next((e for e in emergencies if e.get("id") == emergency_id), None)
            if emergency is None:
                raise NotFoundError("Emergencia no encontrada")
            emergency["status"] = STATUS_RESOLVED
            emergency["resolvedAt"] = to_iso(utc_now())

        print(f"✅ Emergency resolved: {emergency_id}")
        return emergency


emergency_service = EmergencyService(emergencies_db, device_service)
