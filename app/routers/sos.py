"""
SOS Router

Emergency signals: the wearable raises an SOS, caregivers list and
resolve them. Every lifecycle change is pushed over Socket.IO.
"""
from fastapi import APIRouter, Query
from typing import Optional
from shared.models import SOSRequest
from shared.emergency_service import emergency_service
from app.socket_manager import notify_new_emergency, notify_emergency_resolved

router = APIRouter()


@router.post("/sos")
async def trigger_sos(request: SOSRequest):
    """
    Creates an emergency and notifies every connected caregiver.

    Request Body:
        - deviceId: Registered device raising the alert
        - ownerDisplayName: Optional name override for the alert
        - location: {latitude, longitude, address?}
    """
    location = request.location.model_dump() if request.location else None
    emergency = await emergency_service.raise_sos(
        request.deviceId,
        location,
        request.ownerDisplayName
    )

    await notify_new_emergency(emergency)

    return {
        "success": True,
        "message": "Alerta SOS enviada",
        "emergency": emergency
    }


@router.get("/emergencies")
async def list_emergencies(
    status: Optional[str] = Query(default=None, description="active | resolved")
):
    """
    Emergencies raised since the server started, resolved ones included.
    Pass status=active to get only the open ones.
    """
    emergencies = await emergency_service.list_active(status)
    return {"success": True, "emergencies": emergencies}


@router.get("/emergencies/history")
async def emergency_history():
    """Full persisted log, across restarts."""
    emergencies = await emergency_service.history()
    return {"success": True, "emergencies": emergencies}


@router.post("/emergencies/{emergency_id}/resolve")
async def resolve_emergency(emergency_id: str):
    emergency = await emergency_service.resolve(emergency_id)

    await notify_emergency_resolved(emergency_id)

    return {
        "success": True,
        "message": "Emergencia resuelta",
        "emergency": emergency
    }
