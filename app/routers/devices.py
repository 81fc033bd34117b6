"""
Devices Router

Registration, telemetry and management of the wearables.
Mobile-app compatible API: camelCase JSON, {success, message, ...} envelopes.
"""
from fastapi import APIRouter
from typing import Optional
from shared.models import DeviceRegister, DeviceUpdate, HealthUpdate
from shared.device_service import device_service

router = APIRouter()


@router.post("/devices/register")
async def register_device(data: DeviceRegister):
    """
    Registers a new wearable.

    Request Body:
        - deviceId: External identifier (unique)
        - deviceName: Display name of the device
        - ownerName: Elderly user's name (default "Adulto Mayor")
        - ownerDisplayName: Name shown to caregivers in alerts
    """
    device = await device_service.register(
        data.deviceId,
        data.deviceName,
        data.ownerName,
        data.ownerDisplayName
    )
    return {
        "success": True,
        "message": "Dispositivo registrado exitosamente",
        "device": device
    }


@router.post("/health")
async def update_health(data: HealthUpdate):
    """
    Telemetry push from the wearable.

    Only the fields present in the body are written. Every push marks the
    device online and stamps lastUpdate.
    """
    fields = data.model_dump(include=data.model_fields_set - {"deviceId"})
    await device_service.update_telemetry(data.deviceId, fields)
    return {"success": True, "message": "Datos actualizados exitosamente"}


@router.get("/devices")
async def list_devices():
    devices = await device_service.list_devices()
    return {"success": True, "devices": devices}


@router.get("/devices/{device_id}")
async def get_device(device_id: str):
    device = await device_service.get_device(device_id)
    return {"success": True, "device": device}


@router.put("/devices/{device_id}")
async def update_device(device_id: str, data: Optional[DeviceUpdate] = None):
    """Renames the device or its owner. Empty fields and a missing body are ignored."""
    data = data or DeviceUpdate()
    device = await device_service.rename(
        device_id,
        data.deviceName,
        data.ownerName,
        data.ownerDisplayName
    )
    return {
        "success": True,
        "message": "Dispositivo actualizado exitosamente",
        "device": device
    }


@router.delete("/devices/{device_id}")
async def delete_device(device_id: str):
    # Emergencies raised by this device are kept
    await device_service.delete(device_id)
    return {"success": True, "message": "Dispositivo eliminado exitosamente"}
