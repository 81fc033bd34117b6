from pydantic import BaseModel
from typing import Optional, Union

Number = Union[int, float]


class LocationData(BaseModel):
    latitude: Optional[Number] = None
    longitude: Optional[Number] = None
    address: Optional[str] = None


class DeviceRegister(BaseModel):
    deviceId: Optional[str] = None
    deviceName: Optional[str] = None
    ownerName: Optional[str] = None
    ownerDisplayName: Optional[str] = None


class DeviceUpdate(BaseModel):
    deviceName: Optional[str] = None
    ownerName: Optional[str] = None
    ownerDisplayName: Optional[str] = None


class HealthUpdate(BaseModel):
    """Telemetry pushed by a wearable. Fields left out of the body are not touched."""
    deviceId: Optional[str] = None
    heartRate: Optional[Number] = None
    steps: Optional[Number] = None
    battery: Optional[Number] = None
    location: Optional[LocationData] = None


class SOSRequest(BaseModel):
    deviceId: Optional[str] = None
    ownerDisplayName: Optional[str] = None
    location: Optional[LocationData] = None
