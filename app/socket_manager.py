import os
import socketio
from typing import Dict, Any
from shared.emergency_service import emergency_service

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

# Socket.IO Server - caregiver clients
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*' if CORS_ORIGINS == '*' else CORS_ORIGINS.split(','),
    ping_timeout=60,
    ping_interval=25
)


@sio.event
async def connect(sid, environ, auth=None):
    """New caregivers get the current session snapshot; there is no backlog replay."""
    print(f"Client connected: {sid}")
    snapshot = await emergency_service.list_active()
    await sio.emit('active_emergencies', snapshot, to=sid)


@sio.event
async def disconnect(sid, reason=None):
    print(f"Client disconnected: {sid}")


async def notify_new_emergency(emergency: Dict[str, Any]):
    await sio.emit('new_emergency', emergency)


async def notify_emergency_resolved(emergency_id: str):
    await sio.emit('emergency_resolved', {"id": emergency_id})
