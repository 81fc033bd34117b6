"""
Caregiver Console

Connects to the running API over Socket.IO the way a caregiver app does.
Prints the active_emergencies snapshot sent on connect, then every
new_emergency / emergency_resolved event until Ctrl+C.

    python watch_emergencies.py          # follow events
    python watch_emergencies.py --once   # exit after the snapshot (exit 1 if none arrives)
"""
import os
import sys
import threading
import socketio

API_URL = os.getenv("API_URL", "http://localhost:5000")
SNAPSHOT_TIMEOUT = float(os.getenv("SNAPSHOT_TIMEOUT", "5"))


def describe(emergency):
    location = emergency.get("location") or {}
    line = (f"[{emergency.get('status', '?').upper():<8}] {emergency.get('ownerDisplayName')} "
            f"({emergency.get('deviceId')}) @ {location.get('latitude')}, {location.get('longitude')}")
    if location.get("address"):
        line += f" - {location['address']}"
    return line


def build_client(snapshot_received: threading.Event) -> socketio.Client:
    sio = socketio.Client(reconnection=False)

    @sio.event
    def connect():
        print(f"✅ Connected to {API_URL}")

    @sio.event
    def disconnect(reason=None):
        print("Disconnected")

    @sio.on('active_emergencies')
    def on_snapshot(emergencies):
        print(f"📋 Snapshot: {len(emergencies)} emergencies this session")
        for emergency in emergencies:
            print(f"  {describe(emergency)}")
        snapshot_received.set()

    @sio.on('new_emergency')
    def on_new(emergency):
        print(f"🚨 {describe(emergency)}")

    @sio.on('emergency_resolved')
    def on_resolved(data):
        print(f"✅ Resolved: {data.get('id')}")

    return sio


def main():
    snapshot_received = threading.Event()
    sio = build_client(snapshot_received)

    try:
        sio.connect(API_URL)
    except socketio.exceptions.ConnectionError as e:
        print(f"❌ Connection Error! Is the API running? ({e})")
        return 1

    if not snapshot_received.wait(SNAPSHOT_TIMEOUT):
        print(f"❌ No active_emergencies snapshot within {SNAPSHOT_TIMEOUT}s")
        sio.disconnect()
        return 1

    if "--once" in sys.argv:
        sio.disconnect()
        return 0

    try:
        sio.wait()
    except KeyboardInterrupt:
        sio.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())
