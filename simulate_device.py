"""
Wearable Simulator

Registers a device (if needed) and pushes telemetry to the running API.
Every SOS_EVERY packets it raises an SOS at the current location.
"""
import requests
import time
import random
import os
import signal
import sys

# Configuration from ENV
API_URL = os.getenv("API_URL", "http://localhost:5000")
DEVICE_ID = os.getenv("DEVICE_ID", "SIM-001")
OWNER_NAME = os.getenv("OWNER_NAME", "María López")
FREQUENCY_HZ = float(os.getenv("FREQUENCY_HZ", "0.2"))
SOS_EVERY = int(os.getenv("SOS_EVERY", "0"))  # 0 = never

BASE_LAT = 4.6097
BASE_LON = -74.0817


def handle_sigterm(*args):
    print("Simulator stopping...")
    sys.exit(0)


signal.signal(signal.SIGTERM, handle_sigterm)
signal.signal(signal.SIGINT, handle_sigterm)


def register_device():
    payload = {
        "deviceId": DEVICE_ID,
        "deviceName": f"Reloj {DEVICE_ID}",
        "ownerName": OWNER_NAME
    }
    resp = requests.post(f"{API_URL}/api/devices/register", json=payload, timeout=5)
    if resp.status_code == 200:
        print(f"✅ Registered {DEVICE_ID}")
    elif resp.status_code == 409:
        print(f"ℹ️ {DEVICE_ID} already registered")
    else:
        print(f"❌ Register failed: {resp.status_code} {resp.text}")


def generate_location():
    return {
        "latitude": round(BASE_LAT + random.uniform(-0.001, 0.001), 6),
        "longitude": round(BASE_LON + random.uniform(-0.001, 0.001), 6),
        "address": "Simulated address"
    }


def generate_telemetry(steps, battery):
    return {
        "deviceId": DEVICE_ID,
        "heartRate": random.randint(60, 95),
        "steps": steps,
        "battery": battery,
        "location": generate_location()
    }


def send_sos(location):
    resp = requests.post(
        f"{API_URL}/api/sos",
        json={"deviceId": DEVICE_ID, "location": location},
        timeout=5
    )
    if resp.status_code == 200:
        print(f"\n!!! SOS RAISED: {resp.json()['emergency']['id']} !!!\n")
    else:
        print(f"❌ SOS failed: {resp.status_code} {resp.text}")


def run_simulation():
    print("Starting Wearable Simulation...")
    print("Press Ctrl+C to stop.")

    register_device()

    steps = 0
    battery = 100
    counter = 0

    while True:
        counter += 1
        steps += random.randint(0, 40)
        if counter % 10 == 0:
            battery = max(0, battery - 1)

        data = generate_telemetry(steps, battery)
        try:
            resp = requests.post(f"{API_URL}/api/health", json=data, timeout=5)
            if resp.status_code != 200:
                print(f"Error: {resp.status_code} {resp.text}")
            else:
                loc = data["location"]
                print(f"Sent -> HR: {data['heartRate']:>3} | Steps: {steps:>6} | Battery: {battery:>3}% | "
                      f"Loc: {loc['latitude']:.5f}, {loc['longitude']:.5f}")

            if SOS_EVERY and counter % SOS_EVERY == 0:
                send_sos(data["location"])
        except requests.exceptions.RequestException as e:
            print(f"Connection Error: {e}")

        time.sleep(1.0 / FREQUENCY_HZ)


if __name__ == "__main__":
    run_simulation()
