import requests
import os
import sys

API_URL = os.getenv("API_URL", "http://localhost:5000")

# Device must already be registered
DEVICE_ID = os.getenv("DEVICE_ID", "SIM-001")

sos_data = {
    "deviceId": DEVICE_ID,
    "location": {"latitude": 4.6097, "longitude": -74.0817, "address": "Calle 26 #13-19"}
}


def trigger_sos():
    try:
        print(f"Sending SOS for {DEVICE_ID} to {API_URL}...")
        response = requests.post(f"{API_URL}/api/sos", json=sos_data, timeout=5)

        if response.status_code == 200:
            emergency = response.json()["emergency"]
            print(f"✅ SOS raised: {emergency['id']}. Caregivers should receive 'new_emergency'.")
            return emergency["id"]
        print(f"❌ Failed! Status: {response.status_code}, Response: {response.text}")

    except requests.exceptions.ConnectionError:
        print("❌ Connection Error! Is the API running?")


def resolve(emergency_id):
    response = requests.post(f"{API_URL}/api/emergencies/{emergency_id}/resolve", timeout=5)
    if response.status_code == 200:
        print(f"✅ Resolved {emergency_id}")
    else:
        print(f"❌ Failed! Status: {response.status_code}, Response: {response.text}")


if __name__ == "__main__":
    emergency_id = trigger_sos()
    if emergency_id and "--resolve" in sys.argv:
        resolve(emergency_id)
