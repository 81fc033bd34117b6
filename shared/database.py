import os
import json
import asyncio
from contextlib import asynccontextmanager
from typing import List, Dict, Any
from dotenv import load_dotenv
from shared.exceptions import PersistenceError

load_dotenv()

# Data Config
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.getenv("DATA_DIR", os.path.join(BASE_DIR, "data"))
DEVICES_FILE = os.getenv("DEVICES_FILE", os.path.join(DATA_DIR, "devices.json"))
EMERGENCIES_FILE = os.getenv("EMERGENCIES_FILE", os.path.join(DATA_DIR, "emergencies.json"))


class JsonStore:
    """
    Flat JSON file holding a single collection: {"<collection>": [...]}.

    The file is rewritten wholesale on every mutation. Read-modify-write
    cycles go through transaction(), which holds the store lock so two
    requests cannot interleave their writes.
    """

    def __init__(self, path: str, collection: str):
        self.path = path
        self.collection = collection
        self._lock = None

    async def connect(self):
        self._lock = asyncio.Lock()
        directory = os.path.dirname(self.path)
        if directory and not os.path.isdir(directory):
            os.makedirs(directory, exist_ok=True)
            print(f"✅ Data directory created: {directory}")
        if not os.path.exists(self.path):
            self._write({self.collection: []})
            print(f"✅ {os.path.basename(self.path)} initialized")

    async def disconnect(self):
        self._lock = None
        print(f"Store closed: {os.path.basename(self.path)}")

    @property
    def lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def fetch_all(self) -> List[Dict[str, Any]]:
        async with self.lock:
            return self._read()

    @asynccontextmanager
    async def transaction(self, error_message: str = None):
        async with self.lock:
            records = self._read()
            yield records
            try:
                self._write({self.collection: records})
            except (OSError, TypeError, ValueError) as e:
                print(f"❌ Error writing {self.path}: {e}")
                raise PersistenceError(error_message) from e

    def _read(self) -> List[Dict[str, Any]]:
        # Unreadable data degrades to an empty store
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            print(f"❌ Error reading {self.path}: {e}")
            return []

        records = data.get(self.collection) if isinstance(data, dict) else None
        if not isinstance(records, list):
            print(f"❌ Unexpected content in {self.path}, expected '{self.collection}' list")
            return []
        return records

    def _write(self, data: Dict[str, Any]):
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)


devices_db = JsonStore(DEVICES_FILE, "devices")
emergencies_db = JsonStore(EMERGENCIES_FILE, "emergencies")
