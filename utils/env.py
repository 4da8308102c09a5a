import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'greencart.db'}")

# HTTP client (scripts/remote_simulate.py)
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000").rstrip("/")
API_TOKEN = os.getenv("API_TOKEN") or None
API_TIMEOUT = int(os.getenv("API_TIMEOUT", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# true: keep assigning to a saturated driver when every driver is at the hour cap (legacy behaviour)
ALLOW_OVERBOOKING = os.getenv("ALLOW_OVERBOOKING", "false").lower() == "true"

if API_TIMEOUT <= 0:
    raise ValueError("❌ API_TIMEOUT must be a positive number of seconds")
