import os

MAX_ROOM_LIST_LIMIT = 20
MAX_USERNAME_LENGTH = 32
DRIFT_TOLERANCE = 1.0 # Seconds a guest may drift before re-seeking


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()] or ["*"]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_PREFIX = os.getenv("API_PREFIX", "").rstrip("/")
ROOM_LIST_LIMIT = max(1, min(int(os.getenv("ROOM_LIST_LIMIT", MAX_ROOM_LIST_LIMIT)), MAX_ROOM_LIST_LIMIT))
SEED_ROOMS = _flag("SEED_ROOMS")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "4000"))
