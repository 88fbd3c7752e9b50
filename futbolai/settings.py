import os
from dotenv import load_dotenv

from .constants import (
    DEFAULT_PACING_S,
    GROQ_DEFAULT_MODEL,
    PROVIDER_TIMEOUT_S as _DEFAULT_PROVIDER_TIMEOUT_S,
    TRANSIENT_RETRY_BACKOFF_S as _DEFAULT_RETRY_BACKOFF_S,
)

# Load .env from repo root (dotenv auto-walks up from CWD)
load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _get_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


def _read_secret_file(path: str | None) -> str | None:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip() or None
    except OSError:
        return None


def _secret(name: str) -> str | None:
    value = os.getenv(name) or _read_secret_file(os.getenv(f"{name}_FILE"))
    return value.strip() if value and value.strip() else None


# --- Provider credentials (absence = provider always fails fast) ---
FOOTBALL_DATA_API_KEY = _secret("FOOTBALL_DATA_API_KEY")
GROQ_API_KEY = _secret("GROQ_API_KEY")
GROQ_MODEL = os.getenv("GROQ_MODEL", GROQ_DEFAULT_MODEL)

# --- Cache ---
# Optional JSON file for the persistent tier; empty means memory only.
CACHE_FILE = os.getenv("CACHE_FILE", "").strip() or None
# Embedded in lookup keys; bump to orphan every cached search at once.
CACHE_EPOCH = os.getenv("CACHE_EPOCH", "1").strip() or "1"

# --- Routing ---
PROVIDER_TIMEOUT_S = _get_float("PROVIDER_TIMEOUT_S", _DEFAULT_PROVIDER_TIMEOUT_S)
TRANSIENT_RETRY_BACKOFF_S = _get_float("TRANSIENT_RETRY_BACKOFF_S", _DEFAULT_RETRY_BACKOFF_S)
PLAYER_SQUAD_SCAN = _get_bool("PLAYER_SQUAD_SCAN", True)

# --- Matches ---
MATCH_REGION = os.getenv("MATCH_REGION", "europe").strip().lower()

# --- Pacing: PACE_FOOTBALL_DATA_S, PACE_GROQ_AI_S, ... ---
PACING_S = {
    provider: _get_float(f"PACE_{provider.upper().replace('-', '_')}_S", default)
    for provider, default in DEFAULT_PACING_S.items()
}
