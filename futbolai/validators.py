from typing import Any, List, Optional, Tuple

from .config import setup_logger
from .constants import DEFAULT_LATEST_LIMIT, DEFAULT_UPCOMING_DAYS
from .lookups import SUPPORTED_LANGUAGES

logger = setup_logger(__name__)

MATCH_TYPES = ("weekly", "latest", "upcoming")


class ValidationWarning(str):
    """Lightweight tag for soft validation warnings."""
    pass


def validate_match_type(raw: Optional[str]) -> Tuple[str, List[ValidationWarning]]:
    """Return (match_type, warnings). Unknown types fall back to weekly."""
    if not raw:
        return "weekly", []
    t = str(raw).strip().lower()
    if t in MATCH_TYPES:
        return t, []
    logger.warning("match_type_unknown: %s", t)
    return "weekly", [ValidationWarning(f"match_type_unknown:{t}")]


def _clamp_int(name: str, raw: Any, default: int, min_v: int, max_v: int):
    if raw is None or raw == "":
        return default, []
    try:
        v = int(raw)
    except (TypeError, ValueError):
        logger.warning("%s_invalid: %s", name, raw)
        return default, [ValidationWarning(f"{name}_invalid")]
    if v < min_v:
        logger.warning("%s_floor: %s -> %s", name, v, min_v)
        return min_v, [ValidationWarning(f"{name}_floor")]
    if v > max_v:
        logger.warning("%s_cap: %s -> %s", name, v, max_v)
        return max_v, [ValidationWarning(f"{name}_cap")]
    return v, []


def validate_limit(raw: Any, default: int = DEFAULT_LATEST_LIMIT, min_v: int = 1, max_v: int = 50):
    """Coerce to int and clamp to [min_v,max_v]. Return (value, warnings)."""
    return _clamp_int("limit", raw, default, min_v, max_v)


def validate_days(raw: Any, default: int = DEFAULT_UPCOMING_DAYS, min_v: int = 1, max_v: int = 60):
    """Coerce to int and clamp to [min_v,max_v]. Return (value, warnings)."""
    return _clamp_int("days", raw, default, min_v, max_v)


def validate_language(raw: Optional[str]) -> Tuple[str, List[ValidationWarning]]:
    if not raw:
        return "en", []
    lang = str(raw).strip().lower()[:2]
    if lang in SUPPORTED_LANGUAGES:
        return lang, []
    logger.warning("language_unsupported: %s", raw)
    return "en", [ValidationWarning(f"language_unsupported:{lang}")]
