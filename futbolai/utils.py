import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Optional

_PUNCTUATION_RE = re.compile(r"[^\w\s'\-]", re.UNICODE)
_UNDERSCORE_RE = re.compile(r"_+")


def strip_diacritics(text):
    """
    Remove combining marks after NFKD decomposition.

    "Mbappé" -> "Mbappe", "Şükür" -> "Sukur". Case is preserved.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(text))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text):
    """
    Normalize free text for table matching.

    Strips diacritics, lower-cases, replaces punctuation (apostrophes and
    hyphens excepted) with spaces and collapses whitespace.
    """
    if not text:
        return ""
    folded = strip_diacritics(text).lower()
    folded = _PUNCTUATION_RE.sub(" ", folded)
    folded = _UNDERSCORE_RE.sub(" ", folded)
    return " ".join(folded.split())


def contains_phrase(text: str, phrase: str) -> bool:
    """True when `phrase` occurs in `text` on word boundaries (both normalized)."""
    if not phrase:
        return False
    return f" {phrase} " in f" {text} "


def parse_iso_datetime(value: Any) -> Optional[datetime]:
    """Parse an upstream ISO-8601 timestamp into an aware UTC datetime."""
    if not value:
        return None
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_utc(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
