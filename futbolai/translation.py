"""Static term translation over the curated tables in lookups.py."""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .lookups import TRANSLATIONS
from .utils import normalize_text

# Payload keys whose values are translatable terms, and the table to look in.
_FIELD_CATEGORIES = {
    "name": ("teams", "countries"),
    "current_team": ("teams",),
    "country": ("countries",),
    "nationality": ("countries",),
    "position": ("positions",),
}

_INDEX: Dict[str, Tuple[str, str]] = {
    normalize_text(term): (category, term)
    for category, table in TRANSLATIONS.items()
    for term in table
}


def lookup_translation(term: Any, categories: Optional[Tuple[str, ...]] = None) -> Optional[Tuple[str, str, Dict[str, str]]]:
    """Return (category, canonical English term, translations) or None."""
    key = normalize_text(term)
    if not key:
        return None
    found = _INDEX.get(key)
    if found is None:
        return None
    category, canonical = found
    if categories and category not in categories:
        return None
    return category, canonical, TRANSLATIONS[category][canonical]


def translate_term(term: Any, language: str, category: Optional[str] = None) -> Any:
    """Translate `term` into `language`; unknown terms and English come back unchanged."""
    if not isinstance(term, str) or not language or language == "en":
        return term
    found = lookup_translation(term, (category,) if category else None)
    if found is None:
        return term
    return found[2].get(language, term)


def _translate_text(text: str, language: str) -> str:
    # Achievement lines like "5x UEFA Champions League" embed a known term.
    for term, translations in TRANSLATIONS["achievements"].items():
        if term in text and language in translations:
            return text.replace(term, translations[language])
    return text


def translate_payload(payload: Any, language: str) -> Any:
    """
    Return a copy of `payload` with known terms translated.

    Only the fields in _FIELD_CATEGORIES and achievement strings are touched;
    everything else is copied as-is. The input is never mutated.
    """
    if not language or language == "en":
        return payload
    if isinstance(payload, list):
        return [translate_payload(item, language) for item in payload]
    if not isinstance(payload, dict):
        return payload

    out: Dict[str, Any] = {}
    for key, value in payload.items():
        categories = _FIELD_CATEGORIES.get(key)
        if categories and isinstance(value, str):
            found = lookup_translation(value, categories)
            out[key] = found[2].get(language, value) if found else value
        elif key == "achievements" and isinstance(value, list):
            out[key] = [_translate_text(v, language) if isinstance(v, str) else v for v in value]
        else:
            out[key] = translate_payload(value, language)
    return out
