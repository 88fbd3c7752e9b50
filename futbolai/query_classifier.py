"""
Query classification.

Turns a raw search string into a QueryIntent using the curated tables in
lookups.py. Pure: no I/O, no clock, no randomness.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from . import lookups
from .competitions import CompetitionId, canonicalize
from .errors import InvalidInputError
from .utils import contains_phrase, normalize_text, strip_diacritics


class IntentKind(str, Enum):
    TEAM = "team"
    PLAYER = "player"
    MATCHES = "matches"
    TRANSLATION = "translation"
    KEYWORD = "keyword"
    TRANSFERS = "transfers"
    IMAGE = "image"


HIGH_CONFIDENCE = 0.85
MEDIUM_CONFIDENCE = 0.5

# Rule confidences, in rule order.
FORCED = 1.0
COUNTRY_MATCH = 0.95
MAJOR_CLUB_MATCH = 0.9
CLUB_INDICATOR_MATCH = 0.7
PROPER_NAME_PATTERN = 0.65
EXACT_PLAYER_MATCH = 0.9
PLAYER_FRAGMENT_MATCH = 0.6
MATCH_VOCABULARY_MATCH = 0.4
TRANSFER_VOCABULARY_MATCH = 0.6
KEYWORD_FALLBACK = 0.2

# "Kylian Mbappe", "Vinicius Junior Silva": 2-3 capitalized tokens.
_PROPER_NAME_RE = re.compile(r"^[A-Z][a-zA-Z'\-]+(?: [A-Z][a-zA-Z'\-]+){1,2}$")


def confidence_level(confidence: float) -> str:
    if confidence >= HIGH_CONFIDENCE:
        return "high"
    if confidence >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


@dataclass(frozen=True)
class QueryIntent:
    kind: IntentKind
    normalized_text: str
    language: str
    confidence: float
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @property
    def confidence_level(self) -> str:
        return confidence_level(self.confidence)

    @property
    def entity(self) -> str:
        return self.params.get("entity") or self.normalized_text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "normalized_text": self.normalized_text,
            "language": self.language,
            "confidence": self.confidence,
            "confidence_level": self.confidence_level,
            "params": dict(self.params),
        }


def strip_trailing_query_words(text: str) -> str:
    """'brazil national team' -> 'brazil'; leaves a lone word alone."""
    stripped = text
    changed = True
    while changed:
        changed = False
        for word in lookups.TRAILING_QUERY_WORDS:
            suffix = f" {word}"
            if stripped.endswith(suffix) and len(stripped) > len(suffix):
                stripped = stripped[: -len(suffix)].strip()
                changed = True
    return stripped


def _find_country(entity: str) -> Optional[str]:
    # Longest first so "south korea" wins over a shorter overlapping entry.
    for country in sorted(lookups.COUNTRY_NAMES, key=len, reverse=True):
        if contains_phrase(entity, country):
            return country
    return None


def _find_major_club(entity: str) -> Optional[str]:
    for alias in sorted(lookups.MAJOR_CLUBS, key=len, reverse=True):
        if alias in lookups.AMBIGUOUS_CLUB_ALIASES:
            if entity == alias:
                return lookups.MAJOR_CLUBS[alias]
            continue
        if contains_phrase(entity, alias):
            return lookups.MAJOR_CLUBS[alias]
    return None


def _find_player_fragment(text: str) -> Optional[str]:
    for surname in sorted(lookups.KNOWN_PLAYER_SURNAMES, key=len, reverse=True):
        if contains_phrase(text, surname):
            return surname
    return None


def _match_params(tokens: Tuple[str, ...]) -> Dict[str, Any]:
    status = None
    if any(t in lookups.MATCH_SCHEDULED_WORDS for t in tokens):
        status = "SCHEDULED"
    elif any(t in lookups.MATCH_FINISHED_WORDS for t in tokens):
        status = "FINISHED"
    remainder = " ".join(t for t in tokens if t not in lookups.MATCH_VOCABULARY)
    competition = canonicalize(remainder) if remainder else CompetitionId.OTHER
    return {
        "competition": None if competition is CompetitionId.OTHER else competition.value,
        "status": status,
    }


def _transfer_params(tokens: Tuple[str, ...]) -> Dict[str, Any]:
    # "arsenal transfers" -> subject "arsenal"; bare "transfers" -> no subject.
    subject = " ".join(t for t in tokens if t not in lookups.TRANSFER_WORDS)
    return {"subject": subject or None}


def _looks_like_competition(text: str) -> bool:
    return canonicalize(text) is not CompetitionId.OTHER


def classify(raw_query: Any, language: str = "en", forced_kind: Any = None) -> QueryIntent:
    """
    Infer the intent behind a raw query.

    Rules fire in a fixed order and the first match wins, so a bare country
    name is a national team even when it also looks like something else.
    """
    if not isinstance(raw_query, str) or not raw_query.strip():
        raise InvalidInputError("Search query is required", details=repr(raw_query)[:80])

    lang = (language or "en").strip().lower()[:2] or "en"
    text = normalize_text(raw_query)
    if not text:
        raise InvalidInputError("Search query has no searchable characters", details=raw_query[:80])

    tokens = tuple(text.split())
    entity = strip_trailing_query_words(text)
    params: Dict[str, Any] = {"entity": entity}

    def intent(kind: IntentKind, confidence: float, **extra: Any) -> QueryIntent:
        merged = dict(params)
        merged.update(extra)
        return QueryIntent(kind=kind, normalized_text=text, language=lang, confidence=confidence, params=merged)

    if forced_kind:
        try:
            kind = IntentKind(forced_kind) if isinstance(forced_kind, IntentKind) else IntentKind(str(forced_kind).strip().lower())
        except ValueError as exc:
            raise InvalidInputError(f"Unknown query type: {forced_kind}") from exc
        extra: Dict[str, Any] = {}
        if kind is IntentKind.MATCHES:
            extra = _match_params(tokens)
        elif kind is IntentKind.TRANSLATION:
            extra = {"term": raw_query.strip()}
        elif kind is IntentKind.TRANSFERS:
            extra = _transfer_params(tokens)
        elif kind is IntentKind.IMAGE:
            extra = {"name": " ".join(raw_query.split())}
        return intent(kind, FORCED, **extra)

    if any(t in lookups.TRANSFER_WORDS for t in tokens):
        return intent(IntentKind.TRANSFERS, TRANSFER_VOCABULARY_MATCH, **_transfer_params(tokens))

    country = _find_country(entity)
    if country:
        return intent(IntentKind.TEAM, COUNTRY_MATCH, team_type="national", matched=country)

    club = _find_major_club(entity)
    if club:
        return intent(IntentKind.TEAM, MAJOR_CLUB_MATCH, team_type="club", matched=club)

    if any(t in lookups.CLUB_INDICATORS or t in lookups.SQUAD_WORDS for t in tokens):
        return intent(IntentKind.TEAM, CLUB_INDICATOR_MATCH, team_type="club")

    has_match_words = any(t in lookups.MATCH_VOCABULARY for t in tokens)
    proper = " ".join(strip_diacritics(raw_query).split())
    if _PROPER_NAME_RE.match(proper) and not has_match_words and not _looks_like_competition(text):
        return intent(IntentKind.PLAYER, PROPER_NAME_PATTERN)

    if entity in lookups.KNOWN_PLAYER_SURNAMES:
        return intent(IntentKind.PLAYER, EXACT_PLAYER_MATCH, matched=entity)

    if not has_match_words:
        fragment = _find_player_fragment(entity)
        if fragment:
            return intent(IntentKind.PLAYER, PLAYER_FRAGMENT_MATCH, matched=fragment)

    if has_match_words:
        return intent(IntentKind.MATCHES, MATCH_VOCABULARY_MATCH, **_match_params(tokens))

    return intent(IntentKind.KEYWORD, KEYWORD_FALLBACK)
