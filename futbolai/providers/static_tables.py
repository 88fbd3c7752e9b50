"""Static provider: curated historical teams, translations, confirmed transfers and facts. No I/O."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from .. import lookups
from ..errors import EmptyResultError
from ..translation import lookup_translation
from ..utils import contains_phrase, normalize_text
from .base import ProviderId

if TYPE_CHECKING:
    from ..query_classifier import QueryIntent

SOURCE = ProviderId.STATIC.value


class StaticTablesProvider:
    def is_configured(self) -> bool:
        return True

    async def fetch_team(self, intent: "QueryIntent") -> Dict[str, Any]:
        entity = intent.entity
        for key, record in lookups.HISTORICAL_TEAM_DATA.items():
            if contains_phrase(entity, key) or (len(entity) >= 4 and entity in key):
                return dict(record, achievements=list(record["achievements"]))
        raise EmptyResultError(SOURCE, f"No historical record for {entity!r}")

    async def fetch_translation(self, intent: "QueryIntent") -> Dict[str, Any]:
        term = intent.params.get("term") or intent.entity
        found = lookup_translation(term)
        if found is None:
            raise EmptyResultError(SOURCE, f"No static translation for {term!r}")
        category, canonical, translations = found
        if intent.language == "en":
            translated = canonical
        else:
            translated = translations.get(intent.language)
            if translated is None:
                raise EmptyResultError(SOURCE, f"No {intent.language} translation for {canonical!r}")
        return {
            "term": canonical,
            "translation": translated,
            "category": category,
            "language": intent.language,
        }

    async def fetch_transfers(self, intent: "QueryIntent") -> List[Dict[str, Any]]:
        """Confirmed transfers, newest first; a subject keeps moves naming that player or club."""
        subject = intent.params.get("subject")
        records = lookups.CONFIRMED_TRANSFERS
        if subject:
            records = tuple(
                r for r in records
                if any(contains_phrase(normalize_text(r[field]), subject) for field in ("player", "from", "to"))
            )
        if not records:
            raise EmptyResultError(SOURCE, f"No confirmed transfers for {subject!r}")
        return [dict(r) for r in sorted(records, key=lambda r: r["date"], reverse=True)]

    def daily_fact(self, day_ordinal: int) -> Dict[str, Any]:
        facts = lookups.STATIC_FACTS
        return {
            "title": "Football Fact of the Day",
            "description": facts[day_ordinal % len(facts)],
            "category": "history",
            "source": SOURCE,
        }
