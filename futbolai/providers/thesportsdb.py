"""TheSportsDB provider (public key): team search and season events as a match fallback."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .. import lookups
from ..competitions import canonicalize
from ..config import setup_logger
from ..constants import THESPORTSDB_BASE_URL, THESPORTSDB_PUBLIC_KEY
from ..errors import EmptyResultError
from ..utils import normalize_text, parse_iso_datetime, utc_now
from .base import Confidence, JsonHttpClient, ProviderId

if TYPE_CHECKING:
    from ..query_classifier import QueryIntent

logger = setup_logger(__name__)

SOURCE = ProviderId.THESPORTSDB.value

# competition id -> (TheSportsDB league id, calendar-year season)
LEAGUE_MAP: Dict[str, tuple] = {
    "PD": ("4335", False),
    "PL": ("4328", False),
    "SA": ("4332", False),
    "BL1": ("4331", False),
    "FL1": ("4334", False),
    "BSA": ("4371", True),
    "ARG": ("4443", True),
    "MEX": ("4422", False),
    "COL": ("4451", True),
    "VEN": ("4453", True),
    "CHI": ("4438", True),
    "PER": ("4449", True),
    "CL": ("4346", False),
    "CLI": ("4472", True),
}

SEASON_START_MONTH = 7
MAX_EVENTS = 10

_NATIONAL_LEAGUE_MARKERS = ("national", "fifa", "world cup", "international")


def season_label(today: date, calendar_year: bool) -> str:
    """'2025' for calendar-year leagues, '2024-2025' for split seasons."""
    if calendar_year:
        return str(today.year)
    start = today.year if today.month >= SEASON_START_MONTH else today.year - 1
    return f"{start}-{start + 1}"


def _event_datetime(event: Dict[str, Any]) -> Optional[datetime]:
    if event.get("strTimestamp"):
        parsed = parse_iso_datetime(event["strTimestamp"])
        if parsed:
            return parsed
    day = event.get("dateEvent")
    if not day:
        return None
    return parse_iso_datetime(f"{day}T{event.get('strTime') or '00:00:00'}")


def _int_or_none(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def adapt_event(event: Dict[str, Any], competition_code: str) -> Dict[str, Any]:
    when = _event_datetime(event)
    finished = event.get("strStatus") == "Match Finished"
    name = event.get("strLeague") or competition_code
    return {
        "id": str(event.get("idEvent")),
        "home_team": {"name": event.get("strHomeTeam") or "TBD", "goals": _int_or_none(event.get("intHomeScore"))},
        "away_team": {"name": event.get("strAwayTeam") or "TBD", "goals": _int_or_none(event.get("intAwayScore"))},
        "date": when.strftime("%Y-%m-%dT%H:%M:%SZ") if when else None,
        "status": "FINISHED" if finished else "SCHEDULED",
        "competition": name,
        "competition_id": canonicalize(competition_code).value,
        "venue": event.get("strVenue") or "TBA",
        "source": SOURCE,
        "confidence": Confidence.MEDIUM.value,
    }


def adapt_team(raw: Dict[str, Any]) -> Dict[str, Any]:
    league = (raw.get("strLeague") or "").lower()
    name = raw.get("strTeam") or ""
    national = any(m in league for m in _NATIONAL_LEAGUE_MARKERS) or normalize_text(name) in lookups.COUNTRY_NAMES
    return {
        "id": raw.get("idTeam"),
        "name": name,
        "type": "national" if national else "club",
        "country": raw.get("strCountry") or "",
        "founded": _int_or_none(raw.get("intFormedYear")),
        "stadium": raw.get("strStadium"),
        "league": raw.get("strLeague"),
        "badge": raw.get("strBadge") or raw.get("strTeamBadge"),
        "description": raw.get("strDescriptionEN"),
    }


class TheSportsDBProvider:
    def __init__(
        self,
        *,
        api_key: str = THESPORTSDB_PUBLIC_KEY,
        client: Optional[JsonHttpClient] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.client = client or JsonHttpClient(source=SOURCE, base_url=f"{THESPORTSDB_BASE_URL}/{api_key}")
        self._clock = clock

    def is_configured(self) -> bool:
        return True

    async def fetch_team(self, intent: "QueryIntent") -> Dict[str, Any]:
        name = intent.params.get("matched") or intent.entity
        raw = await self.client.get_json("/searchteams.php", params={"t": name})
        teams = [t for t in (raw or {}).get("teams") or [] if (t.get("strSport") or "Soccer") == "Soccer"]
        if not teams:
            raise EmptyResultError(SOURCE, f"No team found for {name!r}")
        return adapt_team(teams[0])

    async def fetch_matches(self, intent: "QueryIntent") -> List[Dict[str, Any]]:
        code = intent.params.get("competition")
        mapping = LEAGUE_MAP.get(code or "")
        if mapping is None:
            raise EmptyResultError(SOURCE, f"No league mapping for {code}")
        league_id, calendar_year = mapping
        now = self._clock().astimezone(timezone.utc)
        season = season_label(now.date(), calendar_year)
        raw = await self.client.get_json("/eventsseason.php", params={"id": league_id, "s": season})

        status = intent.params.get("status")
        events = []
        for event in (raw or {}).get("events") or []:
            when = _event_datetime(event)
            finished = event.get("strStatus") == "Match Finished"
            if status == "FINISHED" and not (finished or (when is not None and when < now)):
                continue
            if status == "SCHEDULED" and (finished or when is None or when <= now):
                continue
            events.append(event)

        # Season feeds run oldest first; keep the events nearest to now.
        if status == "FINISHED":
            events = events[-MAX_EVENTS:]
        else:
            events = events[:MAX_EVENTS]
        matches = [adapt_event(e, code) for e in events]
        logger.info("thesportsdb: %d matches for %s season %s", len(matches), code, season)
        return matches
