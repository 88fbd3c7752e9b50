"""
football-data.org v4 provider.

Team lookups use the curated popular-team ids (falling back to a name
search); player lookups scan the squads of the major clubs; match lists come
from the per-competition matches endpoint. Squads are cached for 24 hours.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .. import lookups
from ..cache import CacheDomain, TieredCache, ttl_for
from ..competitions import canonicalize
from ..config import setup_logger
from ..constants import FOOTBALL_DATA_BASE_URL, MATCHES_PER_COMPETITION, SQUAD_SCAN_MAX_FETCHES
from ..errors import ConfigurationError, EmptyResultError
from ..logging_utils import warn_once
from ..utils import normalize_text, parse_iso_datetime, utc_now
from .base import Confidence, JsonHttpClient, ProviderId

if TYPE_CHECKING:
    from ..query_classifier import QueryIntent
    from ..rate_limiter import RequestPacer

logger = setup_logger(__name__)

SOURCE = ProviderId.FOOTBALL_DATA.value


def adapt_team(raw: Dict[str, Any]) -> Dict[str, Any]:
    area = raw.get("area") or {}
    coach = raw.get("coach") or {}
    squad = []
    for member in raw.get("squad") or []:
        squad.append({
            "name": member.get("name"),
            "position": member.get("position"),
            "nationality": member.get("nationality"),
            "date_of_birth": member.get("dateOfBirth"),
        })
    competitions = [
        {"id": canonicalize(c.get("name") or c.get("code")).value, "name": c.get("name")}
        for c in raw.get("runningCompetitions") or []
    ]
    return {
        "id": raw.get("id"),
        "name": raw.get("name"),
        "short_name": raw.get("shortName"),
        "type": "club",
        "country": area.get("name") or "",
        "founded": raw.get("founded"),
        "stadium": raw.get("venue"),
        "coach": coach.get("name") or "Unknown",
        "crest": raw.get("crest"),
        "website": raw.get("website"),
        "squad": squad,
        "competitions": competitions,
    }


def _age(date_of_birth: Optional[str]) -> Optional[int]:
    born = parse_iso_datetime(date_of_birth)
    if born is None:
        return None
    today = utc_now().date()
    born_date = born.date()
    return today.year - born_date.year - ((today.month, today.day) < (born_date.month, born_date.day))


def adapt_player(member: Dict[str, Any], team: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": member.get("name"),
        "position": member.get("position"),
        "nationality": member.get("nationality"),
        "date_of_birth": member.get("dateOfBirth"),
        "age": _age(member.get("dateOfBirth")),
        "current_team": team.get("name"),
        "team_crest": team.get("crest"),
    }


def adapt_match(raw: Dict[str, Any], competition_code: str) -> Dict[str, Any]:
    score = (raw.get("score") or {}).get("fullTime") or {}
    competition = raw.get("competition") or {}
    name = competition.get("name") or competition_code
    return {
        "id": str(raw.get("id")),
        "home_team": {"name": (raw.get("homeTeam") or {}).get("name") or "TBD", "goals": score.get("home")},
        "away_team": {"name": (raw.get("awayTeam") or {}).get("name") or "TBD", "goals": score.get("away")},
        "date": raw.get("utcDate"),
        "status": "FINISHED" if raw.get("status") == "FINISHED" else "SCHEDULED",
        "competition": name,
        "competition_id": canonicalize(competition_code or name).value,
        "venue": raw.get("venue"),
        "source": SOURCE,
        "confidence": Confidence.HIGH.value,
    }


def _player_matches(query: str, candidate: Optional[str]) -> bool:
    name = normalize_text(candidate)
    if not name or not query:
        return False
    if name == query:
        return True
    query_tokens = query.split()
    name_tokens = name.split()
    # "mbappe" hits "kylian mbappe"; "kylian mbappe" must hit every token.
    return all(token in name_tokens for token in query_tokens)


def _find_in_squad(query: str, raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for member in raw.get("squad") or []:
        if _player_matches(query, member.get("name")):
            logger.info("Found %s in %s squad", member.get("name"), raw.get("name"))
            return adapt_player(member, raw)
    return None


class FootballDataProvider:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        cache: Optional[TieredCache] = None,
        pacer: Optional["RequestPacer"] = None,
        client: Optional[JsonHttpClient] = None,
        squad_scan: bool = True,
        max_squad_fetches: int = SQUAD_SCAN_MAX_FETCHES,
    ) -> None:
        self._api_key = api_key
        self._cache = cache
        self._pacer = pacer
        self._squad_scan = squad_scan
        self._max_squad_fetches = max(int(max_squad_fetches), 0)
        self.client = client or JsonHttpClient(
            source=SOURCE,
            base_url=FOOTBALL_DATA_BASE_URL,
            headers={"X-Auth-Token": api_key} if api_key else {},
        )

    def is_configured(self) -> bool:
        if not self._api_key:
            warn_once(("not_configured", SOURCE), "FOOTBALL_DATA_API_KEY not set; football-data provider disabled", logger=logger)
            return False
        return True

    def _require_key(self) -> None:
        if not self._api_key:
            raise ConfigurationError(SOURCE, "FOOTBALL_DATA_API_KEY not set")

    async def _follow_up(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET that is not the first request of a fetch; the router only paced the first."""
        if self._pacer is not None:
            await self._pacer.await_turn(SOURCE)
        return await self.client.get_json(path, params=params)

    async def get_raw(self, endpoint: str) -> Any:
        """Upstream JSON for a provider-relative path, used by the proxy."""
        self._require_key()
        return await self.client.get_json(endpoint)

    def _cached_squad(self, team_id: int) -> Optional[Dict[str, Any]]:
        if self._cache is None:
            return None
        hit = self._cache.get(f"squad:{team_id}")
        if hit is None:
            return None
        logger.debug("Squad cache hit for team %s", team_id)
        return hit.payload

    async def _team_payload(self, team_id: int, *, first: bool) -> Dict[str, Any]:
        cache_key = f"squad:{team_id}"
        cached = self._cached_squad(team_id)
        if cached is not None:
            return cached
        if first:
            raw = await self.client.get_json(f"/teams/{team_id}")
        else:
            raw = await self._follow_up(f"/teams/{team_id}")
        if self._cache is not None and raw:
            self._cache.set(cache_key, raw, ttl_for(CacheDomain.SQUAD), SOURCE)
        return raw or {}

    async def _resolve_team_id(self, name: str) -> tuple[Optional[int], bool]:
        """Returns (team_id, used_request)."""
        display = lookups.MAJOR_CLUBS.get(normalize_text(name), name)
        known = lookups.POPULAR_TEAM_IDS.get(display)
        if known:
            return known, False
        search = await self.client.get_json("/teams", params={"name": name})
        teams = (search or {}).get("teams") or []
        if not teams:
            return None, True
        return teams[0].get("id"), True

    async def fetch_team(self, intent: "QueryIntent") -> Dict[str, Any]:
        self._require_key()
        if intent.params.get("team_type") == "national":
            # Free tier carries club squads only.
            raise EmptyResultError(SOURCE, "National teams are not covered")
        name = intent.params.get("matched") or intent.entity
        team_id, used_request = await self._resolve_team_id(name)
        if team_id is None:
            raise EmptyResultError(SOURCE, f"No team found for {name!r}")
        raw = await self._team_payload(team_id, first=not used_request)
        if not raw:
            raise EmptyResultError(SOURCE, f"Empty team payload for id {team_id}")
        return adapt_team(raw)

    async def fetch_player(self, intent: "QueryIntent") -> Optional[Dict[str, Any]]:
        """
        Look a player up in the major clubs' squads.

        Squads already in the cache are searched first at no cost. At most
        `max_squad_fetches` uncached squads are then requested, so a cold
        cache warms up over several lookups instead of one long scan.
        """
        self._require_key()
        if not self._squad_scan:
            raise EmptyResultError(SOURCE, "Squad scan disabled")
        query = intent.entity
        uncached: List[int] = []
        for display in lookups.SQUAD_SCAN_TEAMS:
            team_id = lookups.POPULAR_TEAM_IDS.get(display)
            if not team_id:
                continue
            raw = self._cached_squad(team_id)
            if raw is None:
                uncached.append(team_id)
                continue
            player = _find_in_squad(query, raw)
            if player is not None:
                return player

        first = True
        for team_id in uncached[: self._max_squad_fetches]:
            raw = await self._team_payload(team_id, first=first)
            first = False
            player = _find_in_squad(query, raw)
            if player is not None:
                return player
        if len(uncached) > self._max_squad_fetches:
            logger.info("football-data: %d squads left unscanned for %r", len(uncached) - self._max_squad_fetches, query)
        return None

    async def fetch_matches(self, intent: "QueryIntent") -> List[Dict[str, Any]]:
        self._require_key()
        code = intent.params.get("competition")
        if not code:
            raise EmptyResultError(SOURCE, "Match lists need a competition code")
        params: Dict[str, Any] = {"limit": intent.params.get("limit") or MATCHES_PER_COMPETITION}
        if intent.params.get("status"):
            params["status"] = intent.params["status"]
        if intent.params.get("date_from") and intent.params.get("date_to"):
            params["dateFrom"] = intent.params["date_from"]
            params["dateTo"] = intent.params["date_to"]
        raw = await self.client.get_json(f"/competitions/{code}/matches", params=params)
        matches = [adapt_match(m, code) for m in (raw or {}).get("matches") or []]
        logger.info("football-data: %d matches for %s (%s)", len(matches), code, params.get("status") or "ALL")
        return matches
