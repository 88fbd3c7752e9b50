"""
Match lists (weekly / latest / upcoming) and the daily football fact.

Competitions are fetched concurrently; each competition/status pair is
routed on its own and cached for 15 minutes under matches:<CODE>:<STATUS>.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, time as dt_time, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..cache import CacheDomain, TieredCache, ttl_for
from ..competitions import PRIORITY_ORDERS, CompetitionId, group_by_competition
from ..config import API_TIMEOUT, setup_logger
from ..constants import (
    DEFAULT_LATEST_LIMIT,
    DEFAULT_UPCOMING_DAYS,
    PROVIDER_GROQ,
    RECENT_RESULTS_DAYS,
    WEEKLY_WINDOW_DAYS,
)
from ..errors import APIError, ErrorKind
from ..query_classifier import IntentKind, QueryIntent
from ..router import SourceFallbackRouter
from ..telemetry import OptimizationTelemetry
from ..utils import iso_utc, parse_iso_datetime, utc_now

logger = setup_logger(__name__)

FINISHED = "FINISHED"
SCHEDULED = "SCHEDULED"


def competitions_for_region(region: Optional[str]) -> List[str]:
    order = PRIORITY_ORDERS.get((region or "default").lower(), PRIORITY_ORDERS["default"])
    return [cid.value for cid in order if cid is not CompetitionId.OTHER]


def _match_time(match: Dict[str, Any]) -> Optional[datetime]:
    return parse_iso_datetime(match.get("date"))


def filter_window(matches: Sequence[Dict[str, Any]], start: datetime, end: datetime) -> List[Dict[str, Any]]:
    kept = []
    for match in matches:
        when = _match_time(match)
        if when is not None and start <= when <= end:
            kept.append(match)
    return kept


def sort_by_date(matches: Sequence[Dict[str, Any]], newest_first: bool) -> List[Dict[str, Any]]:
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(matches, key=lambda m: _match_time(m) or epoch, reverse=newest_first)


def _start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), dt_time.min, tzinfo=timezone.utc)


def _end_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), dt_time.max, tzinfo=timezone.utc)


def match_intent(code: str, status: str) -> QueryIntent:
    return QueryIntent(
        kind=IntentKind.MATCHES,
        normalized_text=f"{code.lower()} {status.lower()}",
        language="en",
        confidence=1.0,
        params={"entity": code, "competition": code, "status": status},
    )


class MatchesService:
    def __init__(
        self,
        router: SourceFallbackRouter,
        cache: TieredCache,
        telemetry: Optional[OptimizationTelemetry] = None,
        *,
        groq=None,
        static=None,
        pacer=None,
        region: str = "europe",
        competitions: Optional[Sequence[str]] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.router = router
        self.cache = cache
        self.telemetry = telemetry
        self.groq = groq
        self.static = static
        self.pacer = pacer
        self.region = region
        self.competitions = list(competitions) if competitions else competitions_for_region(region)
        self._clock = clock

    async def competition_matches(self, code: str, status: str) -> List[Dict[str, Any]]:
        """All matches for one competition/status; [] when every source fails."""
        key = f"matches:{code}:{status}"
        hit = self.cache.get(key)
        if hit is not None:
            if self.telemetry is not None:
                self.telemetry.record_routing(IntentKind.MATCHES, hit.source, True)
            return list(hit.payload or [])

        result = await self.router.resolve(match_intent(code, status))
        if self.telemetry is not None:
            self.telemetry.record_routing(IntentKind.MATCHES, result.source if result.error is None else None, False)
        if result.error is not None:
            logger.warning("No %s matches for %s (%s from %s)", status, code, result.error.value, result.source)
            return []
        matches = list(result.data or [])
        self.cache.set(key, matches, ttl_for(CacheDomain.MATCHES), result.source)
        return matches

    async def _fan_out(self, status: str) -> List[Dict[str, Any]]:
        batches = await asyncio.gather(*(self.competition_matches(code, status) for code in self.competitions))
        merged: List[Dict[str, Any]] = []
        for batch in batches:
            merged.extend(batch)
        return merged

    async def latest(self, limit: int = DEFAULT_LATEST_LIMIT) -> List[Dict[str, Any]]:
        """Finished matches from the last 14 days, newest first."""
        now = self._clock()
        recent = filter_window(await self._fan_out(FINISHED), _start_of_day(now - timedelta(days=RECENT_RESULTS_DAYS)), now)
        return sort_by_date(recent, newest_first=True)[:limit]

    async def upcoming(self, days: int = DEFAULT_UPCOMING_DAYS) -> List[Dict[str, Any]]:
        """Scheduled matches within `days`, soonest first."""
        now = self._clock()
        ahead = filter_window(await self._fan_out(SCHEDULED), now, _end_of_day(now + timedelta(days=days)))
        return sort_by_date(ahead, newest_first=False)

    async def weekly(self) -> Dict[str, Any]:
        """Last 7 days of results and next 7 days of fixtures, grouped by competition."""
        now = self._clock()
        finished, scheduled = await asyncio.gather(self._fan_out(FINISHED), self._fan_out(SCHEDULED))
        recent = sort_by_date(
            filter_window(finished, _start_of_day(now - timedelta(days=WEEKLY_WINDOW_DAYS)), now),
            newest_first=True,
        )
        ahead = sort_by_date(
            filter_window(scheduled, now, _end_of_day(now + timedelta(days=WEEKLY_WINDOW_DAYS))),
            newest_first=False,
        )
        return {
            "recent_results": group_by_competition(recent, self.region),
            "upcoming_fixtures": group_by_competition(ahead, self.region),
            "total_results": len(recent),
            "total_fixtures": len(ahead),
            "generated_at": iso_utc(now),
        }

    async def daily_fact(self) -> Dict[str, Any]:
        """One fact per calendar day; AI-generated when available, static otherwise."""
        today = self._clock().date()
        key = f"fact:{today.isoformat()}"
        hit = self.cache.get(key)
        if hit is not None:
            return hit.payload

        fact = None
        if self.groq is not None and self.groq.is_configured():
            try:
                if self.pacer is not None:
                    await self.pacer.await_turn(PROVIDER_GROQ)
                fact = await asyncio.wait_for(self.groq.daily_fact(today.toordinal()), timeout=API_TIMEOUT)
                self._report(PROVIDER_GROQ, "success")
            except asyncio.TimeoutError:
                logger.warning("Daily fact generation timed out; using static fact")
                self._report(PROVIDER_GROQ, ErrorKind.TRANSIENT)
            except APIError as exc:
                logger.warning("Daily fact generation failed (%s); using static fact", exc.code)
                self._report(PROVIDER_GROQ, exc.kind or ErrorKind.REJECTED)
        if fact is None:
            fact = self.static.daily_fact(today.toordinal())

        self.cache.set(key, fact, ttl_for(CacheDomain.FACT), fact.get("source", "static"))
        return fact

    def _report(self, provider_id: str, outcome: Any) -> None:
        if self.telemetry is not None:
            self.telemetry.record_provider_call(provider_id, outcome)
