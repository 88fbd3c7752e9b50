"""
Lookup orchestration: classify -> cache -> route -> canonicalize -> translate
-> cache -> telemetry.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional

from ..cache import CacheDomain, TieredCache, ttl_for
from ..competitions import canonicalize
from ..config import setup_logger
from ..constants import DEFAULT_TRANSFERS_LIMIT, PROVIDER_STATIC
from ..providers.base import ProviderResult
from ..query_classifier import IntentKind, QueryIntent, classify
from ..router import SourceFallbackRouter, mark_cached
from ..telemetry import OptimizationTelemetry
from ..translation import translate_payload
from ..utils import normalize_text

logger = setup_logger(__name__)

SEARCH_PREFIX = "search:"
IMAGE_PREFIX = "image:"


def annotate_competitions(data: Any) -> Any:
    """Attach canonical competition ids to match lists and team payloads (copy, no mutation)."""
    if isinstance(data, list):
        return [annotate_competitions(item) for item in data]
    if not isinstance(data, dict):
        return data
    out = dict(data)
    if "competition" in out and "competition_id" not in out:
        out["competition_id"] = canonicalize(out.get("competition")).value
    if out.get("league") and "league_id" not in out:
        out["league_id"] = canonicalize(out["league"]).value
    return out


class LookupService:
    def __init__(
        self,
        router: SourceFallbackRouter,
        cache: TieredCache,
        telemetry: Optional[OptimizationTelemetry] = None,
        *,
        cache_epoch: str = "1",
    ) -> None:
        self.router = router
        self.cache = cache
        self.telemetry = telemetry
        self.cache_epoch = str(cache_epoch)

    def cache_key(self, intent: QueryIntent) -> str:
        return f"{SEARCH_PREFIX}{self.cache_epoch}:{intent.kind.value}:{intent.language}:{intent.normalized_text}"

    def _record(self, intent: QueryIntent, source: Optional[str], cache_hit: bool) -> None:
        if self.telemetry is not None:
            self.telemetry.record_routing(intent.kind, source, cache_hit)

    def _ttl(self, intent: QueryIntent, source: str) -> Optional[float]:
        if intent.kind is IntentKind.TRANSLATION and source == PROVIDER_STATIC:
            return ttl_for(CacheDomain.TRANSLATION)
        if intent.kind is IntentKind.TRANSFERS:
            return ttl_for(CacheDomain.TRANSFERS)
        return ttl_for(CacheDomain.SEARCH)

    async def player_image(self, name: Any) -> Dict[str, Any]:
        """
        Photo URL for a player: remembered for 30 days, else Wikipedia then
        Wikidata. `url` is None when neither has one; misses are not cached.
        """
        intent = classify(name, forced_kind=IntentKind.IMAGE)
        image_key = f"{IMAGE_PREFIX}{intent.normalized_text}"
        hit = self.cache.get(image_key)
        if hit is not None:
            self._record(intent, hit.source, True)
            return {"name": intent.params["name"], "url": hit.payload, "source": hit.source, "cached": True}

        result = await self.router.resolve(intent)
        if not result.ok:
            self._record(intent, None, False)
            return {"name": intent.params["name"], "url": None, "source": "placeholder", "cached": False}
        url = result.data["url"]
        self.cache.set(image_key, url, ttl_for(CacheDomain.IMAGE), result.source)
        self._record(intent, result.source, False)
        return {"name": intent.params["name"], "url": url, "source": result.source, "cached": False}

    async def _with_image(self, intent: QueryIntent, data: Any) -> Any:
        """Remember player images and look one up when the winning source has none."""
        if intent.kind is not IntentKind.PLAYER or not isinstance(data, dict):
            return data
        name = data.get("name") or intent.entity
        image_key = f"{IMAGE_PREFIX}{normalize_text(name)}"
        if data.get("image_url"):
            self.cache.set(image_key, data["image_url"], ttl_for(CacheDomain.IMAGE), "image")
            return data
        image = await self.player_image(name)
        if image["url"] is None:
            return data
        return dict(data, image_url=image["url"])

    async def transfers(self, subject: Optional[str] = None, limit: int = DEFAULT_TRANSFERS_LIMIT, language: str = "en") -> ProviderResult:
        """Transfer news, newest first, optionally about one player or club."""
        query = f"{subject} transfers" if subject and subject.strip() else "transfers"
        result = await self.resolve(classify(query, language=language, forced_kind=IntentKind.TRANSFERS))
        if not result.ok:
            return result
        return replace(result, data=list(result.data)[:limit])

    async def search(self, raw_query: Any, language: str = "en", forced_kind: Any = None) -> ProviderResult:
        """Classify and resolve a raw query. Raises InvalidInputError for empty input."""
        intent = classify(raw_query, language=language, forced_kind=forced_kind)
        return await self.resolve(intent)

    async def resolve(self, intent: QueryIntent) -> ProviderResult:
        key = self.cache_key(intent)
        entry = self.cache.get(key)
        if entry is not None:
            payload = entry.payload or {}
            self._record(intent, entry.source, True)
            logger.debug("Search cache hit: %s", key)
            return mark_cached(
                ProviderResult(
                    data=payload.get("data"),
                    source=entry.source,
                    confidence=payload.get("confidence", "low"),
                )
            )

        result = await self.router.resolve(intent)
        if not result.ok:
            self._record(intent, None, False)
            return result

        data = annotate_competitions(result.data)
        data = await self._with_image(intent, data)
        if intent.kind is not IntentKind.TRANSLATION:
            data = translate_payload(data, intent.language)
        result = replace(result, data=data)

        self.cache.set(key, {"data": data, "confidence": result.confidence}, self._ttl(intent, result.source), result.source)
        self._record(intent, result.source, False)
        return result

    def clear_cache(self, prefix: str = SEARCH_PREFIX) -> int:
        return self.cache.invalidate(prefix)
