"""
Production wiring: one cache, one pacer, one telemetry sink and the provider
chains per intent kind, shared by every service the routes use.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .. import settings
from ..cache import JsonFileStore, TieredCache
from ..config import API_TIMEOUT, RETRY_BACKOFF, setup_logger
from ..providers.base import Confidence, ProviderDescriptor, ProviderId
from ..providers.football_data import FootballDataProvider
from ..providers.groq_ai import GroqProvider
from ..providers.static_tables import StaticTablesProvider
from ..providers.thesportsdb import TheSportsDBProvider
from ..providers.wikidata import WikidataImageProvider
from ..providers.wikipedia import WikipediaProvider
from ..query_classifier import IntentKind
from ..rate_limiter import RequestPacer
from ..router import SourceFallbackRouter
from ..services.lookup import LookupService
from ..services.matches import MatchesService
from ..services.proxy import FootballDataProxy
from ..telemetry import OptimizationTelemetry

logger = setup_logger(__name__)


@dataclass
class Wiring:
    cache: TieredCache
    pacer: RequestPacer
    telemetry: OptimizationTelemetry
    router: SourceFallbackRouter
    lookup: LookupService
    matches: MatchesService
    proxy: FootballDataProxy


def build_chains(
    football_data: FootballDataProvider,
    thesportsdb: TheSportsDBProvider,
    wikipedia: WikipediaProvider,
    groq: GroqProvider,
    static: StaticTablesProvider,
    wikidata: WikidataImageProvider,
) -> Dict[IntentKind, List[ProviderDescriptor]]:
    high, medium, low = Confidence.HIGH.value, Confidence.MEDIUM.value, Confidence.LOW.value
    fd = ProviderId.FOOTBALL_DATA.value
    tsdb = ProviderId.THESPORTSDB.value
    wiki = ProviderId.WIKIPEDIA.value
    ai = ProviderId.GROQ.value
    st = ProviderId.STATIC.value
    wd = ProviderId.WIKIDATA.value
    return {
        IntentKind.TEAM: [
            ProviderDescriptor(fd, football_data.fetch_team, football_data.is_configured, high),
            ProviderDescriptor(tsdb, thesportsdb.fetch_team, thesportsdb.is_configured, medium),
            ProviderDescriptor(wiki, wikipedia.fetch_summary, wikipedia.is_configured, medium),
            ProviderDescriptor(ai, groq.fetch, groq.is_configured, low),
            ProviderDescriptor(st, static.fetch_team, static.is_configured, medium),
        ],
        IntentKind.PLAYER: [
            ProviderDescriptor(fd, football_data.fetch_player, football_data.is_configured, high),
            ProviderDescriptor(wiki, wikipedia.fetch_summary, wikipedia.is_configured, medium),
            ProviderDescriptor(ai, groq.fetch, groq.is_configured, low),
        ],
        IntentKind.MATCHES: [
            ProviderDescriptor(fd, football_data.fetch_matches, football_data.is_configured, high, allow_empty=True),
            ProviderDescriptor(tsdb, thesportsdb.fetch_matches, thesportsdb.is_configured, medium, allow_empty=True),
        ],
        IntentKind.TRANSLATION: [
            ProviderDescriptor(st, static.fetch_translation, static.is_configured, medium),
            ProviderDescriptor(ai, groq.fetch, groq.is_configured, low),
        ],
        IntentKind.KEYWORD: [
            ProviderDescriptor(wiki, wikipedia.fetch_summary, wikipedia.is_configured, medium),
            ProviderDescriptor(ai, groq.fetch, groq.is_configured, low),
        ],
        IntentKind.TRANSFERS: [
            ProviderDescriptor(ai, groq.fetch_transfers, groq.is_configured, low),
            ProviderDescriptor(st, static.fetch_transfers, static.is_configured, medium),
        ],
        IntentKind.IMAGE: [
            ProviderDescriptor(wiki, wikipedia.fetch_image, wikipedia.is_configured, high),
            ProviderDescriptor(wd, wikidata.fetch_image, wikidata.is_configured, medium),
        ],
    }


def build_wiring(cache_file: Optional[str] = None) -> Wiring:
    cache_file = cache_file if cache_file is not None else settings.CACHE_FILE
    cache = TieredCache(store=JsonFileStore(cache_file) if cache_file else None)
    pacer = RequestPacer(settings.PACING_S)
    telemetry = OptimizationTelemetry(ai_provider=ProviderId.GROQ.value)

    football_data = FootballDataProvider(
        settings.FOOTBALL_DATA_API_KEY,
        cache=cache,
        pacer=pacer,
        squad_scan=settings.PLAYER_SQUAD_SCAN,
    )
    thesportsdb = TheSportsDBProvider()
    wikipedia = WikipediaProvider()
    groq = GroqProvider(settings.GROQ_API_KEY, model=settings.GROQ_MODEL)
    static = StaticTablesProvider()
    wikidata = WikidataImageProvider()

    router = SourceFallbackRouter(
        build_chains(football_data, thesportsdb, wikipedia, groq, static, wikidata),
        pacer,
        telemetry,
        timeout=API_TIMEOUT,
        retry_backoff=RETRY_BACKOFF,
    )
    logger.info("provider chains: %s", router.describe())

    return Wiring(
        cache=cache,
        pacer=pacer,
        telemetry=telemetry,
        router=router,
        lookup=LookupService(router, cache, telemetry, cache_epoch=settings.CACHE_EPOCH),
        matches=MatchesService(
            router,
            cache,
            telemetry,
            groq=groq,
            static=static,
            pacer=pacer,
            region=settings.MATCH_REGION,
        ),
        proxy=FootballDataProxy(football_data, cache, pacer, telemetry),
    )


_wiring: Optional[Wiring] = None


def get_wiring() -> Wiring:
    global _wiring
    if _wiring is None:
        _wiring = build_wiring()
    return _wiring


def set_wiring(wiring: Optional[Wiring]) -> None:
    """Swap the shared wiring (tests); None rebuilds lazily on next use."""
    global _wiring
    _wiring = wiring
