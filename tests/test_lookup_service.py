import pytest

from futbolai.cache import TieredCache
from futbolai.errors import ErrorKind, InvalidInputError
from futbolai.providers.base import ProviderResult
from futbolai.query_classifier import IntentKind
from futbolai.services.lookup import LookupService, annotate_competitions
from futbolai.telemetry import OptimizationTelemetry


class FakeRouter:
    def __init__(self, results):
        self._results = list(results)
        self.intents = []

    async def resolve(self, intent):
        self.intents.append(intent)
        return self._results.pop(0)


def make_service(results, clock):
    router = FakeRouter(results)
    cache = TieredCache(clock=clock)
    telemetry = OptimizationTelemetry()
    return LookupService(router, cache, telemetry, cache_epoch="7"), router, cache, telemetry


@pytest.mark.asyncio
async def test_second_identical_query_is_served_from_cache(clock):
    team = {"name": "Brazil", "type": "national"}
    service, router, cache, telemetry = make_service([ProviderResult(team, "wikipedia", "medium")], clock)

    first = await service.search("Brazil")
    second = await service.search("  brazil ")

    assert first.data == team
    assert not first.cached
    assert second.cached
    assert second.source == "wikipedia"
    assert second.confidence == "medium"
    assert len(router.intents) == 1
    assert cache.get("search:7:team:en:brazil") is not None
    report = telemetry.report()
    assert report["cache_hits"] == 1
    assert report["calls_avoided_by_provider"] == {"wikipedia": 1, "cache": 1}


@pytest.mark.asyncio
async def test_failures_are_not_cached(clock):
    failed = ProviderResult(None, "static", "low", error=ErrorKind.EMPTY_RESULT)
    ok = ProviderResult({"name": "Atlantis FC"}, "thesportsdb", "medium")
    service, router, _, telemetry = make_service([failed, ok], clock)

    first = await service.search("Atlantis FC")
    assert first.data is None
    assert first.error is ErrorKind.EMPTY_RESULT

    second = await service.search("Atlantis FC")
    assert second.source == "thesportsdb"
    assert len(router.intents) == 2
    assert telemetry.report()["unresolved"] == 1


@pytest.mark.asyncio
async def test_non_english_payload_is_translated(clock):
    team = {"name": "Barcelona", "country": "Spain"}
    service, router, _, _ = make_service([ProviderResult(team, "football-data", "high")], clock)

    result = await service.search("barcelona", language="fr")
    assert result.data == {"name": "Barcelone", "country": "Espagne"}
    assert router.intents[0].language == "fr"
    assert team == {"name": "Barcelona", "country": "Spain"}


@pytest.mark.asyncio
async def test_player_image_is_remembered(clock):
    with_image = ProviderResult({"name": "Pedri", "image_url": "https://img.test/pedri.png"}, "wikipedia", "medium")
    without_image = ProviderResult({"name": "Pedri", "position": "Midfield"}, "football-data", "high")
    service, _, cache, _ = make_service([with_image, without_image], clock)

    await service.search("pedri")
    service.clear_cache()
    result = await service.search("pedri")

    assert result.source == "football-data"
    assert result.data["image_url"] == "https://img.test/pedri.png"
    assert cache.get("image:pedri") is not None


@pytest.mark.asyncio
async def test_empty_query_raises_before_any_io(clock):
    service, router, _, _ = make_service([], clock)
    with pytest.raises(InvalidInputError):
        await service.search("   ")
    assert router.intents == []


@pytest.mark.asyncio
async def test_clear_cache_only_touches_prefix(clock):
    service, _, cache, _ = make_service([ProviderResult({"name": "Brazil"}, "wikipedia", "medium")], clock)
    cache.set("matches:PD:FINISHED", [], 900)
    await service.search("Brazil")

    assert service.clear_cache() == 1
    assert cache.get("matches:PD:FINISHED") is not None


def test_annotate_competitions_adds_ids_without_mutation():
    matches = [{"competition": "Copa del Rey"}, {"competition": "Liga", "competition_id": "PD"}]
    annotated = annotate_competitions(matches)
    assert annotated[0]["competition_id"] == "CDR"
    assert annotated[1]["competition_id"] == "PD"
    assert "competition_id" not in matches[0]
    assert annotate_competitions({"league": "Spanish La Liga"})["league_id"] == "PD"


@pytest.mark.asyncio
async def test_player_image_is_looked_up_once_and_remembered(clock):
    found = ProviderResult({"url": "https://img.test/pedri.jpg"}, "wikidata", "medium")
    service, router, cache, _ = make_service([found], clock)

    first = await service.player_image("Pedri")
    second = await service.player_image("pedri")

    assert first == {"name": "Pedri", "url": "https://img.test/pedri.jpg", "source": "wikidata", "cached": False}
    assert second["cached"] is True
    assert second["url"] == "https://img.test/pedri.jpg"
    assert [i.kind for i in router.intents] == [IntentKind.IMAGE]
    assert cache.get("image:pedri").source == "wikidata"


@pytest.mark.asyncio
async def test_missing_player_image_is_a_placeholder_and_not_cached(clock):
    missing = ProviderResult(None, "wikidata", "low", error=ErrorKind.EMPTY_RESULT)
    found = ProviderResult({"url": "https://img.test/x.jpg"}, "wikipedia", "high")
    service, router, cache, _ = make_service([missing, found], clock)

    first = await service.player_image("Nobody Known")
    assert first["url"] is None
    assert first["source"] == "placeholder"
    assert cache.get("image:nobody known") is None

    second = await service.player_image("Nobody Known")
    assert second["url"] == "https://img.test/x.jpg"
    assert len(router.intents) == 2


@pytest.mark.asyncio
async def test_player_without_image_gets_one_from_the_image_chain(clock):
    player = ProviderResult({"name": "Pedri", "position": "Midfield"}, "football-data", "high")
    image = ProviderResult({"url": "https://img.test/pedri.jpg"}, "wikipedia", "high")
    service, router, _, _ = make_service([player, image], clock)

    result = await service.search("pedri")
    assert result.data["image_url"] == "https://img.test/pedri.jpg"
    assert [i.kind for i in router.intents] == [IntentKind.PLAYER, IntentKind.IMAGE]


@pytest.mark.asyncio
async def test_transfers_are_limited_and_cached_for_hours(clock):
    moves = [{"player": f"P{i}", "from": "X", "to": "Chelsea", "date": f"2025-0{i + 1}-01"} for i in range(5)]
    service, router, cache, _ = make_service([ProviderResult(moves, "static", "medium")], clock)

    result = await service.transfers("Chelsea", limit=2)
    assert result.source == "static"
    assert [t["player"] for t in result.data] == ["P0", "P1"]
    assert router.intents[0].kind is IntentKind.TRANSFERS
    assert router.intents[0].params["subject"] == "chelsea"

    clock.advance(2 * 3600)
    again = await service.transfers("chelsea", limit=3)
    assert again.cached is True
    assert len(again.data) == 3
    assert len(router.intents) == 1
    assert cache.get("search:7:transfers:en:chelsea transfers") is not None
