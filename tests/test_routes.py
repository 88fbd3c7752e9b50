import pytest

from futbolai.app import app
from futbolai.cache import TieredCache
from futbolai.composition import providers as composition
from futbolai.composition.providers import Wiring
from futbolai.providers.base import ProviderDescriptor
from futbolai.providers.static_tables import StaticTablesProvider
from futbolai.query_classifier import IntentKind
from futbolai.rate_limiter import RequestPacer
from futbolai.router import SourceFallbackRouter
from futbolai.services.lookup import LookupService
from futbolai.services.matches import MatchesService
from futbolai.services.proxy import FootballDataProxy
from futbolai.telemetry import OptimizationTelemetry

from conftest import FakeClock


class Unconfigured:
    def is_configured(self):
        return False

    async def get_raw(self, endpoint):
        raise AssertionError("proxy must not call upstream without a key")


async def fake_team(intent):
    return {"name": intent.entity.title(), "type": "club"}


async def fake_image(intent):
    return {"url": f"https://img.test/{intent.normalized_text.replace(' ', '_')}.jpg"}


async def fake_matches(intent):
    return []


@pytest.fixture
def wiring():
    cache = TieredCache(clock=FakeClock())
    pacer = RequestPacer()
    telemetry = OptimizationTelemetry()
    static = StaticTablesProvider()
    chains = {
        IntentKind.TEAM: [ProviderDescriptor("football-data", fake_team, confidence="high")],
        IntentKind.MATCHES: [ProviderDescriptor("football-data", fake_matches, allow_empty=True)],
        IntentKind.TRANSLATION: [ProviderDescriptor("static", static.fetch_translation)],
        IntentKind.TRANSFERS: [ProviderDescriptor("static", static.fetch_transfers)],
        IntentKind.IMAGE: [ProviderDescriptor("wikipedia", fake_image, confidence="high")],
    }
    router = SourceFallbackRouter(chains, pacer, telemetry)
    w = Wiring(
        cache=cache,
        pacer=pacer,
        telemetry=telemetry,
        router=router,
        lookup=LookupService(router, cache, telemetry),
        matches=MatchesService(router, cache, telemetry, static=static, pacer=pacer, competitions=["PD"]),
        proxy=FootballDataProxy(Unconfigured(), cache, pacer, telemetry),
    )
    composition.set_wiring(w)
    yield w
    composition.set_wiring(None)


@pytest.fixture
def client(wiring):
    app.testing = True
    with app.test_client() as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "ok"
    assert payload["data"]["ok"] is True


def test_search_returns_routed_result(client):
    response = client.get("/search?q=Arsenal")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["source"] == "football-data"
    assert data["confidence"] == "high"
    assert data["data"]["name"] == "Arsenal"
    assert data["cached"] is False

    again = client.get("/search?q=arsenal").get_json()["data"]
    assert again["cached"] is True


def test_search_forced_translation(client):
    response = client.get("/search?q=Spain&lang=es&type=translation")
    data = response.get_json()["data"]
    assert data["source"] == "static"
    assert data["data"]["translation"] == "España"


def test_search_without_query_is_400(client):
    response = client.get("/search?q=%20")
    assert response.status_code == 400
    payload = response.get_json()
    assert payload["status"] == "error"
    assert payload["error"]["code"] == "INVALID_INPUT"


def test_search_with_no_chain_reports_error(client):
    data = client.get("/search?q=offside rule history").get_json()["data"]
    assert data["data"] is None
    assert data["error"] == "not_configured"


def test_matches_endpoint(client):
    response = client.get("/matches?type=latest&limit=500")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    assert payload["type"] == "latest"
    assert payload["data"] == []
    assert payload["warnings"] == ["limit_cap"]
    assert payload["timestamp"].endswith("Z")

    weekly = client.get("/matches").get_json()
    assert weekly["type"] == "weekly"
    assert weekly["data"]["total_results"] == 0


def test_matches_failure_is_500(client, wiring, monkeypatch):
    async def boom():
        raise RuntimeError("unexpected")

    monkeypatch.setattr(wiring.matches, "weekly", boom)
    response = client.get("/matches?type=weekly")
    assert response.status_code == 500
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["error"] == "RuntimeError"


def test_football_data_proxy_routes(client):
    bad = client.get("/football-data?endpoint=/teams/86")
    assert bad.status_code == 400
    assert bad.get_json() == {"error": "Invalid endpoint format"}

    no_key = client.get("/football-data?endpoint=/competitions/PD/matches")
    assert no_key.status_code == 200
    assert no_key.get_json()["fallback"] is True


def test_fact_stats_and_clear(client):
    fact = client.get("/fact").get_json()["data"]
    assert fact["source"] == "static"

    client.get("/search?q=Arsenal")
    stats = client.get("/stats").get_json()["data"]
    assert stats["telemetry"]["queries_routed"] == 1
    assert stats["cache"]["writes"] >= 1
    assert stats["chains"]["team"] == ["football-data"]

    cleared = client.post("/clear-cache").get_json()["data"]
    assert cleared == {"prefix": "search:", "removed": 1}

    client.post("/stats/clear")
    assert client.get("/stats").get_json()["data"]["telemetry"]["queries_routed"] == 0


def test_transfers_endpoint(client):
    response = client.get("/transfers?q=Real Madrid&limit=1")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["source"] == "static"
    assert [t["player"] for t in data["data"]] == ["Kylian Mbappé"]
    assert "warnings" not in data

    capped = client.get("/transfers?limit=99").get_json()["data"]
    assert capped["warnings"] == ["limit_cap"]
    assert len(capped["data"]) == 12


def test_player_image_endpoint(client):
    data = client.get("/player-image?name=Jude Bellingham").get_json()["data"]
    assert data["url"] == "https://img.test/jude_bellingham.jpg"
    assert data["source"] == "wikipedia"

    assert client.get("/player-image?name=Jude Bellingham").get_json()["data"]["cached"] is True
    assert client.get("/player-image").status_code == 400
