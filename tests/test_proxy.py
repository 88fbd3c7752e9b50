import pytest

from futbolai.cache import TieredCache
from futbolai.errors import ProviderRejectionError, TransientProviderError
from futbolai.services.proxy import FootballDataProxy, parse_endpoint

from conftest import FakeClock


class FakeFootballData:
    def __init__(self, responses, configured=True):
        self._responses = responses
        self._configured = configured
        self.calls = []

    def is_configured(self):
        return self._configured

    async def get_raw(self, endpoint):
        self.calls.append(endpoint)
        outcome = self._responses.get(endpoint)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def make_proxy(responses, configured=True, clock=None):
    provider = FakeFootballData(responses, configured)
    return FootballDataProxy(provider, TieredCache(clock=clock or FakeClock())), provider


def rejected(status):
    return ProviderRejectionError("football-data", f"Upstream returned HTTP {status}.", code=str(status))


def test_parse_endpoint():
    assert parse_endpoint("/competitions/PD/matches") == "PD"
    assert parse_endpoint("/competitions/pd/matches") is None
    assert parse_endpoint("/teams/86") is None
    assert parse_endpoint(None) is None


@pytest.mark.asyncio
async def test_invalid_endpoint_is_400():
    proxy, provider = make_proxy({})
    body, status = await proxy.fetch("/teams/86")
    assert status == 400
    assert body == {"error": "Invalid endpoint format"}
    assert provider.calls == []


@pytest.mark.asyncio
async def test_missing_key_returns_fallback_body():
    proxy, provider = make_proxy({}, configured=False)
    body, status = await proxy.fetch("/competitions/PD/matches")
    assert status == 200
    assert body["error"] == "API key not configured"
    assert body["fallback"] is True
    assert body["competition"] == "La Liga"
    assert body["matches"] == []
    assert provider.calls == []


@pytest.mark.asyncio
async def test_success_is_cached_for_five_minutes():
    clock = FakeClock()
    proxy, provider = make_proxy({"/competitions/PL/matches": {"matches": [{"id": 1}]}}, clock=clock)

    first, _ = await proxy.fetch("/competitions/PL/matches")
    second, _ = await proxy.fetch("/competitions/PL/matches")
    assert first == second == {"matches": [{"id": 1}]}
    assert len(provider.calls) == 1

    clock.advance(301)
    await proxy.fetch("/competitions/PL/matches")
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_refused_regional_code_retries_fallback_id():
    responses = {
        "/competitions/ARG/matches": rejected(404),
        "/competitions/AR1/matches": {"matches": [{"id": 7}]},
    }
    proxy, provider = make_proxy(responses)
    body, status = await proxy.fetch("/competitions/ARG/matches")
    assert status == 200
    assert body == {"matches": [{"id": 7}]}
    assert provider.calls == ["/competitions/ARG/matches", "/competitions/AR1/matches"]


@pytest.mark.asyncio
async def test_upstream_error_without_fallback_id():
    proxy, _ = make_proxy({"/competitions/PD/matches": rejected(403)})
    body, status = await proxy.fetch("/competitions/PD/matches")
    assert status == 200
    assert body == {"error": "API returned 403", "fallback": True, "competition": "La Liga", "matches": []}


@pytest.mark.asyncio
async def test_network_error_body_has_timestamp():
    proxy, _ = make_proxy({"/competitions/CL/matches": TransientProviderError("football-data", "down", code="TIMEOUT")})
    body, status = await proxy.fetch("/competitions/CL/matches")
    assert status == 200
    assert body["error"] == "Network error"
    assert body["competition"] == "UEFA Champions League"
    assert body["timestamp"].endswith("Z")
