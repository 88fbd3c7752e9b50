import pytest

from futbolai.logging_utils import reset_warn_once_cache
from futbolai.providers.base import JsonHttpClient


class FakeClock:
    """Manually advanced clock; callable like time.time / time.monotonic."""

    def __init__(self, start=1_000_000.0):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingSleep:
    """Async sleep stand-in that records durations and advances a FakeClock."""

    def __init__(self, clock=None):
        self.calls = []
        self._clock = clock

    async def __call__(self, seconds):
        self.calls.append(seconds)
        if self._clock is not None:
            self._clock.advance(seconds)


class FakeResponse:
    def __init__(self, status, payload=None, exc=None):
        self.status = status
        self._payload = payload
        self._exc = exc

    async def json(self, content_type=None):
        if self._exc is not None:
            raise self._exc
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; replays responses keyed by URL suffix."""

    def __init__(self, routes, log):
        self._routes = routes
        self._log = log

    def request(self, method, url, params=None, json=None):
        self._log.append((method, url, dict(params or {}), json))
        for suffix, outcome in self._routes.items():
            if url.endswith(suffix):
                if isinstance(outcome, BaseException):
                    raise outcome
                return outcome
        return FakeResponse(404)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def make_client(routes, log, source="football-data", base_url="https://api.test/v4", client_headers=None):
    def factory(timeout=None, headers=None):
        log.append(("headers", headers))
        return FakeSession(routes, log)

    return JsonHttpClient(source=source, base_url=base_url, headers=client_headers or {}, session_factory=factory)


def request_paths(log):
    return [entry[1] for entry in log if entry[0] != "headers"]


@pytest.fixture(autouse=True)
def _reset_warn_once():
    reset_warn_once_cache()
    yield
    reset_warn_once_cache()


@pytest.fixture
def clock():
    return FakeClock()
