import asyncio

import pytest

from futbolai.errors import (
    EmptyResultError,
    ErrorKind,
    ProviderRejectionError,
    TransientProviderError,
)
from futbolai.providers.base import ProviderDescriptor
from futbolai.query_classifier import IntentKind, classify
from futbolai.rate_limiter import RequestPacer
from futbolai.router import SourceFallbackRouter, most_specific
from futbolai.telemetry import OptimizationTelemetry

from conftest import FakeClock, RecordingSleep


class FakeProvider:
    """Replays a scripted list of outcomes: exceptions are raised, anything else returned."""

    def __init__(self, name, outcomes, configured=True, calls=None):
        self.name = name
        self._outcomes = list(outcomes)
        self._configured = configured
        self.calls = calls if calls is not None else []

    def is_configured(self):
        return self._configured

    async def fetch(self, intent):
        self.calls.append(self.name)
        outcome = self._outcomes.pop(0) if self._outcomes else None
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def descriptor(self, confidence="medium", allow_empty=False):
        return ProviderDescriptor(self.name, self.fetch, self.is_configured, confidence, allow_empty)


def make_router(chain, kind=IntentKind.TEAM, telemetry=None, timeout=5.0):
    sleep = RecordingSleep()
    pacer = RequestPacer(clock=FakeClock(0.0), sleep=sleep)
    router = SourceFallbackRouter(
        {kind: chain},
        pacer,
        telemetry,
        timeout=timeout,
        retry_backoff=0.5,
        sleep=sleep,
    )
    return router, sleep


@pytest.mark.asyncio
async def test_first_usable_answer_wins_and_chain_order_is_kept():
    calls = []
    fd = FakeProvider("football-data", [EmptyResultError("football-data")], calls=calls)
    tsdb = FakeProvider("thesportsdb", [{"name": "Brazil"}], calls=calls)
    wiki = FakeProvider("wikipedia", [{"name": "never"}], calls=calls)
    router, _ = make_router([fd.descriptor("high"), tsdb.descriptor(), wiki.descriptor()])

    result = await router.resolve(classify("Brazil"))

    assert calls == ["football-data", "thesportsdb"]
    assert result.ok
    assert result.source == "thesportsdb"
    assert result.confidence == "medium"
    assert [a["outcome"] for a in result.attempts] == ["empty_result", "success"]


@pytest.mark.asyncio
async def test_structurally_empty_data_falls_through():
    calls = []
    first = FakeProvider("wikipedia", [{}], calls=calls)
    second = FakeProvider("groq-ai", [{"title": "Offside"}], calls=calls)
    router, _ = make_router([first.descriptor(), second.descriptor("low")], kind=IntentKind.KEYWORD)

    result = await router.resolve(classify("offside rule history"))

    assert calls == ["wikipedia", "groq-ai"]
    assert result.source == "groq-ai"
    assert result.confidence == "low"


@pytest.mark.asyncio
async def test_all_fail_returns_last_provider_and_most_specific_error():
    calls = []
    chain = [
        FakeProvider("football-data", [], configured=False, calls=calls),
        FakeProvider("thesportsdb", [TransientProviderError("thesportsdb", "down")] * 2, calls=calls),
        FakeProvider("wikipedia", [EmptyResultError("wikipedia")], calls=calls),
        FakeProvider("groq-ai", [], configured=False, calls=calls),
        FakeProvider("static", [ProviderRejectionError("static", "no")], calls=calls),
    ]
    router, _ = make_router([p.descriptor() for p in chain])

    result = await router.resolve(classify("Atlantis FC"))

    assert result.data is None
    assert result.source == "static"
    assert result.error is ErrorKind.EMPTY_RESULT
    assert calls == ["thesportsdb", "thesportsdb", "wikipedia", "static"]


@pytest.mark.asyncio
async def test_unconfigured_provider_is_skipped_without_a_call():
    calls = []
    fd = FakeProvider("football-data", [{"name": "x"}], configured=False, calls=calls)
    wiki = FakeProvider("wikipedia", [{"name": "Lionel Messi"}], calls=calls)
    router, _ = make_router([fd.descriptor(), wiki.descriptor()], kind=IntentKind.PLAYER)

    result = await router.resolve(classify("messi"))

    assert calls == ["wikipedia"]
    assert result.attempts[0] == {"provider": "football-data", "outcome": "not_configured", "attempt": 0}


@pytest.mark.asyncio
async def test_transient_failure_is_retried_once_after_backoff():
    flaky = FakeProvider("football-data", [TransientProviderError("football-data", "timeout"), {"name": "Arsenal"}])
    router, sleep = make_router([flaky.descriptor("high")])

    result = await router.resolve(classify("arsenal"))

    assert result.source == "football-data"
    assert flaky.calls == ["football-data", "football-data"]
    assert 0.5 in sleep.calls
    assert [a["attempt"] for a in result.attempts] == [1, 2]


@pytest.mark.asyncio
async def test_rejection_is_not_retried():
    calls = []
    rejecting = FakeProvider("football-data", [ProviderRejectionError("football-data", "quota", code="429")], calls=calls)
    backup = FakeProvider("thesportsdb", [{"name": "Arsenal"}], calls=calls)
    router, _ = make_router([rejecting.descriptor(), backup.descriptor()])

    await router.resolve(classify("arsenal"))
    assert calls == ["football-data", "thesportsdb"]


@pytest.mark.asyncio
async def test_timeout_counts_as_transient():
    class Slow:
        async def fetch(self, intent):
            await asyncio.sleep(1)

    slow = Slow()
    router, _ = make_router([ProviderDescriptor("wikipedia", slow.fetch)], kind=IntentKind.KEYWORD, timeout=0.01)

    result = await router.resolve(classify("offside rule history"))
    assert result.error is ErrorKind.TRANSIENT
    assert len(result.attempts) == 2


@pytest.mark.asyncio
async def test_empty_match_list_is_success_when_allowed():
    fd = FakeProvider("football-data", [[]])
    router, _ = make_router([fd.descriptor("high", allow_empty=True)], kind=IntentKind.MATCHES)

    result = await router.resolve(classify("la liga results"))
    assert result.error is None
    assert result.data == []


@pytest.mark.asyncio
async def test_unexpected_exception_is_contained():
    calls = []
    broken = FakeProvider("wikipedia", [KeyError("extract")], calls=calls)
    backup = FakeProvider("groq-ai", [{"title": "x"}], calls=calls)
    router, _ = make_router([broken.descriptor(), backup.descriptor()], kind=IntentKind.KEYWORD)

    result = await router.resolve(classify("offside rule history"))
    assert result.source == "groq-ai"
    assert result.attempts[0]["outcome"] == "rejected"


@pytest.mark.asyncio
async def test_empty_chain_reports_none_source():
    router, _ = make_router([], kind=IntentKind.TRANSLATION)
    result = await router.resolve(classify("offside rule history"))
    assert result.source == "none"
    assert result.error is ErrorKind.NOT_CONFIGURED


@pytest.mark.asyncio
async def test_provider_calls_reach_telemetry():
    telemetry = OptimizationTelemetry()
    fd = FakeProvider("football-data", [], configured=False)
    wiki = FakeProvider("wikipedia", [{"name": "Brazil"}])
    router, _ = make_router([fd.descriptor(), wiki.descriptor()], telemetry=telemetry)

    await router.resolve(classify("Brazil"))
    calls = telemetry.report()["provider_calls"]
    assert calls == {"football-data": {"not_configured": 1}, "wikipedia": {"success": 1}}


def test_most_specific_prefers_later_on_tie():
    assert most_specific([]) is None
    assert most_specific([("a", ErrorKind.REJECTED), ("b", ErrorKind.TRANSIENT)]) is ErrorKind.REJECTED
    assert most_specific([("a", ErrorKind.TRANSIENT), ("b", ErrorKind.EMPTY_RESULT)]) is ErrorKind.EMPTY_RESULT
