import asyncio
import threading
import time

import pytest

from futbolai.rate_limiter import RequestPacer

from conftest import FakeClock, RecordingSleep


@pytest.mark.asyncio
async def test_consecutive_calls_are_spaced():
    clock = FakeClock(0.0)
    sleep = RecordingSleep(clock)
    pacer = RequestPacer({"groq-ai": 2.0}, clock=clock, sleep=sleep)

    assert await pacer.await_turn("groq-ai") == 0
    assert await pacer.await_turn("groq-ai") == pytest.approx(2.0)
    assert sleep.calls == [pytest.approx(2.0)]


@pytest.mark.asyncio
async def test_no_wait_once_interval_has_passed():
    clock = FakeClock(0.0)
    sleep = RecordingSleep(clock)
    pacer = RequestPacer({"football-data": 0.15}, clock=clock, sleep=sleep)

    await pacer.await_turn("football-data")
    clock.advance(1.0)
    assert await pacer.await_turn("football-data") == 0
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_providers_are_paced_independently():
    clock = FakeClock(0.0)
    sleep = RecordingSleep(clock)
    pacer = RequestPacer({"groq-ai": 2.0, "wikipedia": 0.1}, clock=clock, sleep=sleep)

    await pacer.await_turn("groq-ai")
    assert await pacer.await_turn("wikipedia") == 0
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_concurrent_callers_get_distinct_slots():
    clock = FakeClock(0.0)
    waits = []

    async def fake_sleep(seconds):
        waits.append(seconds)
        await asyncio.sleep(0)

    pacer = RequestPacer({"thesportsdb": 0.2}, clock=clock, sleep=fake_sleep)
    results = await asyncio.gather(*(pacer.await_turn("thesportsdb") for _ in range(3)))
    assert sorted(results) == [0, pytest.approx(0.2), pytest.approx(0.4)]


def test_unknown_provider_uses_default_and_snapshot():
    pacer = RequestPacer({"groq-ai": 2.0}, default_interval=0.5, clock=FakeClock(0.0))
    assert pacer.interval_for("other") == 0.5
    pacer.set_interval("other", -1)
    assert pacer.interval_for("other") == 0.0
    assert pacer.snapshot() == {}


def test_request_threads_sharing_a_pacer_get_distinct_slots():
    # Each async view runs on its own event loop in its own thread.
    def slow_clock():
        time.sleep(0.001)
        return 100.0

    async def no_sleep(seconds):
        return None

    pacer = RequestPacer({"football-data": 0.15}, clock=slow_clock, sleep=no_sleep)
    barrier = threading.Barrier(6)
    waits = []
    waits_lock = threading.Lock()

    def view():
        barrier.wait()
        waited = asyncio.run(pacer.await_turn("football-data"))
        with waits_lock:
            waits.append(waited)

    threads = [threading.Thread(target=view) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(waits) == [pytest.approx(0.15 * i) for i in range(6)]
    assert pacer.snapshot()["football-data"]["next_slot_in_s"] == pytest.approx(0.9)
