"""Per-provider request pacing."""
from __future__ import annotations

import asyncio
import threading
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from .config import setup_logger

logger = setup_logger(__name__)


class RequestPacer:
    """
    Enforces a minimum gap between consecutive calls to the same provider.

    A caller reserves the next free slot before sleeping, so callers racing
    for one provider queue up one interval apart. Providers are tracked
    independently and never wait on each other. Async views run on their own
    loop per request thread, so the reservation is taken under a lock; the
    sleep happens outside it.
    """

    def __init__(
        self,
        intervals: Optional[Mapping[str, float]] = None,
        default_interval: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._intervals: Dict[str, float] = {k: max(float(v), 0.0) for k, v in (intervals or {}).items()}
        self._default_interval = max(float(default_interval), 0.0)
        self._clock = clock
        self._sleep = sleep
        self._next_slot: Dict[str, float] = {}
        self._lock = threading.Lock()

    def interval_for(self, provider_id: str) -> float:
        return self._intervals.get(str(provider_id), self._default_interval)

    def set_interval(self, provider_id: str, seconds: float) -> None:
        with self._lock:
            self._intervals[str(provider_id)] = max(float(seconds), 0.0)

    def reserve(self, provider_id: str) -> float:
        """Claim the next slot for `provider_id`; returns seconds until it opens."""
        key = str(provider_id)
        with self._lock:
            interval = self.interval_for(key)
            now = self._clock()
            slot = max(now, self._next_slot.get(key, now))
            self._next_slot[key] = slot + interval
        return slot - now

    async def await_turn(self, provider_id: str) -> float:
        """Wait until `provider_id` may be called again; returns seconds waited."""
        wait = self.reserve(provider_id)
        if wait > 0:
            logger.debug("Pacing %s: waiting %.3fs", provider_id, wait)
            await self._sleep(wait)
        return wait

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            now = self._clock()
            slots = dict(self._next_slot)
        return {
            key: {
                "min_interval_s": self.interval_for(key),
                "next_slot_in_s": round(max(slot - now, 0.0), 3),
            }
            for key, slot in slots.items()
        }
