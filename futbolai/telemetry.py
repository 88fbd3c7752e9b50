"""
Optimization telemetry.

Counts how many AI calls the routing layer avoided compared to a baseline in
which every query goes to the AI provider. Observability only: nothing reads
these counters to make a routing decision.
"""
from __future__ import annotations

import threading
from collections import Counter
from typing import Any, Dict, Optional

from .constants import (
    AI_COST_PER_MILLION_TOKENS_USD,
    DEFAULT_ESTIMATED_TOKENS,
    ESTIMATED_TOKENS_PER_KIND,
    PROVIDER_CACHE,
    PROVIDER_GROQ,
)


def _kind_value(kind: Any) -> str:
    return getattr(kind, "value", None) or str(kind)


class OptimizationTelemetry:
    def __init__(self, ai_provider: str = PROVIDER_GROQ) -> None:
        self._ai_provider = ai_provider
        self._lock = threading.Lock()
        self._reset()

    def _reset(self) -> None:
        self._queries_routed = 0
        self._cache_hits = 0
        self._ai_calls = 0
        self._unresolved = 0
        self._calls_avoided: Counter = Counter()
        self._queries_by_kind: Counter = Counter()
        self._units_saved = 0
        self._provider_outcomes: Dict[str, Counter] = {}

    def record_routing(self, intent_kind: Any, chosen_source: Optional[str], was_cache_hit: bool) -> None:
        """
        Record the outcome of one query.

        `chosen_source` is the provider whose data was returned, or None when
        every provider failed.
        """
        kind = _kind_value(intent_kind)
        with self._lock:
            self._queries_routed += 1
            self._queries_by_kind[kind] += 1
            if was_cache_hit:
                self._cache_hits += 1
                credited = PROVIDER_CACHE
            elif chosen_source is None:
                self._unresolved += 1
                return
            elif chosen_source == self._ai_provider:
                self._ai_calls += 1
                return
            else:
                credited = str(chosen_source)
            self._calls_avoided[credited] += 1
            self._units_saved += ESTIMATED_TOKENS_PER_KIND.get(kind, DEFAULT_ESTIMATED_TOKENS)

    def record_provider_call(self, provider_id: str, outcome: Any) -> None:
        """Count one attempt (or skip) against `provider_id`; outcome is 'success' or an error kind."""
        with self._lock:
            self._provider_outcomes.setdefault(str(provider_id), Counter())[_kind_value(outcome)] += 1

    def report(self) -> Dict[str, Any]:
        with self._lock:
            avoided_total = sum(self._calls_avoided.values())
            baseline = self._queries_routed
            return {
                "queries_routed": self._queries_routed,
                "queries_by_kind": dict(self._queries_by_kind),
                "cache_hits": self._cache_hits,
                "ai_calls": self._ai_calls,
                "unresolved": self._unresolved,
                "calls_avoided_total": avoided_total,
                "calls_avoided_by_provider": dict(self._calls_avoided),
                "estimated_units_saved": self._units_saved,
                "estimated_cost_saved_usd": round(
                    self._units_saved / 1_000_000 * AI_COST_PER_MILLION_TOKENS_USD, 6
                ),
                "ai_avoidance_rate": round(avoided_total / baseline, 4) if baseline else 0.0,
                "provider_calls": {k: dict(v) for k, v in self._provider_outcomes.items()},
            }

    def clear(self) -> None:
        with self._lock:
            self._reset()
