"""
Source fallback router.

Walks the provider chain configured for an intent kind, strictly in order,
and returns the first usable answer. Provider failures never escape: when
every provider fails the result carries `data=None` and the most specific
error seen.
"""
from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import API_TIMEOUT, RETRY_BACKOFF, setup_logger
from .errors import APIError, ErrorKind, sanitize_error_message
from .logging_utils import RateLimitedLogger
from .providers.base import Confidence, ProviderDescriptor, ProviderResult, is_structurally_empty
from .query_classifier import IntentKind, QueryIntent
from .rate_limiter import RequestPacer
from .telemetry import OptimizationTelemetry

logger = setup_logger(__name__)
_failure_log = RateLimitedLogger(logger, window_seconds=60.0)

# Higher wins when reporting why a whole chain failed.
ERROR_SPECIFICITY: Dict[ErrorKind, int] = {
    ErrorKind.NOT_CONFIGURED: 1,
    ErrorKind.TRANSIENT: 2,
    ErrorKind.REJECTED: 3,
    ErrorKind.EMPTY_RESULT: 4,
}

SUCCESS = "success"
NO_PROVIDER = "none"


def most_specific(failures: Sequence[Tuple[str, ErrorKind]]) -> Optional[ErrorKind]:
    """Most specific failure kind; on a tie the later failure wins."""
    best: Optional[ErrorKind] = None
    for _, kind in failures:
        if best is None or ERROR_SPECIFICITY.get(kind, 0) >= ERROR_SPECIFICITY.get(best, 0):
            best = kind
    return best


class SourceFallbackRouter:
    def __init__(
        self,
        chains: Mapping[IntentKind, Sequence[ProviderDescriptor]],
        pacer: RequestPacer,
        telemetry: Optional[OptimizationTelemetry] = None,
        *,
        timeout: float = API_TIMEOUT,
        retry_backoff: float = RETRY_BACKOFF,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._chains: Dict[IntentKind, List[ProviderDescriptor]] = {
            IntentKind(kind): list(chain) for kind, chain in chains.items()
        }
        self._pacer = pacer
        self._telemetry = telemetry
        self._timeout = timeout
        self._retry_backoff = retry_backoff
        self._sleep = sleep

    def chain_for(self, kind: IntentKind) -> List[ProviderDescriptor]:
        return list(self._chains.get(IntentKind(kind), []))

    def describe(self) -> Dict[str, List[str]]:
        return {kind.value: [d.provider_id for d in chain] for kind, chain in self._chains.items()}

    def _report(self, provider_id: str, outcome: Any) -> None:
        if self._telemetry is not None:
            self._telemetry.record_provider_call(provider_id, outcome)

    async def _call_once(self, descriptor: ProviderDescriptor, intent: QueryIntent) -> Tuple[Any, Optional[ErrorKind], Optional[str]]:
        pid = descriptor.provider_id
        await self._pacer.await_turn(pid)
        try:
            data = await asyncio.wait_for(descriptor.fetch(intent), timeout=self._timeout)
        except asyncio.TimeoutError:
            return None, ErrorKind.TRANSIENT, f"timed out after {self._timeout:.1f}s"
        except APIError as exc:
            return None, exc.kind or ErrorKind.REJECTED, sanitize_error_message(exc.message)
        except Exception as exc:  # provider bug; treat as a rejection and move on
            logger.exception("Provider %s raised unexpectedly for %s", pid, intent.kind.value)
            return None, ErrorKind.REJECTED, sanitize_error_message(type(exc).__name__)

        if descriptor.allow_empty and isinstance(data, list):
            return data, None, None
        if is_structurally_empty(data):
            return None, ErrorKind.EMPTY_RESULT, "no usable data"
        return data, None, None

    async def resolve(self, intent: QueryIntent) -> ProviderResult:
        chain = self._chains.get(intent.kind, [])
        attempts: List[Dict[str, Any]] = []
        failures: List[Tuple[str, ErrorKind]] = []
        last_tried: Optional[str] = None

        for descriptor in chain:
            pid = descriptor.provider_id
            if not descriptor.is_configured():
                attempts.append({"provider": pid, "outcome": ErrorKind.NOT_CONFIGURED.value, "attempt": 0})
                failures.append((pid, ErrorKind.NOT_CONFIGURED))
                self._report(pid, ErrorKind.NOT_CONFIGURED)
                continue

            last_tried = pid
            for attempt in (1, 2):
                data, kind, detail = await self._call_once(descriptor, intent)
                if kind is None:
                    attempts.append({"provider": pid, "outcome": SUCCESS, "attempt": attempt})
                    self._report(pid, SUCCESS)
                    return ProviderResult(
                        data=data,
                        source=pid,
                        confidence=descriptor.confidence,
                        attempts=tuple(attempts),
                    )

                attempts.append({"provider": pid, "outcome": kind.value, "attempt": attempt})
                self._report(pid, kind)
                _failure_log.warning(
                    (pid, kind.value),
                    "Provider %s failed (%s) for %s query: %s",
                    pid,
                    kind.value,
                    intent.kind.value,
                    detail,
                )
                if kind is ErrorKind.TRANSIENT and attempt == 1:
                    await self._sleep(self._retry_backoff)
                    continue
                failures.append((pid, kind))
                break

        error = most_specific(failures) or ErrorKind.NOT_CONFIGURED
        if last_tried is not None:
            source = last_tried
        elif chain:
            source = chain[-1].provider_id
        else:
            source = NO_PROVIDER
        logger.info(
            "All providers failed for %s query %r (error=%s, last=%s)",
            intent.kind.value,
            intent.normalized_text,
            error.value,
            source,
        )
        return ProviderResult(
            data=None,
            source=source,
            confidence=Confidence.LOW.value,
            error=error,
            attempts=tuple(attempts),
        )


def mark_cached(result: ProviderResult) -> ProviderResult:
    return replace(result, cached=True)
