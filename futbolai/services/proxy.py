"""
football-data.org passthrough with the key held server side.

Only /competitions/<CODE>/... endpoints are forwarded. Upstream trouble never
turns into a 5xx for the browser: the caller always gets a 200 body it can
render, flagged with ``fallback: true``.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from ..cache import CacheDomain, TieredCache, ttl_for
from ..competitions import competition_info
from ..config import setup_logger
from ..constants import PROVIDER_FOOTBALL_DATA
from ..errors import ProviderRejectionError, TransientProviderError
from ..telemetry import OptimizationTelemetry
from ..utils import iso_utc, utc_now

logger = setup_logger(__name__)

ENDPOINT_RE = re.compile(r"^/competitions/([A-Z0-9]+)/")

# Regional ids tried when the primary competition code is refused.
FALLBACK_IDS: Dict[str, str] = {
    "ARG": "AR1",
    "COL": "CO1",
    "VEN": "VE1",
    "CHI": "CL1",
    "PER": "PE1",
}

_FALLBACK_STATUSES = {"403", "404"}


def competition_name(code: str) -> str:
    info = competition_info(code)
    return info.name if info is not None else code


def parse_endpoint(endpoint: Optional[str]) -> Optional[str]:
    """Competition code of a forwardable endpoint, else None."""
    if not endpoint:
        return None
    match = ENDPOINT_RE.match(endpoint)
    return match.group(1) if match else None


class FootballDataProxy:
    def __init__(self, provider, cache: TieredCache, pacer=None, telemetry: Optional[OptimizationTelemetry] = None) -> None:
        self.provider = provider
        self.cache = cache
        self.pacer = pacer
        self.telemetry = telemetry

    def _fallback_body(self, error: str, code: str, **extra: Any) -> Dict[str, Any]:
        body = {
            "error": error,
            "fallback": True,
            "competition": competition_name(code),
            "matches": [],
        }
        body.update(extra)
        return body

    async def _get(self, endpoint: str) -> Any:
        if self.pacer is not None:
            await self.pacer.await_turn(PROVIDER_FOOTBALL_DATA)
        try:
            data = await self.provider.get_raw(endpoint)
        except (ProviderRejectionError, TransientProviderError) as exc:
            self._report(exc.kind)
            raise
        self._report("success")
        return data

    def _report(self, outcome: Any) -> None:
        if self.telemetry is not None:
            self.telemetry.record_provider_call(PROVIDER_FOOTBALL_DATA, outcome)

    async def fetch(self, endpoint: Optional[str]) -> Tuple[Dict[str, Any], int]:
        """Returns (body, http_status)."""
        code = parse_endpoint(endpoint)
        if code is None:
            return {"error": "Invalid endpoint format"}, 400

        if not self.provider.is_configured():
            return self._fallback_body(
                "API key not configured",
                code,
                message="Set FOOTBALL_DATA_API_KEY to load live match data.",
            ), 200

        cache_key = f"proxy:{endpoint}"
        hit = self.cache.get(cache_key)
        if hit is not None:
            return hit.payload, 200

        try:
            data = await self._get(endpoint)
        except ProviderRejectionError as exc:
            alternate = FALLBACK_IDS.get(code)
            if exc.code not in _FALLBACK_STATUSES or alternate is None:
                logger.warning("football-data rejected %s (%s)", endpoint, exc.code)
                return self._fallback_body(f"API returned {exc.code}", code), 200
            retry_endpoint = endpoint.replace(f"/competitions/{code}/", f"/competitions/{alternate}/", 1)
            logger.info("Retrying %s as %s", endpoint, retry_endpoint)
            try:
                data = await self._get(retry_endpoint)
            except ProviderRejectionError as retry_exc:
                logger.warning("football-data rejected fallback %s (%s)", retry_endpoint, retry_exc.code)
                return self._fallback_body(f"API returned {retry_exc.code}", code), 200
            except TransientProviderError:
                return self._network_fallback(code), 200
        except TransientProviderError as exc:
            logger.warning("football-data unreachable for %s (%s)", endpoint, exc.code)
            return self._network_fallback(code), 200

        self.cache.set(cache_key, data, ttl_for(CacheDomain.PROXY), PROVIDER_FOOTBALL_DATA)
        return data, 200

    def _network_fallback(self, code: str) -> Dict[str, Any]:
        return self._fallback_body("Network error", code, timestamp=iso_utc(utc_now()))
