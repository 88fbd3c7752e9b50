"""
Shared provider types and the async JSON client used by every HTTP provider.

Adapters in the sibling modules turn raw upstream payloads into plain dicts at
this boundary, so nothing past the router branches on provider shapes.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple

import aiohttp

from ..config import API_TIMEOUT, setup_logger
from ..constants import (
    PROVIDER_FOOTBALL_DATA,
    PROVIDER_GROQ,
    PROVIDER_STATIC,
    PROVIDER_THESPORTSDB,
    PROVIDER_WIKIDATA,
    PROVIDER_WIKIPEDIA,
    USER_AGENT,
)
from ..errors import ErrorKind, ProviderRejectionError, TransientProviderError, sanitize_error_message

if TYPE_CHECKING:
    from ..query_classifier import QueryIntent

logger = setup_logger(__name__)


class ProviderId(str, Enum):
    FOOTBALL_DATA = PROVIDER_FOOTBALL_DATA
    THESPORTSDB = PROVIDER_THESPORTSDB
    WIKIPEDIA = PROVIDER_WIKIPEDIA
    WIKIDATA = PROVIDER_WIKIDATA
    GROQ = PROVIDER_GROQ
    STATIC = PROVIDER_STATIC


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of resolving one intent. Never mutated; use dataclasses.replace."""

    data: Any
    source: str
    confidence: str = Confidence.LOW.value
    error: Optional[ErrorKind] = None
    attempts: Tuple[Dict[str, Any], ...] = ()
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "source": self.source,
            "confidence": self.confidence,
            "error": self.error.value if self.error else None,
            "attempts": list(self.attempts),
            "cached": self.cached,
        }


def _always_configured() -> bool:
    return True


@dataclass(frozen=True)
class ProviderDescriptor:
    """One link in a fallback chain."""

    provider_id: str
    fetch: Callable[["QueryIntent"], Awaitable[Any]]
    is_configured: Callable[[], bool] = _always_configured
    confidence: str = Confidence.MEDIUM.value
    # List queries: an empty list is a valid answer, not a failure.
    allow_empty: bool = False


SessionFactory = Callable[..., Any]


@dataclass
class JsonHttpClient:
    """
    Minimal aiohttp wrapper with consistent error mapping.

    - timeout / connection failure -> TransientProviderError
    - HTTP 4xx/5xx -> ProviderRejectionError (code is the status; 429 adds "rate_limited")
    - undecodable body -> ProviderRejectionError(code="PARSE_ERROR")

    A session is opened per call so the client is safe to share across event
    loops. Tests inject `session_factory`.
    """

    source: str
    base_url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout_s: float = API_TIMEOUT
    session_factory: Optional[SessionFactory] = None

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if not self.base_url:
            return path
        if not path:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _open_session(self, headers: Dict[str, str]):
        factory = self.session_factory or aiohttp.ClientSession
        return factory(timeout=aiohttp.ClientTimeout(total=self.timeout_s), headers=headers)

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        url = self._url(path)
        merged = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        merged.update(self.headers)
        merged.update(headers or {})

        try:
            async with self._open_session(merged) as session:
                async with session.request(method, url, params=params, json=json) as resp:
                    status = resp.status
                    if status == 429:
                        raise ProviderRejectionError(
                            self.source,
                            "Upstream rate limited the request.",
                            details="rate_limited",
                            code="429",
                        )
                    if status >= 400:
                        raise ProviderRejectionError(
                            self.source,
                            f"Upstream returned HTTP {status}.",
                            code=str(status),
                        )
                    try:
                        return await resp.json(content_type=None)
                    except (ValueError, aiohttp.ContentTypeError) as exc:
                        raise ProviderRejectionError(
                            self.source,
                            "Failed to parse upstream response.",
                            details=sanitize_error_message(exc),
                            code="PARSE_ERROR",
                        ) from exc
        except asyncio.TimeoutError as exc:
            raise TransientProviderError(
                self.source, "Upstream did not respond in time.", code="TIMEOUT"
            ) from exc
        except aiohttp.ClientError as exc:
            raise TransientProviderError(
                self.source,
                "A network error occurred.",
                details=sanitize_error_message(exc),
                code="NETWORK_ERROR",
            ) from exc

    async def get_json(self, path: str, *, params: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, str]] = None) -> Any:
        return await self.request_json("GET", path, params=params, headers=headers)

    async def post_json(self, path: str, payload: Mapping[str, Any], *, headers: Optional[Mapping[str, str]] = None) -> Any:
        return await self.request_json("POST", path, json=payload, headers=headers)


def is_structurally_empty(data: Any) -> bool:
    """None, empty dict/list/tuple/str count as 'no usable data'."""
    if data is None:
        return True
    if isinstance(data, (dict, list, tuple, set, str)):
        return len(data) == 0
    return False
