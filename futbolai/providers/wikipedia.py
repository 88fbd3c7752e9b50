"""Wikipedia REST page-summary provider for team, player and keyword lookups."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote

from .. import lookups
from ..config import setup_logger
from ..constants import WIKIPEDIA_SUMMARY_URL
from ..errors import EmptyResultError
from .base import JsonHttpClient, ProviderId

if TYPE_CHECKING:
    from ..query_classifier import QueryIntent

logger = setup_logger(__name__)

SOURCE = ProviderId.WIKIPEDIA.value


def page_title(intent: "QueryIntent") -> str:
    """Best-guess article title for an intent."""
    params = intent.params
    if params.get("team_type") == "national":
        country = params.get("matched") or intent.entity
        return f"{country.title()} national football team"
    matched = params.get("matched")
    if matched and matched in lookups.MAJOR_CLUBS.values():
        return matched
    return " ".join(word[:1].upper() + word[1:] for word in intent.entity.split())


def adapt_summary(raw: Dict[str, Any], intent: "QueryIntent") -> Dict[str, Any]:
    urls = (raw.get("content_urls") or {}).get("desktop") or {}
    image = (raw.get("thumbnail") or {}).get("source") or (raw.get("originalimage") or {}).get("source")
    data = {
        "name": raw.get("title"),
        "description": raw.get("description"),
        "summary": raw.get("extract"),
        "image_url": image,
        "url": urls.get("page"),
    }
    if intent.kind.value == "team":
        data["type"] = intent.params.get("team_type") or "club"
    return data


class WikipediaProvider:
    def __init__(self, *, client: Optional[JsonHttpClient] = None) -> None:
        self.client = client or JsonHttpClient(source=SOURCE, base_url=WIKIPEDIA_SUMMARY_URL)

    def is_configured(self) -> bool:
        return True

    async def _summary(self, title: str) -> Dict[str, Any]:
        return await self.client.get_json(f"/{quote(title.replace(' ', '_'), safe='')}") or {}

    async def fetch_image(self, intent: "QueryIntent") -> Dict[str, Any]:
        """Article thumbnail for a person's name."""
        title = intent.params.get("name") or page_title(intent)
        raw = await self._summary(title)
        url = (raw.get("thumbnail") or {}).get("source")
        if raw.get("type") == "disambiguation" or not url:
            raise EmptyResultError(SOURCE, f"No article image for {title!r}")
        return {"url": url, "page": raw.get("title") or title}

    async def fetch_summary(self, intent: "QueryIntent") -> Dict[str, Any]:
        title = page_title(intent)
        raw = await self._summary(title)
        if not raw or raw.get("type") == "disambiguation":
            raise EmptyResultError(SOURCE, f"No unambiguous article for {title!r}")
        if not raw.get("extract"):
            raise EmptyResultError(SOURCE, f"Article {title!r} has no summary")
        logger.debug("wikipedia: summary for %s", title)
        return adapt_summary(raw, intent)
