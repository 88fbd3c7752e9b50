"""Wikidata SPARQL provider: player photos (P18) when Wikipedia has no thumbnail."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote

from ..config import setup_logger
from ..constants import COMMONS_FILE_PATH_URL, WIKIDATA_SPARQL_URL
from ..errors import EmptyResultError
from .base import JsonHttpClient, ProviderId

if TYPE_CHECKING:
    from ..query_classifier import QueryIntent

logger = setup_logger(__name__)

SOURCE = ProviderId.WIKIDATA.value

# Association football players (P106 = occupation, Q937857) labelled with the name.
_IMAGE_QUERY = """
SELECT ?image WHERE {{
  ?player rdfs:label "{name}"@en ;
          wdt:P106 wd:Q937857 ;
          wdt:P18 ?image .
}}
LIMIT 1
"""


def sparql_literal(value: str) -> str:
    """Escape a value for use inside a double-quoted SPARQL string."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")


def commons_image_url(file_url: str, width: int = 300) -> str:
    """Resized Commons URL for a P18 value such as .../Special:FilePath/Foo.jpg."""
    filename = file_url.rstrip("/").rsplit("/", 1)[-1]
    return f"{COMMONS_FILE_PATH_URL}/{quote(filename, safe='%')}?width={width}"


class WikidataImageProvider:
    def __init__(self, *, client: Optional[JsonHttpClient] = None) -> None:
        self.client = client or JsonHttpClient(
            source=SOURCE,
            base_url=WIKIDATA_SPARQL_URL,
            headers={"Accept": "application/sparql-results+json"},
        )

    def is_configured(self) -> bool:
        return True

    async def fetch_image(self, intent: "QueryIntent") -> Dict[str, Any]:
        name = intent.params.get("name") or intent.entity
        query = _IMAGE_QUERY.format(name=sparql_literal(name))
        raw = await self.client.get_json("", params={"query": query, "format": "json"})
        bindings = ((raw or {}).get("results") or {}).get("bindings") or []
        value = ((bindings[0] if bindings else {}).get("image") or {}).get("value")
        if not value:
            raise EmptyResultError(SOURCE, f"No Wikidata image for {name!r}")
        logger.debug("wikidata: image for %s", name)
        return {"url": commons_image_url(value)}
