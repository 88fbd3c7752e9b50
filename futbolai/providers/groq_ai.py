"""
Groq chat-completions provider (OpenAI-compatible endpoint).

The paid, rate-limited last resort for lookups, plus transfer news and the daily
fact. Prompts are deliberately short; callers only rely on the JSON-object
contract.
"""
from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..config import setup_logger
from ..constants import GROQ_BASE_URL, GROQ_DEFAULT_MODEL
from ..errors import ConfigurationError, EmptyResultError, ProviderRejectionError
from ..logging_utils import warn_once
from .base import JsonHttpClient, ProviderId

if TYPE_CHECKING:
    from ..query_classifier import QueryIntent

logger = setup_logger(__name__)

SOURCE = ProviderId.GROQ.value

_SYSTEM_PROMPT = (
    "You are a football encyclopedia. Answer with a single JSON object only. "
    "If you do not know the answer, return {}."
)

_KIND_PROMPTS = {
    "team": 'Describe the football team "{q}". Keys: name, type (club or national), country, founded, stadium, coach, achievements (list).',
    "player": 'Describe the footballer "{q}". Keys: name, current_team, position, nationality, age, achievements (list), summary.',
    "keyword": 'Explain the football topic "{q}". Keys: title, summary, facts (list).',
    "translation": 'Translate the football term "{q}" into language code "{lang}". Keys: term, translation.',
}

_TRANSFERS_PROMPT = (
    "List up to 10 recent football transfers{scope}. "
    'Return {{"transfers": [...]}} where each item has player, from, to, date (YYYY-MM-DD), '
    "fee, type (transfer, loan, free or rumor), status (confirmed or rumor), description."
)

_MARKDOWN_RE = re.compile(r"[*#_`]")
FACT_CATEGORIES = ("history", "records", "players", "competitions", "stadia", "tactics")


def extract_content(raw: Dict[str, Any]) -> str:
    try:
        return raw["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as exc:
        raise ProviderRejectionError(SOURCE, "Unexpected completion shape", code="PARSE_ERROR") from exc


class GroqProvider:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = GROQ_DEFAULT_MODEL,
        client: Optional[JsonHttpClient] = None,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.client = client or JsonHttpClient(
            source=SOURCE,
            base_url=GROQ_BASE_URL,
            headers={"Authorization": f"Bearer {api_key}"} if api_key else {},
        )

    def is_configured(self) -> bool:
        if not self._api_key:
            warn_once(("not_configured", SOURCE), "GROQ_API_KEY not set; AI provider disabled", logger=logger)
            return False
        return True

    async def _complete(self, messages: List[Dict[str, str]], *, json_format: bool, temperature: float, max_tokens: int) -> str:
        if not self._api_key:
            raise ConfigurationError(SOURCE, "GROQ_API_KEY not set")
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_format:
            payload["response_format"] = {"type": "json_object"}
        raw = await self.client.post_json("/chat/completions", payload)
        return extract_content(raw)

    async def _complete_object(self, prompt: str, query: str) -> Dict[str, Any]:
        content = await self._complete(
            [{"role": "system", "content": _SYSTEM_PROMPT}, {"role": "user", "content": prompt}],
            json_format=True,
            temperature=0.3,
            max_tokens=1500,
        )
        try:
            data = json.loads(content)
        except ValueError as exc:
            raise ProviderRejectionError(SOURCE, "Model returned invalid JSON", code="PARSE_ERROR") from exc
        if not isinstance(data, dict) or not data:
            raise EmptyResultError(SOURCE, f"Model had no answer for {query!r}")
        return data

    async def fetch(self, intent: "QueryIntent") -> Dict[str, Any]:
        template = _KIND_PROMPTS.get(intent.kind.value, _KIND_PROMPTS["keyword"])
        query = intent.params.get("term") or intent.params.get("matched") or intent.entity
        return await self._complete_object(template.format(q=query, lang=intent.language), query)

    async def fetch_transfers(self, intent: "QueryIntent") -> List[Dict[str, Any]]:
        subject = intent.params.get("subject")
        scope = f' involving "{subject}"' if subject else ""
        data = await self._complete_object(_TRANSFERS_PROMPT.format(scope=scope), subject or "transfers")
        transfers = [
            dict(t, source=t.get("source") or SOURCE, verified=False)
            for t in data.get("transfers") or []
            if isinstance(t, dict) and t.get("player")
        ]
        if not transfers:
            raise EmptyResultError(SOURCE, f"Model listed no transfers{scope}")
        return sorted(transfers, key=lambda t: str(t.get("date") or ""), reverse=True)

    async def daily_fact(self, day_ordinal: int) -> Dict[str, Any]:
        content = await self._complete(
            [
                {
                    "role": "system",
                    "content": "You are a football encyclopedia. Give one interesting, verified football fact under 200 characters.",
                },
                {"role": "user", "content": "Give me today's football fun fact as plain text with no formatting."},
            ],
            json_format=False,
            temperature=0.7,
            max_tokens=150,
        )
        text = " ".join(_MARKDOWN_RE.sub("", content).split())
        if not text:
            raise EmptyResultError(SOURCE, "Model returned an empty fact")
        return {
            "title": "Football Fact of the Day",
            "description": text,
            "category": FACT_CATEGORIES[day_ordinal % len(FACT_CATEGORIES)],
            "source": SOURCE,
        }
