"""
Tiered cache for routed lookups and upstream responses.

Memory tier is always present; an optional JSON file store persists entries
across restarts. Losing or corrupting the store degrades to a cold cache and
never raises.
"""
from __future__ import annotations

import json
import os
import tempfile
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .config import setup_logger
from .constants import (
    CACHE_NAMESPACE,
    CACHE_SCHEMA_VERSION,
    FACT_CACHE_TTL,
    IMAGE_CACHE_TTL,
    MATCHES_CACHE_TTL,
    PROVIDER_CACHE,
    PROXY_CACHE_TTL,
    SEARCH_CACHE_TTL,
    SQUAD_CACHE_TTL,
    TRANSFERS_CACHE_TTL,
)
from .errors import sanitize_error_message

logger = setup_logger(__name__)


class CacheDomain(str, Enum):
    SQUAD = "squad"
    IMAGE = "image"
    MATCHES = "matches"
    TRANSLATION = "translation"
    FACT = "fact"
    SEARCH = "search"
    PROXY = "proxy"
    TRANSFERS = "transfers"


_DOMAIN_TTLS: Dict[CacheDomain, Optional[float]] = {
    CacheDomain.SQUAD: SQUAD_CACHE_TTL,
    CacheDomain.IMAGE: IMAGE_CACHE_TTL,
    CacheDomain.MATCHES: MATCHES_CACHE_TTL,
    CacheDomain.TRANSLATION: None,
    CacheDomain.FACT: FACT_CACHE_TTL,
    CacheDomain.SEARCH: SEARCH_CACHE_TTL,
    CacheDomain.PROXY: PROXY_CACHE_TTL,
    CacheDomain.TRANSFERS: TRANSFERS_CACHE_TTL,
}


def ttl_for(domain: CacheDomain) -> Optional[float]:
    """TTL in seconds for a cache domain; None means the entry never expires."""
    return _DOMAIN_TTLS[CacheDomain(domain)]


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    created_at: float
    ttl: Optional[float]
    source: str = PROVIDER_CACHE

    def is_valid(self, now: float) -> bool:
        if self.ttl is None:
            return True
        return now - self.created_at <= self.ttl

    def to_record(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "payload": self.payload,
            "created_at": self.created_at,
            "ttl": self.ttl,
            "source": self.source,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CacheEntry":
        ttl = record.get("ttl")
        return cls(
            key=str(record["key"]),
            payload=record.get("payload"),
            created_at=float(record["created_at"]),
            ttl=None if ttl is None else float(ttl),
            source=str(record.get("source") or PROVIDER_CACHE),
        )


class JsonFileStore:
    """
    Namespaced key/value records persisted to a single JSON file.

    Every failure (unreadable file, corrupt JSON, unserializable payload,
    full disk) is logged and swallowed; the caller sees an empty or
    partially populated store, never an exception.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._records: Optional[Dict[str, Dict[str, Any]]] = None
        self.errors = 0

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if self._records is not None:
            return self._records
        records: Dict[str, Dict[str, Any]] = {}
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf-8") as fh:
                    raw = json.load(fh)
                if isinstance(raw, dict):
                    records = {k: v for k, v in raw.items() if isinstance(v, dict)}
                else:
                    logger.warning("Cache store %s is not a JSON object; starting empty", self.path)
                    self.errors += 1
            except (OSError, ValueError) as exc:
                logger.warning("Cache store %s unreadable (%s); starting empty", self.path, sanitize_error_message(exc))
                self.errors += 1
        self._records = records
        return records

    def _flush(self) -> None:
        records = self._load()
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            payload = json.dumps(records, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning("Cache store serialization failed: %s", exc)
            self.errors += 1
            return
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".cache-", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning("Cache store write failed for %s: %s", self.path, exc)
            self.errors += 1

    def get(self, stored_key: str) -> Optional[Dict[str, Any]]:
        return self._load().get(stored_key)

    def set(self, stored_key: str, record: Dict[str, Any]) -> None:
        try:
            json.dumps(record)
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping persistence of %s: payload not JSON-serializable (%s)", stored_key, exc)
            self.errors += 1
            return
        self._load()[stored_key] = record
        self._flush()

    def delete(self, stored_key: str) -> bool:
        removed = self._load().pop(stored_key, None) is not None
        if removed:
            self._flush()
        return removed

    def delete_many(self, stored_keys) -> int:
        records = self._load()
        removed = sum(1 for k in list(stored_keys) if records.pop(k, None) is not None)
        if removed:
            self._flush()
        return removed

    def keys(self):
        return list(self._load().keys())

    def prune_foreign(self, prefix: str) -> int:
        """Drop records written under another namespace or schema version."""
        stale = [k for k in self._load() if not k.startswith(prefix)]
        return self.delete_many(stale)

    def clear(self) -> None:
        self._records = {}
        self._flush()


class TieredCache:
    """Memory tier in front of an optional JsonFileStore."""

    def __init__(
        self,
        store: Optional[JsonFileStore] = None,
        clock: Callable[[], float] = time.time,
        namespace: str = CACHE_NAMESPACE,
        schema_version: int = CACHE_SCHEMA_VERSION,
    ) -> None:
        self._memory: Dict[str, CacheEntry] = {}
        self._store = store
        self._clock = clock
        self._prefix = f"{namespace}:v{schema_version}:"
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._expired = 0
        self._writes = 0
        if self._store is not None:
            dropped = self._store.prune_foreign(self._prefix)
            if dropped:
                logger.info("Dropped %d cache records from an older schema", dropped)

    def _stored_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _read_store(self, stored_key: str) -> Optional[CacheEntry]:
        if self._store is None:
            return None
        record = self._store.get(stored_key)
        if record is None:
            return None
        try:
            return CacheEntry.from_record(record)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding malformed cache record %s: %s", stored_key, exc)
            self._store.delete(stored_key)
            return None

    def get(self, key: str) -> Optional[CacheEntry]:
        stored_key = self._stored_key(key)
        now = self._clock()
        with self._lock:
            entry = self._memory.get(stored_key)
            promoted = False
            if entry is None:
                entry = self._read_store(stored_key)
                promoted = entry is not None
            if entry is None:
                self._misses += 1
                return None
            if not entry.is_valid(now):
                self._memory.pop(stored_key, None)
                if self._store is not None:
                    self._store.delete(stored_key)
                self._expired += 1
                self._misses += 1
                return None
            if promoted:
                self._memory[stored_key] = entry
            self._hits += 1
            return entry

    def set(self, key: str, payload: Any, ttl: Optional[float], source: str = PROVIDER_CACHE) -> CacheEntry:
        """Store `payload` under `key`, replacing any previous entry."""
        stored_key = self._stored_key(key)
        entry = CacheEntry(key=key, payload=payload, created_at=self._clock(), ttl=ttl, source=str(source))
        with self._lock:
            self._memory[stored_key] = entry
            self._writes += 1
            if self._store is not None:
                self._store.set(stored_key, entry.to_record())
        return entry

    def invalidate(self, prefix: str) -> int:
        """Remove every entry whose logical key starts with `prefix`; returns how many."""
        stored_prefix = self._stored_key(prefix)
        with self._lock:
            doomed = {k for k in self._memory if k.startswith(stored_prefix)}
            for k in doomed:
                del self._memory[k]
            if self._store is not None:
                store_doomed = [k for k in self._store.keys() if k.startswith(stored_prefix)]
                self._store.delete_many(store_doomed)
                doomed.update(store_doomed)
        if doomed:
            logger.info("Invalidated %d cache entries with prefix %r", len(doomed), prefix)
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._memory.clear()
            if self._store is not None:
                self._store.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "hits": self._hits,
                "misses": self._misses,
                "expired": self._expired,
                "writes": self._writes,
                "hit_rate": round(self._hits / total, 4) if total else 0.0,
                "memory_entries": len(self._memory),
                "store_entries": len(self._store.keys()) if self._store is not None else None,
                "store_errors": self._store.errors if self._store is not None else 0,
            }
