# file: jobscan/cache.py
"""
TTL caches for collaborator results.

Two backends share the same `get`/`set` protocol:

- `SQLiteTTLCache`: persistent, used for RDAP domain-age lookups from the CLI.
- `MemoryTTLCache`: bounded in-process LRU, suitable for OCR results in a server.

Caches are always constructed by the caller and injected into the wrappers
below; nothing in jobscan keeps a module-level cache.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import sqlite3
import threading
import time
from collections import OrderedDict
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Protocol

from jobscan.lookup.adapter import DomainAge, DomainAgeLookup, age_in_days, now_utc
from jobscan.sources.ocr import OcrAdapter, OcrResult

logger = logging.getLogger(__name__)


def make_cache_key(namespace: str, *parts: str) -> str:
    """
    Make a stable cache key.

    Keys are hashed to keep them short even for long inputs.
    """

    raw = "|".join((namespace, *parts)).encode("utf-8")
    digest = hashlib.sha256(raw).hexdigest()
    return f"{namespace}:{digest}"


class KeyValueCache(Protocol):
    def get(self, key: str) -> Any | None:  # pragma: no cover - protocol
        raise NotImplementedError

    def set(self, key: str, value: Any, *, ttl_seconds: int) -> None:  # pragma: no cover
        raise NotImplementedError


class SQLiteTTLCache:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        return conn

    def _init_db(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS cache (
                    key TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL,
                    expires_at INTEGER NOT NULL
                );
                """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_cache_expires_at ON cache(expires_at);")

    def get(self, key: str) -> Any | None:
        now = int(time.time())
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value_json, expires_at FROM cache WHERE key = ?", (key,)
            ).fetchone()
            if row is None:
                return None
            value_json, expires_at = row
            if int(expires_at) <= now:
                conn.execute("DELETE FROM cache WHERE key = ?", (key,))
                return None
            return json.loads(value_json)

    def set(self, key: str, value: Any, *, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        expires_at = int(time.time()) + int(ttl_seconds)
        value_json = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO cache(key, value_json, expires_at) VALUES (?, ?, ?)",
                (key, value_json, expires_at),
            )

    def delete_expired(self) -> int:
        now = int(time.time())
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM cache WHERE expires_at <= ?", (now,))
            return int(cur.rowcount or 0)


class MemoryTTLCache:
    """
    In-process TTL cache with least-recently-used eviction.

    Args:
        max_entries: Upper bound on stored entries; the least recently used
            entry is evicted first.
        clock: Monotonic time source (seconds), injectable for tests.
    """

    def __init__(
        self, *, max_entries: int = 256, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._items: OrderedDict[str, tuple[float, Any]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: str) -> Any | None:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            expires_at, value = item
            if expires_at <= self._clock():
                del self._items[key]
                return None
            self._items.move_to_end(key)
            return value

    def set(self, key: str, value: Any, *, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        with self._lock:
            self._items[key] = (self._clock() + ttl_seconds, value)
            self._items.move_to_end(key)
            while len(self._items) > self.max_entries:
                self._items.popitem(last=False)

    def delete_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [k for k, (exp, _) in self._items.items() if exp <= now]
            for k in expired:
                del self._items[k]
            return len(expired)


class CachedDomainAgeLookup(DomainAgeLookup):
    """
    Lookup wrapper that caches known registration dates.

    Only successful lookups are cached, so a transient RDAP failure is retried
    next time. Age is recomputed from the cached creation date on every hit.
    """

    def __init__(
        self,
        lookup: DomainAgeLookup,
        *,
        cache: KeyValueCache,
        ttl_seconds: int = 86400,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._lookup = lookup
        self._cache = cache
        self._ttl = ttl_seconds
        self._clock = clock
        self.name = getattr(lookup, "name", lookup.__class__.__name__)

    async def lookup(self, domain: str) -> DomainAge:
        key = make_cache_key("domain_age", self.name, domain.strip().lower())
        cached = await asyncio.to_thread(self._cache.get, key)
        if isinstance(cached, dict) and cached.get("created"):
            try:
                created = datetime.fromisoformat(str(cached["created"]))
            except ValueError:
                created = None
            if created is not None:
                logger.debug("domain age cache hit for %s", domain)
                return DomainAge(
                    domain=str(cached.get("domain") or domain),
                    created=created,
                    age_days=age_in_days(created, now=self._clock()),
                    registrar=cached.get("registrar"),
                )

        result = await self._lookup.lookup(domain)
        if result.known:
            await asyncio.to_thread(self._cache.set, key, result.to_dict(), ttl_seconds=self._ttl)
        return result


class CachedOcrAdapter(OcrAdapter):
    """OCR wrapper keyed by a hash of the image bytes."""

    def __init__(self, adapter: OcrAdapter, *, cache: KeyValueCache, ttl_seconds: int) -> None:
        self._adapter = adapter
        self._cache = cache
        self._ttl = ttl_seconds
        self.name = getattr(adapter, "name", adapter.__class__.__name__)

    async def extract(self, image: bytes) -> OcrResult:
        key = make_cache_key("ocr", self.name, hashlib.sha256(image).hexdigest())
        cached = await asyncio.to_thread(self._cache.get, key)
        if isinstance(cached, dict):
            logger.info("OCR cache hit", extra={"cache_key": key})
            return OcrResult.from_dict(cached)

        result = await self._adapter.extract(image)
        # Empty results are usually engine failures; don't pin them.
        if result.text:
            await asyncio.to_thread(self._cache.set, key, result.to_dict(), ttl_seconds=self._ttl)
        return result
