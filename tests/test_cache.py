# file: tests/test_cache.py
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from jobscan.cache import (
    CachedDomainAgeLookup,
    CachedOcrAdapter,
    MemoryTTLCache,
    SQLiteTTLCache,
    make_cache_key,
)
from jobscan.lookup.adapter import DomainAge, DomainAgeLookup
from jobscan.sources.ocr import OcrAdapter, OcrResult

CREATED = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_sqlite_ttl_cache_expires(monkeypatch, tmp_path: Path) -> None:
    cache = SQLiteTTLCache(tmp_path / "cache.sqlite3")
    key = make_cache_key("unit", "k1")

    # Freeze time for deterministic TTL behavior.
    now = 1_700_000_000
    monkeypatch.setattr("jobscan.cache.time.time", lambda: now)
    cache.set(key, {"ok": True}, ttl_seconds=10)
    assert cache.get(key) == {"ok": True}

    monkeypatch.setattr("jobscan.cache.time.time", lambda: now + 11)
    assert cache.get(key) is None


def test_sqlite_ttl_cache_delete_expired(monkeypatch, tmp_path: Path) -> None:
    cache = SQLiteTTLCache(tmp_path / "nested" / "cache.sqlite3")
    now = 1_700_000_000
    monkeypatch.setattr("jobscan.cache.time.time", lambda: now)
    cache.set("a", 1, ttl_seconds=5)
    cache.set("b", 2, ttl_seconds=50)
    cache.set("c", 3, ttl_seconds=0)

    monkeypatch.setattr("jobscan.cache.time.time", lambda: now + 10)
    assert cache.delete_expired() == 1
    assert cache.get("b") == 2
    assert cache.get("c") is None


def test_make_cache_key_is_stable_and_namespaced() -> None:
    assert make_cache_key("ns", "a", "b") == make_cache_key("ns", "a", "b")
    assert make_cache_key("ns", "a", "b") != make_cache_key("ns", "ab")
    assert make_cache_key("ns", "a").startswith("ns:")


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_memory_cache_expires() -> None:
    clock = _Clock()
    cache = MemoryTTLCache(max_entries=4, clock=clock)
    cache.set("k", "v", ttl_seconds=10)
    assert cache.get("k") == "v"

    clock.now += 10
    assert cache.get("k") is None
    assert len(cache) == 0


def test_memory_cache_evicts_least_recently_used() -> None:
    cache = MemoryTTLCache(max_entries=2, clock=_Clock())
    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)
    assert cache.get("a") == 1  # "b" is now least recently used
    cache.set("c", 3, ttl_seconds=60)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_memory_cache_delete_expired_and_bounds() -> None:
    clock = _Clock()
    cache = MemoryTTLCache(max_entries=8, clock=clock)
    cache.set("short", 1, ttl_seconds=1)
    cache.set("long", 2, ttl_seconds=100)
    clock.now += 5
    assert cache.delete_expired() == 1
    assert len(cache) == 1

    with pytest.raises(ValueError):
        MemoryTTLCache(max_entries=0)


class _StubLookup(DomainAgeLookup):
    name = "stub"

    def __init__(self, *, known: bool = True) -> None:
        self.calls = 0
        self.known = known

    async def lookup(self, domain: str) -> DomainAge:
        self.calls += 1
        if not self.known:
            return DomainAge(domain=domain)
        return DomainAge(domain=domain, created=CREATED, age_days=1, registrar="Example Registrar")


async def test_cached_domain_age_lookup_hits_cache(tmp_path: Path) -> None:
    cache = SQLiteTTLCache(tmp_path / "cache.sqlite3")
    stub = _StubLookup()
    cached = CachedDomainAgeLookup(
        stub,
        cache=cache,
        ttl_seconds=3600,
        clock=lambda: datetime(2026, 3, 2, tzinfo=timezone.utc),
    )

    await cached.lookup("example.xyz")
    r2 = await cached.lookup("Example.XYZ")
    assert stub.calls == 1
    assert r2.created == CREATED
    assert r2.age_days == 60
    assert r2.registrar == "Example Registrar"


async def test_cached_domain_age_lookup_skips_unknown_results() -> None:
    stub = _StubLookup(known=False)
    cached = CachedDomainAgeLookup(stub, cache=MemoryTTLCache(), ttl_seconds=3600)

    r1 = await cached.lookup("example.xyz")
    await cached.lookup("example.xyz")
    assert not r1.known
    assert stub.calls == 2


class _StubOcr(OcrAdapter):
    name = "stub-ocr"

    def __init__(self, text: str) -> None:
        self.calls = 0
        self.text = text

    async def extract(self, image: bytes) -> OcrResult:
        self.calls += 1
        return OcrResult(text=self.text, confidence=91.5)


async def test_cached_ocr_adapter_hits_cache() -> None:
    stub = _StubOcr("Pay the training fee via gift card")
    cached = CachedOcrAdapter(stub, cache=MemoryTTLCache(), ttl_seconds=60)

    r1 = await cached.extract(b"\x89PNG fake image")
    r2 = await cached.extract(b"\x89PNG fake image")
    await cached.extract(b"another image")
    assert stub.calls == 2
    assert r1 == r2
    assert r2.confidence == 91.5


async def test_cached_ocr_adapter_does_not_pin_empty_text() -> None:
    stub = _StubOcr("")
    cached = CachedOcrAdapter(stub, cache=MemoryTTLCache(), ttl_seconds=60)

    await cached.extract(b"blank")
    await cached.extract(b"blank")
    assert stub.calls == 2
