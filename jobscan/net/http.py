# file: jobscan/net/http.py
"""
Async HTTP utilities (httpx) with retries, exponential backoff, and per-host rate limiting.

Used by the collaborators that feed the scoring engine (RDAP domain-age lookups
and job-page fetches). The engine itself never performs network I/O.
"""

from __future__ import annotations

import asyncio
import random
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, cast
from urllib.parse import urlparse

import httpx

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def _host_for_url(url: str) -> str:
    parsed = urlparse(url)
    return parsed.netloc or parsed.path


class PerHostRateLimiter:
    """
    Enforce a minimum interval between requests to the same host.

    RDAP bootstrap servers throttle aggressively, so lookups for many postings
    share one limiter.
    """

    def __init__(self, *, rate_per_second: float = 1.0) -> None:
        self._min_interval = 0.0 if rate_per_second <= 0 else (1.0 / rate_per_second)
        self._locks: dict[str, asyncio.Lock] = {}
        self._next_allowed: dict[str, float] = {}

    async def wait(self, host: str) -> None:
        if self._min_interval <= 0:
            return

        lock = self._locks.setdefault(host, asyncio.Lock())
        async with lock:
            now = time.monotonic()
            next_allowed = self._next_allowed.get(host, now)
            if next_allowed > now:
                await asyncio.sleep(next_allowed - now)
                now = next_allowed
            self._next_allowed[host] = now + self._min_interval


@dataclass(frozen=True, slots=True)
class HttpClientConfig:
    timeout_seconds: float = 12.0
    max_retries: int = 1
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 4.0
    rate_limit_per_host_per_second: float = 2.0
    user_agent: str = "jobscan/0.1 (+https://example.invalid; job-scam checker)"


@asynccontextmanager
async def build_async_client(
    config: HttpClientConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> AsyncIterator[httpx.AsyncClient]:
    timeout = httpx.Timeout(config.timeout_seconds)
    headers = {"User-Agent": config.user_agent}
    async with httpx.AsyncClient(
        timeout=timeout, headers=headers, follow_redirects=True, transport=transport
    ) as client:
        yield client


def _compute_backoff(attempt: int, *, base: float, cap: float) -> float:
    raw = min(cap, base * (2**attempt))
    return float(raw * random.uniform(0.8, 1.2))


def _retry_after(resp: httpx.Response, fallback: float) -> float:
    value = resp.headers.get("Retry-After")
    if value is None:
        return fallback
    try:
        return max(0.0, float(value))
    except ValueError:
        return fallback


async def request_with_retries(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    config: HttpClientConfig,
    rate_limiter: PerHostRateLimiter | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """
    Make an HTTP request with retries and backoff.

    Retries on transport errors and on 429/5xx responses. Any other error
    status raises `httpx.HTTPStatusError` immediately.
    """

    if config.max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    host = _host_for_url(url)

    for attempt in range(config.max_retries + 1):
        if rate_limiter is not None:
            await rate_limiter.wait(host)

        backoff = _compute_backoff(
            attempt, base=config.backoff_base_seconds, cap=config.backoff_max_seconds
        )
        try:
            resp = await client.request(method, url, **kwargs)
        except asyncio.CancelledError:
            raise
        except httpx.TransportError:
            if attempt >= config.max_retries:
                raise
            await asyncio.sleep(backoff)
            continue

        if resp.status_code in RETRYABLE_STATUS and attempt < config.max_retries:
            # Drain the body so the connection can be reused.
            await resp.aread()
            await asyncio.sleep(_retry_after(resp, backoff))
            continue

        resp.raise_for_status()
        return resp

    raise RuntimeError("request_with_retries: exhausted attempts without a response")


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    config: HttpClientConfig,
    rate_limiter: PerHostRateLimiter | None = None,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """GET a JSON object from a URL using `request_with_retries`."""

    resp = await request_with_retries(
        client, "GET", url, config=config, rate_limiter=rate_limiter, params=params
    )
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object at the top level")
    return cast(dict[str, Any], data)


async def get_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    config: HttpClientConfig,
    rate_limiter: PerHostRateLimiter | None = None,
) -> str:
    """GET a response body as text using `request_with_retries`."""

    resp = await request_with_retries(client, "GET", url, config=config, rate_limiter=rate_limiter)
    return resp.text
