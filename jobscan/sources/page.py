# file: jobscan/sources/page.py
"""Fetch a job posting page and reduce it to text for scoring."""

from __future__ import annotations

import logging

import httpx

from jobscan.net.http import HttpClientConfig, PerHostRateLimiter, get_text
from jobscan.sources.html import html_to_text

logger = logging.getLogger(__name__)


async def fetch_page_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    config: HttpClientConfig,
    rate_limiter: PerHostRateLimiter | None = None,
) -> str:
    """
    Download `url` and return its visible text.

    Network and HTTP errors propagate; the caller decides whether to fall back
    to the text it already has.
    """

    logger.info("Fetching posting page %s", url)
    body = await get_text(client, url, config=config, rate_limiter=rate_limiter)
    text = html_to_text(body)
    logger.debug("Fetched %d characters of text from %s", len(text), url)
    return text
