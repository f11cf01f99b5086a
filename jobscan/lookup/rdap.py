# file: jobscan/lookup/rdap.py
"""
RDAP domain-age lookup.

Uses the public rdap.org bootstrap service, which redirects to the authoritative
registry. No API key is required.

Reference:
    https://about.rdap.org/
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable
from urllib.parse import quote

import httpx

from jobscan.core.domain import hostname_for
from jobscan.lookup.adapter import DomainAge, DomainAgeLookup, age_in_days, now_utc
from jobscan.net.http import HttpClientConfig, PerHostRateLimiter, get_json

logger = logging.getLogger(__name__)

DEFAULT_RDAP_BASE_URL = "https://rdap.org/domain/"

_REGISTRATION_ACTIONS = ("registration", "registered", "create", "created")


def normalize_domain(value: str) -> str | None:
    """Return the registrable-looking host for a URL or domain, without `www.`."""

    host = hostname_for(value)
    if not host or "." not in host:
        return None
    if host.startswith("www.") and host.count(".") >= 2:
        host = host[4:]
    return host


def parse_rdap_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_created(data: dict[str, Any]) -> datetime | None:
    """
    Find the registration date in an RDAP domain object.

    Prefers an explicit registration event, then the earliest dated event, then
    a top-level `created` field that some servers add.
    """

    events = data.get("events")
    if isinstance(events, list):
        dated: list[datetime] = []
        for ev in events:
            if not isinstance(ev, dict):
                continue
            when = parse_rdap_datetime(ev.get("eventDate"))
            if when is None:
                continue
            action = str(ev.get("eventAction") or "").strip().lower()
            if action in _REGISTRATION_ACTIONS:
                return when
            dated.append(when)
        if dated:
            return min(dated)

    return parse_rdap_datetime(data.get("created"))


def _vcard_fn(vcard_array: Any) -> str | None:
    # ["vcard", [["version", {}, "text", "4.0"], ["fn", {}, "text", "Example Registrar"]]]
    if not isinstance(vcard_array, list) or len(vcard_array) < 2:
        return None
    props = vcard_array[1]
    if not isinstance(props, list):
        return None
    for prop in props:
        if isinstance(prop, list) and len(prop) >= 4 and prop[0] == "fn":
            return str(prop[3]) or None
    return None


def _iter_entities(entities: Any) -> Iterable[dict[str, Any]]:
    if not isinstance(entities, list):
        return
    for ent in entities:
        if isinstance(ent, dict):
            yield ent


def parse_registrar(data: dict[str, Any]) -> str | None:
    registrar = data.get("registrar")
    if isinstance(registrar, dict) and registrar.get("name"):
        return str(registrar["name"])

    for ent in _iter_entities(data.get("entities")):
        roles = ent.get("roles")
        if isinstance(roles, list) and "registrar" in roles:
            name = _vcard_fn(ent.get("vcardArray"))
            if name:
                return name
    return None


class RdapDomainAgeLookup(DomainAgeLookup):
    name = "rdap"

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        http_config: HttpClientConfig,
        base_url: str = DEFAULT_RDAP_BASE_URL,
        rate_limiter: PerHostRateLimiter | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._client = client
        self._http_config = http_config
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._rate_limiter = rate_limiter
        self._clock = clock

    async def _fetch(self, domain: str) -> dict[str, Any]:
        url = f"{self._base_url}{quote(domain)}"
        # Bound the whole exchange, retries included.
        budget = self._http_config.timeout_seconds * (self._http_config.max_retries + 1)
        return await asyncio.wait_for(
            get_json(
                self._client, url, config=self._http_config, rate_limiter=self._rate_limiter
            ),
            timeout=budget,
        )

    async def lookup(self, domain: str) -> DomainAge:
        normalized = normalize_domain(domain)
        if normalized is None:
            logger.info("Skipping RDAP lookup for unparseable domain %r", domain)
            return DomainAge(domain=(domain or "").strip().lower())

        try:
            data = await self._fetch(normalized)
        except asyncio.CancelledError:
            raise
        except (httpx.HTTPError, ValueError, asyncio.TimeoutError) as exc:
            logger.warning("RDAP lookup failed for %s: %s: %s", normalized, type(exc).__name__, exc)
            return DomainAge(domain=normalized)

        created = parse_created(data)
        registrar = parse_registrar(data)
        if created is None:
            logger.info("RDAP record for %s has no registration date", normalized)
            return DomainAge(domain=normalized, registrar=registrar)

        return DomainAge(
            domain=normalized,
            created=created,
            age_days=age_in_days(created, now=self._clock()),
            registrar=registrar,
        )
