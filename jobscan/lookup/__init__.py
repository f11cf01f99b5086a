# file: jobscan/lookup/__init__.py
"""Domain-age lookups for jobscan."""

from __future__ import annotations

from .adapter import DomainAge, DomainAgeLookup, age_in_days, now_utc
from .rdap import (
    DEFAULT_RDAP_BASE_URL,
    RdapDomainAgeLookup,
    normalize_domain,
    parse_created,
    parse_registrar,
)

__all__ = [
    "DomainAge",
    "DomainAgeLookup",
    "age_in_days",
    "now_utc",
    "DEFAULT_RDAP_BASE_URL",
    "RdapDomainAgeLookup",
    "normalize_domain",
    "parse_created",
    "parse_registrar",
]
