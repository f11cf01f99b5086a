# file: jobscan/lookup/adapter.py
"""
Domain-age lookup interface.

Lookups are async and cancellable. A failed lookup is not an error: it returns
a `DomainAge` with no creation date, which the scoring engine treats as
"unknown age" (no bonus).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


def age_in_days(created: datetime, *, now: datetime) -> int:
    """Whole days between `created` and `now` (never negative)."""

    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return max(0, (now - created).days)


@dataclass(frozen=True, slots=True)
class DomainAge:
    """
    Registration data for a domain.

    Fields:
        domain: Normalized (lower-case) domain that was looked up.
        created: Registration timestamp, if known.
        age_days: Whole days since `created`, if known.
        registrar: Registrar name, if the registry exposed one.
    """

    domain: str
    created: datetime | None = None
    age_days: int | None = None
    registrar: str | None = None

    @property
    def known(self) -> bool:
        return self.age_days is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "created": self.created.isoformat() if self.created else None,
            "age_days": self.age_days,
            "registrar": self.registrar,
        }


class DomainAgeLookup(ABC):
    """Base interface for domain-age lookups."""

    name: str

    @abstractmethod
    async def lookup(self, domain: str) -> DomainAge:
        """
        Return registration data for `domain`.

        Implementations must not raise for lookup failures; they return an
        unknown `DomainAge` instead.
        """

        raise NotImplementedError
