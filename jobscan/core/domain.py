# file: jobscan/core/domain.py
"""
Domain risk signals.

Two kinds of evidence are produced here:

- a throwaway-looking top-level domain in any referenced URL
- a registration-age bonus, when the caller already knows the domain's age

The age itself always comes from outside (see `jobscan.lookup`); nothing in
this module touches the network.
"""

from __future__ import annotations

import math
from typing import Iterable
from urllib.parse import urlparse

from jobscan.core.detect import MatchedSignal

SUSPICIOUS_TLDS: frozenset[str] = frozenset(
    {
        "top",
        "xyz",
        "live",
        "shop",
        "work",
        "site",
        "click",
        "buzz",
        "win",
        "icu",
        "rest",
        "online",
        "loan",
        "gq",
        "tk",
        "ml",
        "cf",
        "ga",
    }
)

SUSPICIOUS_TLD_WEIGHT = 15

# (exclusive upper bound in days, bonus, label); checked in order.
AGE_STEPS: tuple[tuple[int, int, str], ...] = (
    (90, 25, "domain registered under 90 days ago"),
    (180, 15, "domain registered under 180 days ago"),
    (365, 8, "domain registered under a year ago"),
)

DOMAIN_LABELS: frozenset[str] = frozenset(
    {f"suspicious tld .{tld}" for tld in SUSPICIOUS_TLDS} | {label for _, _, label in AGE_STEPS}
)


def hostname_for(url: str) -> str | None:
    """Return the lower-cased hostname of a URL or bare host, or None if unparseable."""

    s = (url or "").strip()
    if not s:
        return None
    if "://" not in s:
        s = f"https://{s}"
    try:
        host = urlparse(s).hostname
    except ValueError:
        return None
    return host.rstrip(".") if host else None


def extract_tld(url: str) -> str | None:
    host = hostname_for(url)
    if not host or "." not in host:
        return None
    tld = host.rsplit(".", 1)[1]
    return tld or None


def _valid_age(days: object) -> float | None:
    if isinstance(days, bool) or not isinstance(days, (int, float)):
        return None
    if not math.isfinite(days) or days < 0:
        return None
    return float(days)


def _age_step(days: object) -> tuple[int, str] | None:
    age = _valid_age(days)
    if age is None:
        return None
    for bound, bonus, label in AGE_STEPS:
        if age < bound:
            return bonus, label
    return None


def age_bonus(days: object) -> int:
    """
    Score bonus for a domain of the given age in days.

    Non-increasing in age; zero for domains a year or older and for unknown
    (None, negative, or non-finite) ages.
    """

    step = _age_step(days)
    return step[0] if step else 0


def evaluate_domain(
    urls: Iterable[str], domain_age_days: float | None = None
) -> list[MatchedSignal]:
    """
    Return domain signals for the referenced URLs and optional domain age.

    Each suspicious TLD is reported once per call. Malformed URLs are skipped.
    """

    signals: list[MatchedSignal] = []
    seen: set[str] = set()
    for url in urls:
        tld = extract_tld(url)
        if tld is None or tld not in SUSPICIOUS_TLDS or tld in seen:
            continue
        seen.add(tld)
        signals.append(
            MatchedSignal(
                rule_id=f"tld_{tld}",
                label=f"suspicious tld .{tld}",
                weight=SUSPICIOUS_TLD_WEIGHT,
                category="domain",
            )
        )

    step = _age_step(domain_age_days)
    if step is not None:
        bonus, label = step
        signals.append(
            MatchedSignal(rule_id="domain_age", label=label, weight=bonus, category="domain")
        )
    return signals
