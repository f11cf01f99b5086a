# file: tests/test_domain.py
from __future__ import annotations

import pytest

from jobscan.core.domain import (
    SUSPICIOUS_TLD_WEIGHT,
    age_bonus,
    evaluate_domain,
    extract_tld,
    hostname_for,
)


def test_extract_tld() -> None:
    assert extract_tld("http://job-offer123.xyz/apply") == "xyz"
    assert extract_tld("https://Careers.Example.COM/jobs?id=1") == "com"
    assert extract_tld("jobs.example.top") == "top"
    assert extract_tld("localhost") is None
    assert extract_tld("http://[::1") is None
    assert extract_tld("") is None


def test_hostname_for_strips_trailing_dot() -> None:
    assert hostname_for("https://example.com./x") == "example.com"


def test_evaluate_domain_flags_suspicious_tld() -> None:
    signals = evaluate_domain(["http://job-offer123.xyz/apply"])
    assert [s.label for s in signals] == ["suspicious tld .xyz"]
    assert signals[0].weight == SUSPICIOUS_TLD_WEIGHT
    assert signals[0].category == "domain"


def test_evaluate_domain_reports_each_tld_once() -> None:
    signals = evaluate_domain(
        ["http://a.xyz/1", "http://b.xyz/2", "https://c.top", "https://example.com"]
    )
    assert [s.label for s in signals] == ["suspicious tld .xyz", "suspicious tld .top"]


def test_evaluate_domain_skips_malformed_urls() -> None:
    assert evaluate_domain(["http://[bad", "not a url at all", ""]) == []


def test_evaluate_domain_age_signal() -> None:
    signals = evaluate_domain([], domain_age_days=10)
    assert len(signals) == 1
    assert signals[0].label == "domain registered under 90 days ago"
    assert signals[0].weight == 25


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (0, 25),
        (89, 25),
        (89.9, 25),
        (90, 15),
        (179, 15),
        (180, 8),
        (364, 8),
        (365, 0),
        (10_000, 0),
    ],
)
def test_age_bonus_steps(days: float, expected: int) -> None:
    assert age_bonus(days) == expected


@pytest.mark.parametrize("days", [None, -1, float("nan"), float("inf"), True, "30"])
def test_age_bonus_unknown_ages_are_zero(days: object) -> None:
    assert age_bonus(days) == 0
    assert [s for s in evaluate_domain([], days) if s.rule_id == "domain_age"] == []  # type: ignore[arg-type]


def test_age_bonus_is_non_increasing() -> None:
    ages = list(range(0, 800, 7))
    bonuses = [age_bonus(a) for a in ages]
    assert all(a >= b for a, b in zip(bonuses, bonuses[1:]))
