# file: jobscan/core/__init__.py
"""Deterministic job-scam scoring engine."""

from __future__ import annotations

from .detect import BASELINES, MatchedSignal, baseline_for_label, detect
from .domain import (
    DOMAIN_LABELS,
    SUSPICIOUS_TLDS,
    age_bonus,
    evaluate_domain,
    extract_tld,
    hostname_for,
)
from .explain import explain
from .normalize import NormalizedText, extract_urls, normalize, normalize_text
from .rules import RULE_LABELS, RULES, RULESET_VERSION, Category, SignalRule
from .score import (
    AnalysisInput,
    AnalysisResult,
    Verdict,
    aggregate,
    analyze,
    verdict_for_score,
)

__all__ = [
    "BASELINES",
    "MatchedSignal",
    "baseline_for_label",
    "detect",
    "DOMAIN_LABELS",
    "SUSPICIOUS_TLDS",
    "age_bonus",
    "evaluate_domain",
    "extract_tld",
    "hostname_for",
    "explain",
    "NormalizedText",
    "extract_urls",
    "normalize",
    "normalize_text",
    "RULE_LABELS",
    "RULES",
    "RULESET_VERSION",
    "Category",
    "SignalRule",
    "AnalysisInput",
    "AnalysisResult",
    "Verdict",
    "aggregate",
    "analyze",
    "verdict_for_score",
]
