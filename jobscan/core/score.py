# file: jobscan/core/score.py
"""
Score aggregation and the engine entry point.

`analyze` is a pure function of its `AnalysisInput`: no I/O, no clock, no
shared state. Everything it needs (including domain age) is passed in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Sequence

from jobscan.core.detect import MatchedSignal, baseline_for_label, detect
from jobscan.core.domain import evaluate_domain
from jobscan.core.normalize import normalize

logger = logging.getLogger(__name__)

Verdict = Literal["Low", "Medium", "High"]

MEDIUM_THRESHOLD = 30
HIGH_THRESHOLD = 60


@dataclass(frozen=True, slots=True)
class AnalysisInput:
    """
    One piece of content to score.

    Fields:
        text: Posting text (pasted, fetched and converted, or OCR output).
        url: Optional URL the posting came from.
        domain_age_days: Optional registration age of the URL's domain.
        prior_risk: Optional manual risk label ("low", "medium", "high").
    """

    text: str
    url: str | None = None
    domain_age_days: float | None = None
    prior_risk: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "text": self.text,
            "url": self.url,
            "domain_age_days": self.domain_age_days,
            "prior_risk": self.prior_risk,
        }


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    score: int
    verdict: Verdict
    flags: tuple[str, ...]
    raw_score: int
    signals: tuple[MatchedSignal, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "score": self.score,
            "verdict": self.verdict,
            "flags": list(self.flags),
            "raw_score": self.raw_score,
            "breakdown": [s.to_dict() for s in self.signals],
        }


def _clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def verdict_for_score(score: int) -> Verdict:
    """Map a clamped score to its tier; boundary scores go to the higher tier."""

    if score >= HIGH_THRESHOLD:
        return "High"
    if score >= MEDIUM_THRESHOLD:
        return "Medium"
    return "Low"


def aggregate(signals: Sequence[MatchedSignal], baseline: int = 0) -> AnalysisResult:
    """
    Combine fired signals and a baseline into an `AnalysisResult`.

    The baseline counts toward the score but is not reported as a flag.
    """

    raw_score = int(baseline) + sum(s.weight for s in signals)
    score = _clamp(raw_score, 0, 100)

    flags: list[str] = []
    for s in signals:
        if s.label not in flags:
            flags.append(s.label)

    return AnalysisResult(
        score=score,
        verdict=verdict_for_score(score),
        flags=tuple(flags),
        raw_score=raw_score,
        signals=tuple(signals),
    )


def analyze(data: AnalysisInput) -> AnalysisResult:
    """Score one `AnalysisInput`."""

    normalized = normalize(data.text)
    urls = list(normalized.urls)
    if data.url and data.url not in urls:
        urls.append(data.url)

    signals = detect(normalized.normalized_text)
    signals.extend(evaluate_domain(urls, data.domain_age_days))
    result = aggregate(signals, baseline_for_label(data.prior_risk))
    logger.debug("analysis score=%d raw=%d flags=%s", result.score, result.raw_score, result.flags)
    return result
