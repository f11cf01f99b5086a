# file: jobscan/core/detect.py
"""Rule evaluation over normalized text."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from jobscan.core.rules import RULES, Category, SignalRule

logger = logging.getLogger(__name__)

# Starting score for a caller-supplied manual risk label.
BASELINES: dict[str, int] = {
    "low": 10,
    "medium": 35,
    "high": 60,
}


@dataclass(frozen=True, slots=True)
class MatchedSignal:
    rule_id: str
    label: str
    weight: int
    category: Category

    def to_dict(self) -> dict[str, object]:
        return {
            "rule_id": self.rule_id,
            "label": self.label,
            "weight": self.weight,
            "category": self.category,
        }


def detect(normalized_text: str, *, rules: Sequence[SignalRule] = RULES) -> list[MatchedSignal]:
    """
    Run every rule against `normalized_text` and return the ones that fired.

    Each rule contributes at most once no matter how often its pattern occurs.
    Output order follows rule order.
    """

    if not normalized_text:
        return []

    fired: list[MatchedSignal] = []
    for rule in rules:
        if rule.matches(normalized_text):
            fired.append(
                MatchedSignal(
                    rule_id=rule.id, label=rule.label, weight=rule.weight, category=rule.category
                )
            )
    logger.debug("rules fired: %s", [s.rule_id for s in fired])
    return fired


def baseline_for_label(label: str | None) -> int:
    """
    Return the baseline score for a prior manual risk label.

    `None` means no label was given. Unrecognized labels fall back to "low".
    """

    if label is None:
        return 0
    return BASELINES.get(str(label).strip().lower(), BASELINES["low"])
