# file: jobscan/core/explain.py
"""Plain-language rationale for an `AnalysisResult`."""

from __future__ import annotations

from jobscan.core.score import AnalysisResult

NO_SIGNALS = "No obvious scam signals were detected."
RECOMMENDATION = (
    "Verify the company's identity and contact it through its official channels "
    "before sharing personal details or sending money."
)


def explain(result: AnalysisResult) -> str:
    if not result.flags:
        return NO_SIGNALS
    return f"Risk signals found: {', '.join(result.flags)}. {RECOMMENDATION}"
