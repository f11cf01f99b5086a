# file: jobscan/__init__.py
"""
jobscan - heuristic scam-risk scoring for job postings.

This package provides a deterministic rule-based scoring engine plus the thin
collaborators around it: domain-age lookups over RDAP, page/OCR text sources,
report export, a CLI and an optional HTTP adapter.
"""

from __future__ import annotations

from jobscan.core import AnalysisInput, AnalysisResult, analyze, explain

__all__ = ["__version__", "AnalysisInput", "AnalysisResult", "analyze", "explain"]

__version__ = "0.1.0"
