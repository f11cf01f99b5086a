# file: jobscan/sources/__init__.py
"""Text sources that feed the scoring engine."""

from __future__ import annotations

from .html import html_to_text
from .ocr import OcrAdapter, OcrResult, ocr_result_from_raw
from .page import fetch_page_text

__all__ = [
    "html_to_text",
    "OcrAdapter",
    "OcrResult",
    "ocr_result_from_raw",
    "fetch_page_text",
]
