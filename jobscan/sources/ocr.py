# file: jobscan/sources/ocr.py
"""
OCR adapter boundary.

jobscan does not ship an OCR engine. Integrations implement `OcrAdapter` and
convert whatever their engine returns with `ocr_result_from_raw`, so the
scoring engine only ever sees plain text.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class OcrResult:
    text: str
    confidence: float | None = None
    warning: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "confidence": self.confidence, "warning": self.warning}

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "OcrResult":
        return ocr_result_from_raw(obj)


def _as_confidence(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def ocr_result_from_raw(raw: Mapping[str, Any]) -> OcrResult:
    """
    Normalize an engine-specific OCR payload.

    Accepts `{"text": ..., "confidence": ...}` or the tesseract-style
    `{"text": ..., "words": [{"confidence": ...}, ...]}`, optionally nested
    under `"data"`. Per-word confidences are averaged to two decimals.
    """

    data = raw.get("data") if isinstance(raw.get("data"), Mapping) else raw
    text = str(data.get("text") or "").strip()

    confidence = _as_confidence(data.get("confidence"))
    if confidence is None:
        words = data.get("words")
        if isinstance(words, list):
            scores = [
                c
                for c in (
                    _as_confidence(w.get("confidence")) for w in words if isinstance(w, Mapping)
                )
                if c is not None
            ]
            if scores:
                confidence = round(sum(scores) / len(scores), 2)

    warning = data.get("warning") or data.get("error")
    return OcrResult(text=text, confidence=confidence, warning=str(warning) if warning else None)


class OcrAdapter(ABC):
    """Base interface for OCR integrations."""

    name: str

    @abstractmethod
    async def extract(self, image: bytes) -> OcrResult:
        """Return the text recognized in `image`."""

        raise NotImplementedError
