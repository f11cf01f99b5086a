# file: jobscan/core/normalize.py
"""
Text normalization for rule matching.

All functions in this module are pure. The caller's text is never modified; the
normalized copy exists only so rule patterns can be written lower-case and
whitespace-insensitive.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

# Misspellings that show up often enough in scam posts to hide keywords.
MISSPELLINGS: dict[str, str] = {
    "watsapp": "whatsapp",
    "whatsap": "whatsapp",
    "telegran": "telegram",
    "telegramm": "telegram",
    "traning": "training",
    "trainning": "training",
    "intervew": "interview",
    "verfication": "verification",
    "emial": "email",
    "compnay": "company",
    "aply": "apply",
}

_MISSPELLING_RE = re.compile(r"\b(" + "|".join(map(re.escape, MISSPELLINGS)) + r")\b")
_AT_RE = re.compile(r"\s*[\[({]\s*at\s*[\])}]\s*")
_DOT_RE = re.compile(r"\s*[\[({]\s*dot\s*[\])}]\s*")
_WHITESPACE_RE = re.compile(r"\s+")

_URL_RE = re.compile(r"https?://[^\s<>\"'`]+", re.IGNORECASE)
_URL_TRAILING = ".,;:!?)]}"


@dataclass(frozen=True, slots=True)
class NormalizedText:
    normalized_text: str
    urls: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {"normalized_text": self.normalized_text, "urls": list(self.urls)}


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str) -> str:
    """
    Return the lower-cased, de-obfuscated form of `text` used for matching.

    - strips diacritics and unifies curly quotes
    - rewrites `[at]` / `(dot)` style obfuscation back to `@` / `.`
    - fixes a few common misspellings of scam keywords
    - collapses whitespace and trims
    """

    t = _strip_diacritics(text).lower()
    t = t.replace("“", '"').replace("”", '"')
    t = t.replace("‘", "'").replace("’", "'")
    t = _AT_RE.sub("@", t)
    t = _DOT_RE.sub(".", t)
    t = _WHITESPACE_RE.sub(" ", t).strip()
    return _MISSPELLING_RE.sub(lambda m: MISSPELLINGS[m.group(1)], t)


def extract_urls(text: str) -> tuple[str, ...]:
    """Return http(s) URLs found in `text`, de-duplicated in order of first appearance."""

    out: list[str] = []
    for match in _URL_RE.finditer(text):
        url = match.group(0).rstrip(_URL_TRAILING)
        if "://" not in url or url.endswith("://"):
            continue
        if url not in out:
            out.append(url)
    return tuple(out)


def normalize(text: str) -> NormalizedText:
    """
    Normalize raw input text and pull out embedded URLs.

    Empty or whitespace-only input yields `NormalizedText("", ())`.
    """

    stripped = (text or "").strip()
    if not stripped:
        return NormalizedText(normalized_text="", urls=())
    # URLs come from the original text so their paths keep their case.
    return NormalizedText(normalized_text=normalize_text(stripped), urls=extract_urls(stripped))
