# file: jobscan/sources/html.py
"""HTML-to-text conversion for fetched posting pages, good enough for keyword heuristics."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment

_DROP_TAGS = ("script", "style", "noscript", "template")
_WHITESPACE = re.compile(r"\s+")


def html_to_text(markup: str) -> str:
    """
    Convert an HTML page into a single line of plain text.

    Script, style, noscript and template content and comments are removed;
    text nodes are joined with spaces and whitespace collapsed. Stray `<`
    characters in body text are kept as text.
    """

    if not markup:
        return ""

    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(_DROP_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    text = soup.get_text(separator=" ")
    return _WHITESPACE.sub(" ", text).strip()
