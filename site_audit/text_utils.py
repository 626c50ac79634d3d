"""
Text helpers shared by the analyzers: HTML stripping, word counting,
rendered-field access and half-up rounding.

All pure Python, no NLP libraries.
"""

from __future__ import annotations

import math
import re
from html.parser import HTMLParser
from typing import Any, List, Sequence

# ---------------------------------------------------------------------------
# HTML stripping
# ---------------------------------------------------------------------------

_BLOCK_TAGS = {
    "p", "div", "section", "article", "header", "footer", "aside",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "blockquote", "pre", "table", "tr", "figure",
    "figcaption", "br", "hr",
}

_SKIP_TAGS = {"script", "style", "noscript"}


class _HTMLStripper(HTMLParser):
    """Collect visible text, marking block boundaries with blank lines."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._pieces: List[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        tag_lower = tag.lower()
        if tag_lower in _SKIP_TAGS:
            self._skip_depth += 1
        elif tag_lower in _BLOCK_TAGS:
            self._pieces.append("\n\n")

    def handle_endtag(self, tag: str) -> None:
        tag_lower = tag.lower()
        if tag_lower in _SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag_lower in _BLOCK_TAGS:
            self._pieces.append("\n\n")

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self._pieces.append(data)

    def get_text(self) -> str:
        return "".join(self._pieces)


def strip_html(html: Any) -> str:
    """
    Strip tags from an HTML fragment.

    Entities are decoded, whitespace inside a line is collapsed, and block
    elements are separated by a single blank line so paragraphs can be
    recovered by splitting on blank lines. Non-string input yields "".
    """
    if not isinstance(html, str) or not html:
        return ""

    stripper = _HTMLStripper()
    stripper.feed(html)
    stripper.close()

    lines = [" ".join(line.split()) for line in stripper.get_text().split("\n")]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Record field access
# ---------------------------------------------------------------------------


def rendered(value: Any) -> str:
    """Read a REST API ``{"rendered": ...}`` field, or a plain string."""
    if isinstance(value, dict):
        inner = value.get("rendered", "")
        return inner if isinstance(inner, str) else ""
    if isinstance(value, str):
        return value
    return ""


def post_title(record: Any) -> str:
    """Plain-text title of a post or page record."""
    if not isinstance(record, dict):
        return ""
    return strip_html(rendered(record.get("title")))


def post_html(record: Any) -> str:
    """Rendered HTML body of a post or page record."""
    if not isinstance(record, dict):
        return ""
    return rendered(record.get("content"))


def as_int(value: Any, default: int = 0) -> int:
    """Coerce loosely-typed numeric fields (``"12"``, ``None``) to int."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


# ---------------------------------------------------------------------------
# Counting and rounding
# ---------------------------------------------------------------------------


def count_words(text: str) -> int:
    """Whitespace-delimited token count."""
    return len(text.split())


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (``round()`` is banker's)."""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def average(values: Sequence[float]) -> int:
    """Half-up rounded mean, 0 for an empty sequence."""
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def percentage(part: float, whole: float) -> int:
    """``part`` as a rounded percentage of ``whole``, 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)
