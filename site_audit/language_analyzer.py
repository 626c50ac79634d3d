"""
Language mix: primary locale, script detection over post bodies and
multilingual plugin detection.

A script counts as present once more than ``SCRIPT_THRESHOLD`` of its
characters appear across all published post bodies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Pattern, Sequence, Tuple

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot, Record
from site_audit.text_utils import post_html, strip_html

logger = config.get_logger("languages")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_LOCALE = "en-US"
SCRIPT_THRESHOLD = 50

# (language code, character class); Arabic first so it is reported first
SCRIPT_RANGES: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("ar", re.compile("[\u0600-\u06FF]")),
    ("he", re.compile("[\u0590-\u05FF]")),
    ("ru", re.compile("[\u0400-\u04FF]")),
    ("el", re.compile("[\u0370-\u03FF]")),
    ("hi", re.compile("[\u0900-\u097F]")),
    ("th", re.compile("[\u0E00-\u0E7F]")),
    ("zh", re.compile("[\u4E00-\u9FFF]")),
    ("ja", re.compile("[\u3040-\u30FF]")),
    ("ko", re.compile("[\uAC00-\uD7AF]")),
)

RTL_LANGUAGES: FrozenSet[str] = frozenset({"ar", "he", "fa", "ur"})

# Other languages written in a scanned script (kanji are Han characters)
SCRIPT_ALSO_WRITES: Dict[str, FrozenSet[str]] = {
    "ar": frozenset({"fa", "ur"}),
    "ru": frozenset({"uk", "bg", "sr", "be", "mk", "kk"}),
    "hi": frozenset({"mr", "ne"}),
    "zh": frozenset({"ja"}),
}

MULTILINGUAL_PLUGINS: Tuple[Tuple[str, str], ...] = (
    ("WPML", "wpml"),
    ("Polylang", "polylang"),
    ("TranslatePress", "translatepress"),
    ("Weglot", "weglot"),
)

# Rough share reported when a translation plugin is active
PLUGIN_TRANSLATION_COVERAGE = 50


@dataclass
class LanguageAnalysis(AuditSection):
    primary_language: str = "en"
    detected_languages: List[str] = field(default_factory=lambda: ["en"])
    is_multilingual: bool = False
    multilingual_plugin: Optional[str] = None
    rtl_support: bool = False
    has_arabic_content: bool = False
    translation_coverage: int = 0


def primary_language(locale: str) -> str:
    """``"ar-SA"`` -> ``"ar"``, ``"pt_BR"`` -> ``"pt"``."""
    code = re.split(r"[-_]", locale or "")[0].strip().lower()
    return code or "en"


def detect_scripts(text: str) -> List[str]:
    """Language codes whose script exceeds ``SCRIPT_THRESHOLD`` characters."""
    return [
        code for code, pattern in SCRIPT_RANGES
        if len(pattern.findall(text)) > SCRIPT_THRESHOLD
    ]


def writes_primary(script_code: str, primary: str) -> bool:
    """True if a detected script is one the primary language is written in."""
    return script_code == primary or primary in SCRIPT_ALSO_WRITES.get(script_code, frozenset())


def detect_multilingual_plugin(plugins: Sequence[Record]) -> Optional[str]:
    names = [str(p.get("name") or "").lower() for p in plugins]
    for label, needle in MULTILINGUAL_PLUGINS:
        if any(needle in name for name in names):
            return label
    return None


def analyze_languages(snapshot: ContentSnapshot) -> LanguageAnalysis:
    locale = snapshot.settings.get("language")
    primary = primary_language(locale if isinstance(locale, str) and locale else DEFAULT_LOCALE)

    text = " ".join(strip_html(post_html(p)) for p in snapshot.posts)
    scripts = detect_scripts(text)

    detected = [primary]
    detected.extend(code for code in scripts if not writes_primary(code, primary))

    plugin = detect_multilingual_plugin(snapshot.plugins)
    analysis = LanguageAnalysis(
        primary_language=primary,
        detected_languages=detected,
        is_multilingual=plugin is not None or len(detected) > 1,
        multilingual_plugin=plugin,
        rtl_support=primary in RTL_LANGUAGES or any(code in RTL_LANGUAGES for code in scripts),
        has_arabic_content="ar" in scripts,
        translation_coverage=PLUGIN_TRANSLATION_COVERAGE if plugin else 0,
    )
    logger.debug("Languages: primary=%s detected=%s", primary, detected)
    return analysis
