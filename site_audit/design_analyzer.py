"""
Design stack: active theme and page builder.

Colors, fonts and layout are not exposed by the REST API; those fields
carry fixed defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot, Record
from site_audit.text_utils import post_html, rendered

logger = config.get_logger("design")

# (builder id, name substrings), checked in order against active plugins
PAGE_BUILDERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("elementor", ("elementor",)),
    ("wpbakery", ("wpbakery", "visual composer")),
    ("divi", ("divi",)),
    ("beaver-builder", ("beaver builder",)),
)

BLOCK_EDITOR = "gutenberg"
BLOCK_EDITOR_MARKERS = ("wp-block-", "<!-- wp:")

UNKNOWN = "Unknown"

DEFAULT_COLOR_SCHEME: Dict[str, str] = {
    "primary": "#000000",
    "secondary": "#333333",
    "accent": "#0073aa",
    "background": "#ffffff",
    "text": "#333333",
}


@dataclass
class DesignAnalysis(AuditSection):
    theme: str = UNKNOWN
    theme_version: str = UNKNOWN
    is_child_theme: bool = False
    page_builder: Optional[str] = None
    has_custom_css: bool = False
    color_scheme: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLOR_SCHEME))
    font_primary: str = "System"
    font_secondary: str = "System"
    layout_style: str = "full-width"
    header_style: str = "standard"
    footer_style: str = "standard"
    has_hero_section: bool = False
    has_sidebar: bool = True
    responsive_design: bool = True


def detect_page_builder(active_plugin_names: Sequence[str], posts: Sequence[Record]) -> Optional[str]:
    for builder, needles in PAGE_BUILDERS:
        if any(needle in name for name in active_plugin_names for needle in needles):
            return builder
    for post in posts:
        html = post_html(post)
        if any(marker in html for marker in BLOCK_EDITOR_MARKERS):
            return BLOCK_EDITOR
    return None


def analyze_design(snapshot: ContentSnapshot) -> DesignAnalysis:
    names = [str(p.get("name") or "").lower() for p in snapshot.active_plugins]
    theme = snapshot.active_theme

    analysis = DesignAnalysis(
        page_builder=detect_page_builder(names, snapshot.posts),
        has_custom_css=any("custom css" in n for n in names),
    )
    if theme is not None:
        analysis.theme = rendered(theme.get("name")) or UNKNOWN
        analysis.theme_version = str(theme.get("version") or UNKNOWN)
        analysis.is_child_theme = theme.get("template") != theme.get("stylesheet")

    logger.debug("Design: theme=%s builder=%s", analysis.theme, analysis.page_builder)
    return analysis
