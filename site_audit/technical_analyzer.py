"""
Technical stack: active plugin inventory and categorization.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Sequence, Tuple

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot
from site_audit.text_utils import rendered

logger = config.get_logger("technical")

# First match wins
PLUGIN_CATEGORIES: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("SEO", re.compile(r"seo|yoast|rank.math|sitemap", re.IGNORECASE)),
    ("Performance", re.compile(r"cache|speed|optimize|performance|wp.rocket|w3.total|litespeed", re.IGNORECASE)),
    ("Security", re.compile(r"security|wordfence|sucuri|ithemes|firewall", re.IGNORECASE)),
    ("Forms", re.compile(r"form|contact|gravity|wpforms|ninja", re.IGNORECASE)),
    ("E-Commerce", re.compile(r"woocommerce|shop|ecommerce", re.IGNORECASE)),
    ("Analytics", re.compile(r"analytics|google|pixel|tag.manager", re.IGNORECASE)),
    ("Backup", re.compile(r"backup|migration|duplicator", re.IGNORECASE)),
    ("Page Builder", re.compile(r"elementor|beaver|divi|wpbakery", re.IGNORECASE)),
    ("Multilingual", re.compile(r"multilingual|wpml|polylang|translate", re.IGNORECASE)),
    ("Social", re.compile(r"social|share|instagram|facebook", re.IGNORECASE)),
    ("Media", re.compile(r"media|image|gallery|smush|imagify", re.IGNORECASE)),
)
OTHER_CATEGORY = "Other"

CACHE_PLUGIN = re.compile(r"cache|rocket|litespeed|w3.total", re.IGNORECASE)
SECURITY_PLUGIN = re.compile(r"wordfence|sucuri|ithemes|security", re.IGNORECASE)
FORM_PLUGIN = re.compile(r"form|gravity|wpforms|ninja", re.IGNORECASE)
ANALYTICS_PLUGIN = re.compile(r"analytics|google|pixel", re.IGNORECASE)
CDN_PLUGIN = re.compile(r"cloudflare|cdn|jetpack|bunny|stackpath", re.IGNORECASE)

UNKNOWN = "unknown"


@dataclass
class PluginInfo(AuditSection):
    name: str
    version: str
    category: str


@dataclass
class ThemeInfo(AuditSection):
    name: str = "Unknown"
    version: str = "Unknown"


@dataclass
class TechnicalAnalysis(AuditSection):
    wp_version: str = UNKNOWN
    php_version: str = UNKNOWN
    active_plugins: List[PluginInfo] = field(default_factory=list)
    active_theme: ThemeInfo = field(default_factory=ThemeInfo)
    cache_plugin: Optional[str] = None
    security_plugin: Optional[str] = None
    form_plugin: Optional[str] = None
    analytics_setup: Optional[str] = None
    ssl_enabled: bool = False
    cdn_detected: Optional[str] = None
    page_load_estimate: str = UNKNOWN


def categorize_plugin(name: str) -> str:
    for category, pattern in PLUGIN_CATEGORIES:
        if pattern.search(name):
            return category
    return OTHER_CATEGORY


def _first_match(names: Sequence[str], pattern: Pattern[str]) -> Optional[str]:
    for name in names:
        if pattern.search(name):
            return name
    return None


def analyze_technical(snapshot: ContentSnapshot, wp_version: str = "") -> TechnicalAnalysis:
    active = snapshot.active_plugins
    names = [str(p.get("name") or "") for p in active]
    theme = snapshot.active_theme

    analysis = TechnicalAnalysis(
        wp_version=wp_version or UNKNOWN,
        active_plugins=[
            PluginInfo(name=name, version=str(p.get("version") or ""), category=categorize_plugin(name))
            for name, p in zip(names, active)
        ],
        cache_plugin=_first_match(names, CACHE_PLUGIN),
        security_plugin=_first_match(names, SECURITY_PLUGIN),
        form_plugin=_first_match(names, FORM_PLUGIN),
        analytics_setup=_first_match(names, ANALYTICS_PLUGIN),
        ssl_enabled=snapshot.site_url.lower().startswith("https://"),
        cdn_detected=_first_match(names, CDN_PLUGIN),
    )
    if theme is not None:
        analysis.active_theme = ThemeInfo(
            name=rendered(theme.get("name")) or "Unknown",
            version=str(theme.get("version") or "Unknown"),
        )

    logger.debug("Technical: %d active plugins", len(analysis.active_plugins))
    return analysis
