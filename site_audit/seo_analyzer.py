"""
SEO posture: plugin detection and per-post meta coverage.

Per-post SEO metadata arrives under different keys depending on the
installed plugin. ``seo_meta()`` reads them through ``SEO_META_SOURCES``
in priority order and returns the first non-empty block, so every check
below goes through one accessor.

When an SEO plugin is detected the site is assumed to serve a sitemap,
Open Graph tags, Twitter cards and canonical URLs; none of these are
verified over HTTP.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple
from urllib.parse import urlparse

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot, Record
from site_audit.text_utils import average, percentage, post_html, strip_html

logger = config.get_logger("seo")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# (plugin id, substring of the lower-cased plugin name), highest priority first
SEO_PLUGINS: Tuple[Tuple[str, str], ...] = (
    ("yoast", "yoast"),
    ("rankmath", "rank math"),
    ("aioseo", "all in one seo"),
    ("seopress", "seopress"),
)

SCHEMA_PLUGINS = frozenset({"yoast", "rankmath"})

# Post fields that may carry SEO metadata, highest priority first
SEO_META_SOURCES: Tuple[str, ...] = ("yoast_head_json", "rank_math", "meta")

META_TITLE_KEYS = ("title", "og_title", "rank_math_title", "_yoast_wpseo_title")
META_DESC_KEYS = ("description", "og_description", "rank_math_description", "_yoast_wpseo_metadesc")
FOCUS_KEYWORD_KEYS = ("focuskw", "focus_keyword", "rank_math_focus_keyword", "_yoast_wpseo_focuskw")

_HREF = re.compile(r"""<a\s[^>]*href\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


@dataclass
class SeoAnalysis(AuditSection):
    seo_plugin: Optional[str] = None
    has_sitemap: bool = False
    has_robots_txt: bool = True
    posts_with_meta_title: int = 0
    posts_with_meta_desc: int = 0
    posts_with_focus_keyword: int = 0
    meta_title_coverage: int = 0
    meta_desc_coverage: int = 0
    focus_keyword_coverage: int = 0
    avg_title_length: int = 0
    avg_meta_desc_length: int = 0
    schema_markup: bool = False
    og_tags: bool = False
    twitter_cards: bool = False
    canonical_urls: bool = False
    internal_linking_avg: int = 0


def detect_seo_plugin(plugins: Sequence[Record]) -> Optional[str]:
    names = [str(p.get("name") or "").lower() for p in plugins]
    for plugin_id, needle in SEO_PLUGINS:
        if any(needle in name for name in names):
            return plugin_id
    return None


def seo_meta(post: Record) -> Dict[str, Any]:
    """First non-empty SEO metadata block on a post, or {}."""
    for key in SEO_META_SOURCES:
        block = post.get(key)
        if isinstance(block, dict) and block:
            return block
    return {}


def _first_value(meta: Dict[str, Any], keys: Sequence[str]) -> str:
    for key in keys:
        value = meta.get(key)
        # Post meta values may come back as single-item lists
        if isinstance(value, list) and value:
            value = value[0]
        if isinstance(value, str) and value.strip():
            return strip_html(value)
    return ""


def count_internal_links(html: str, site_host: str) -> int:
    count = 0
    for href in _HREF.findall(html):
        if href.startswith("#") or href.startswith("mailto:") or href.startswith("tel:"):
            continue
        host = urlparse(href).netloc.lower()
        if not host or (site_host and host == site_host):
            count += 1
    return count


def analyze_seo(snapshot: ContentSnapshot) -> SeoAnalysis:
    plugin = detect_seo_plugin(snapshot.plugins)
    posts = snapshot.posts
    site_host = urlparse(snapshot.site_url).netloc.lower()

    title_lengths = []
    desc_lengths = []
    with_keyword = 0
    link_counts = []

    for post in posts:
        meta = seo_meta(post)
        title = _first_value(meta, META_TITLE_KEYS)
        if title:
            title_lengths.append(len(title))
        desc = _first_value(meta, META_DESC_KEYS)
        if desc:
            desc_lengths.append(len(desc))
        if _first_value(meta, FOCUS_KEYWORD_KEYS):
            with_keyword += 1
        link_counts.append(count_internal_links(post_html(post), site_host))

    total = len(posts)
    has_plugin = plugin is not None
    analysis = SeoAnalysis(
        seo_plugin=plugin,
        has_sitemap=has_plugin,
        posts_with_meta_title=len(title_lengths),
        posts_with_meta_desc=len(desc_lengths),
        posts_with_focus_keyword=with_keyword,
        meta_title_coverage=percentage(len(title_lengths), total),
        meta_desc_coverage=percentage(len(desc_lengths), total),
        focus_keyword_coverage=percentage(with_keyword, total),
        avg_title_length=average(title_lengths),
        avg_meta_desc_length=average(desc_lengths),
        schema_markup=plugin in SCHEMA_PLUGINS,
        og_tags=has_plugin,
        twitter_cards=has_plugin,
        canonical_urls=has_plugin,
        internal_linking_avg=average(link_counts),
    )
    logger.debug(
        "SEO: plugin=%s meta_desc=%d/%d", plugin, analysis.posts_with_meta_desc, total
    )
    return analysis
