"""
Site structure: page hierarchy, standard sections and permalink format.

Hierarchy depth is 1 for any page with a parent and 0 otherwise; deeper
nesting is not resolved. The permalink structure is inferred from the
first post's link only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot
from site_audit.text_utils import as_int, post_title

logger = config.get_logger("structure")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HOME_SLUGS: FrozenSet[str] = frozenset({"home", "homepage", "front-page"})
BLOG_SLUGS: FrozenSet[str] = frozenset({"blog", "news", "articles", "posts"})
SHOP_SLUGS: FrozenSet[str] = frozenset({"shop", "store", "products"})
CONTACT_SLUGS: FrozenSet[str] = frozenset({"contact", "contact-us", "get-in-touch"})
ABOUT_SLUGS: FrozenSet[str] = frozenset({"about", "about-us", "who-we-are"})

PERMALINK_POSTNAME = "/%postname%/"
PERMALINK_CATEGORY = "/%category%/%postname%/"
PERMALINK_DATE = "/%year%/%monthnum%/%postname%/"

_DATE_SEGMENT = re.compile(r"/\d{4}/\d{2}/")


@dataclass
class HierarchyEntry(AuditSection):
    page: str
    depth: int
    children: int


@dataclass
class StructureAnalysis(AuditSection):
    site_hierarchy: List[HierarchyEntry] = field(default_factory=list)
    menu_structure: List[str] = field(default_factory=list)
    has_homepage: bool = False
    has_blog: bool = False
    has_shop: bool = False
    has_contact_page: bool = False
    has_about_page: bool = False
    custom_post_types: List[str] = field(default_factory=list)
    url_structure: str = PERMALINK_POSTNAME
    pagination_style: str = "numeric"


def infer_permalink_structure(sample_link: str) -> str:
    """Guess the permalink format from one post URL."""
    if "/category/" in sample_link:
        return PERMALINK_CATEGORY
    if _DATE_SEGMENT.search(sample_link):
        return PERMALINK_DATE
    return PERMALINK_POSTNAME


def _has_section(slugs: Tuple[str, ...], synonyms: FrozenSet[str]) -> bool:
    return any(slug in synonyms for slug in slugs)


def analyze_structure(snapshot: ContentSnapshot) -> StructureAnalysis:
    pages = snapshot.pages
    parents = [as_int(p.get("parent")) for p in pages]

    hierarchy = []
    for page, parent in zip(pages, parents):
        page_id = as_int(page.get("id"), default=-1)
        children = sum(1 for other in parents if page_id > 0 and other == page_id)
        hierarchy.append(
            HierarchyEntry(page=post_title(page), depth=1 if parent else 0, children=children)
        )

    slugs = tuple(str(p.get("slug") or "").lower() for p in pages)

    url_structure = PERMALINK_POSTNAME
    if snapshot.posts:
        link = snapshot.posts[0].get("link")
        if isinstance(link, str):
            url_structure = infer_permalink_structure(link)

    custom_types: List[str] = []
    for post in snapshot.posts:
        post_type = post.get("type")
        if isinstance(post_type, str) and post_type != "post" and post_type not in custom_types:
            custom_types.append(post_type)

    analysis = StructureAnalysis(
        site_hierarchy=hierarchy,
        menu_structure=[post_title(p) for p, parent in zip(pages, parents) if not parent],
        has_homepage=_has_section(slugs, HOME_SLUGS),
        has_blog=_has_section(slugs, BLOG_SLUGS),
        has_shop=_has_section(slugs, SHOP_SLUGS),
        has_contact_page=_has_section(slugs, CONTACT_SLUGS),
        has_about_page=_has_section(slugs, ABOUT_SLUGS),
        custom_post_types=custom_types,
        url_structure=url_structure,
    )
    logger.debug("Structure: %d pages, permalinks %s", len(pages), url_structure)
    return analysis
