"""
Content analysis: word counts, taxonomy ranking, niche classification and
title-pattern detection.

Niche classification scores each entry of ``NICHE_KEYWORDS`` by counting
keyword hits (word boundary on the left only, so "hotel" also matches
"hotels") across every post title and category name. The highest score
wins; on a tie the niche listed first wins; with no hits the niche is
"General".
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Pattern, Sequence, Tuple

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot
from site_audit.text_utils import (
    as_int,
    average,
    count_words,
    percentage,
    post_html,
    post_title,
    strip_html,
)

logger = config.get_logger("content")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

WORDS_PER_MINUTE = 200
TOP_CATEGORY_LIMIT = 10
TOP_TAG_LIMIT = 15
SUB_NICHE_LIMIT = 5
TOP_TOPIC_LIMIT = 5
CONTENT_GAP_LIMIT = 10
DEFAULT_NICHE = "General"

# Evaluation order is the tie-break order
NICHE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Travel & Tourism", ("travel", "hotel", "resort", "destination", "flight", "vacation", "tour", "booking")),
    ("Food & Restaurant", ("restaurant", "recipe", "food", "cooking", "cuisine", "chef", "dining", "menu")),
    ("Technology", ("software", "app", "tech", "programming", "digital", "computer", "startup", "code")),
    ("Health & Wellness", ("health", "fitness", "wellness", "yoga", "diet", "medical", "exercise", "nutrition")),
    ("Fashion & Beauty", ("fashion", "beauty", "style", "clothing", "makeup", "skincare", "outfit", "designer")),
    ("Business & Finance", ("business", "finance", "invest", "market", "entrepreneur", "startup", "money")),
    ("Education", ("learn", "course", "education", "student", "teaching", "university", "study", "tutorial")),
    ("Real Estate", ("property", "real estate", "apartment", "house", "rental", "mortgage", "building")),
    ("News & Media", ("news", "breaking", "update", "report", "journalist", "media", "press")),
    ("E-Commerce", ("product", "shop", "buy", "price", "discount", "sale", "store", "order")),
    ("Lifestyle", ("lifestyle", "home", "family", "diy", "garden", "interior", "decor")),
    ("Sports", ("sport", "football", "soccer", "basketball", "fitness", "game", "player", "team")),
)

_NICHE_PATTERNS: Tuple[Tuple[str, Tuple[Pattern[str], ...]], ...] = tuple(
    (niche, tuple(re.compile(r"\b" + re.escape(kw), re.IGNORECASE) for kw in keywords))
    for niche, keywords in NICHE_KEYWORDS
)

# (content type, contentPatterns flag, title pattern). One pattern per type
# drives both the flag and the per-type count.
CONTENT_TYPE_PATTERNS: Tuple[Tuple[str, str, Pattern[str]], ...] = (
    ("listicle", "uses_listicles", re.compile(r"\d+\s+(best|top|ways|tips|reasons)", re.IGNORECASE)),
    ("guide", "uses_guides", re.compile(r"guide|complete|ultimate|beginner", re.IGNORECASE)),
    ("how-to", "uses_how_to", re.compile(r"how to|step.by.step|guide to", re.IGNORECASE)),
    ("review", "uses_reviews", re.compile(r"review|rating", re.IGNORECASE)),
    ("comparison", "uses_comparisons", re.compile(r"\bvs\b\.?|versus|compare|comparison", re.IGNORECASE)),
    ("news", "uses_news", re.compile(r"\b(update|announce|launch|new|breaking)", re.IGNORECASE)),
)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class CategoryCount(AuditSection):
    name: str
    count: int
    percentage: int = 0


@dataclass
class TagCount(AuditSection):
    name: str
    count: int


@dataclass
class ContentTypeCount(AuditSection):
    type: str
    count: int


@dataclass
class ContentPatterns(AuditSection):
    uses_listicles: bool = False
    uses_how_to: bool = False
    uses_reviews: bool = False
    uses_comparisons: bool = False
    uses_guides: bool = False
    uses_news: bool = False


@dataclass
class ContentAnalysis(AuditSection):
    niche: str = DEFAULT_NICHE
    sub_niches: List[str] = field(default_factory=list)
    top_categories: List[CategoryCount] = field(default_factory=list)
    top_tags: List[TagCount] = field(default_factory=list)
    content_types: List[ContentTypeCount] = field(default_factory=list)
    avg_word_count: int = 0
    min_word_count: int = 0
    max_word_count: int = 0
    avg_reading_time: str = "0 min"
    content_patterns: ContentPatterns = field(default_factory=ContentPatterns)
    top_performing_topics: List[str] = field(default_factory=list)
    content_gaps: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def detect_niche(text_samples: Sequence[str]) -> str:
    """Return the best-scoring niche for the given titles and category names."""
    text = " ".join(text_samples).lower()
    best_niche = DEFAULT_NICHE
    best_score = 0
    for niche, patterns in _NICHE_PATTERNS:
        score = sum(len(pattern.findall(text)) for pattern in patterns)
        if score > best_score:
            best_score = score
            best_niche = niche
    return best_niche


def detect_content_types(titles: Sequence[str]) -> Tuple[ContentPatterns, List[ContentTypeCount]]:
    patterns = ContentPatterns()
    types: List[ContentTypeCount] = []
    for type_name, flag, pattern in CONTENT_TYPE_PATTERNS:
        count = sum(1 for title in titles if pattern.search(title))
        if count:
            setattr(patterns, flag, True)
            types.append(ContentTypeCount(type=type_name, count=count))
    return patterns, types


def _category_names(snapshot: ContentSnapshot) -> Dict[int, str]:
    names: Dict[int, str] = {}
    for cat in snapshot.categories:
        cat_id = as_int(cat.get("id"), default=-1)
        name = cat.get("name")
        if cat_id >= 0 and isinstance(name, str):
            names[cat_id] = strip_html(name)
    return names


def _rank_categories(snapshot: ContentSnapshot) -> List[CategoryCount]:
    names = _category_names(snapshot)
    counts: Counter = Counter()
    for post in snapshot.posts:
        cat_ids = post.get("categories")
        if not isinstance(cat_ids, list):
            continue
        for cat_id in cat_ids:
            name = names.get(as_int(cat_id, default=-1))
            if name:
                counts[name] += 1

    total = len(snapshot.posts)
    # Counter.most_common keeps first-seen order for equal counts
    return [
        CategoryCount(name=name, count=count, percentage=percentage(count, total))
        for name, count in counts.most_common(TOP_CATEGORY_LIMIT)
    ]


def _rank_tags(snapshot: ContentSnapshot) -> List[TagCount]:
    tags = [
        TagCount(name=strip_html(str(tag.get("name") or "")), count=as_int(tag.get("count")))
        for tag in snapshot.tags
    ]
    tags.sort(key=lambda t: t.count, reverse=True)
    return tags[:TOP_TAG_LIMIT]


def _content_gaps(snapshot: ContentSnapshot) -> List[str]:
    gaps = []
    for cat in snapshot.categories:
        name = cat.get("name")
        if isinstance(name, str) and name and as_int(cat.get("count")) == 0:
            gaps.append(strip_html(name))
    return gaps[:CONTENT_GAP_LIMIT]


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def analyze_content(snapshot: ContentSnapshot) -> ContentAnalysis:
    posts = snapshot.posts
    word_counts = [count_words(strip_html(post_html(p))) for p in posts]
    avg_words = average(word_counts)

    raw_titles = [post_title(p) for p in posts]
    titles = [t.lower() for t in raw_titles]
    category_names = [
        strip_html(c["name"]).lower() for c in snapshot.categories if isinstance(c.get("name"), str)
    ]

    top_categories = _rank_categories(snapshot)
    patterns, content_types = detect_content_types(titles)

    analysis = ContentAnalysis(
        niche=detect_niche(titles + category_names),
        sub_niches=[c.name for c in top_categories[:SUB_NICHE_LIMIT]],
        top_categories=top_categories,
        top_tags=_rank_tags(snapshot),
        content_types=content_types,
        avg_word_count=avg_words,
        min_word_count=min(word_counts) if word_counts else 0,
        max_word_count=max(word_counts) if word_counts else 0,
        avg_reading_time=f"{math.ceil(avg_words / WORDS_PER_MINUTE)} min",
        content_patterns=patterns,
        top_performing_topics=raw_titles[:TOP_TOPIC_LIMIT],
        content_gaps=_content_gaps(snapshot),
    )
    logger.debug("Content: niche=%s avg_words=%d", analysis.niche, avg_words)
    return analysis
