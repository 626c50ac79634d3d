"""
Site overview: collection totals, site settings and publish cadence.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot, Record
from site_audit.text_utils import as_int, round_half_up

logger = config.get_logger("overview")

DEFAULT_LANGUAGE = "en-US"
DEFAULT_TIMEZONE = "UTC"
DEFAULT_POSTS_PER_PAGE = 10

# Posts per week at or above which cadence is reported as daily
DAILY_POSTS_PER_WEEK = 7.0
# Below this, cadence is reported per month
WEEKLY_POSTS_PER_WEEK = 1.0
WEEKS_PER_MONTH = 4


@dataclass
class SiteOverview(AuditSection):
    total_posts: int = 0
    total_drafts: int = 0
    total_pages: int = 0
    total_media: int = 0
    total_categories: int = 0
    total_tags: int = 0
    total_users: int = 0
    site_language: str = DEFAULT_LANGUAGE
    timezone: str = DEFAULT_TIMEZONE
    posts_per_page: int = DEFAULT_POSTS_PER_PAGE
    oldest_post: Optional[str] = None
    newest_post: Optional[str] = None
    publish_frequency: str = "unknown"


def _parse_date(value: object) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Mixed naive/aware dates cannot be compared; WP "date" is naive local time
    return parsed.replace(tzinfo=None)


def _dated_posts(posts: Tuple[Record, ...]) -> List[Tuple[datetime, str]]:
    dated = []
    for post in posts:
        raw = post.get("date")
        parsed = _parse_date(raw)
        if parsed is not None:
            dated.append((parsed, raw))
    dated.sort(key=lambda pair: pair[0])
    return dated


def classify_publish_frequency(posts_per_week: float) -> str:
    """
    Phrase a posting rate.

    >>> classify_publish_frequency(7)
    '~7 posts/week (daily)'
    >>> classify_publish_frequency(0.5)
    '~2 posts/month'
    """
    if posts_per_week >= DAILY_POSTS_PER_WEEK:
        return f"~{round_half_up(posts_per_week)} posts/week (daily)"
    if posts_per_week >= WEEKLY_POSTS_PER_WEEK:
        return f"~{round_half_up(posts_per_week)} posts/week"
    return f"~{round_half_up(posts_per_week * WEEKS_PER_MONTH)} posts/month"


def analyze_overview(snapshot: ContentSnapshot) -> SiteOverview:
    settings = snapshot.settings
    posts = snapshot.posts
    dated = _dated_posts(posts)

    oldest = dated[0][1] if dated else None
    newest = dated[-1][1] if dated else None

    frequency = "unknown"
    if len(dated) > 1:
        day_span = (dated[-1][0] - dated[0][0]).total_seconds() / 86400
        posts_per_week = len(posts) / day_span * 7 if day_span > 0 else 0.0
        frequency = classify_publish_frequency(posts_per_week)

    overview = SiteOverview(
        total_posts=len(posts),
        total_drafts=len(snapshot.drafts),
        total_pages=len(snapshot.pages),
        total_media=snapshot.media_total,
        total_categories=len(snapshot.categories),
        total_tags=len(snapshot.tags),
        total_users=len(snapshot.users),
        site_language=str(settings.get("language") or DEFAULT_LANGUAGE),
        timezone=str(settings.get("timezone_string") or DEFAULT_TIMEZONE),
        posts_per_page=as_int(settings.get("posts_per_page")) or DEFAULT_POSTS_PER_PAGE,
        oldest_post=oldest,
        newest_post=newest,
        publish_frequency=frequency,
    )
    logger.debug("Overview: %d posts, frequency %s", overview.total_posts, frequency)
    return overview
