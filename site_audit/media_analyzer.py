"""
Media library health: inventory by type, formats, alt-text coverage and
featured-image usage.

Only the first page of the media library is fetched, so per-item counts
describe that sample while ``overview.totalMedia`` holds the library total.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot
from site_audit.text_utils import as_int, average, percentage, post_html

logger = config.get_logger("media")

WEBP_MIME = "image/webp"
LAZY_LOADING_MARKER = 'loading="lazy"'


@dataclass
class MediaAnalysis(AuditSection):
    total_images: int = 0
    total_videos: int = 0
    total_documents: int = 0
    avg_image_size: int = 0
    formats_used: List[str] = field(default_factory=list)
    images_with_alt: int = 0
    images_without_alt: int = 0
    has_webp: bool = False
    has_lazy_loading: bool = False
    featured_image_usage: int = 0


def analyze_media(snapshot: ContentSnapshot) -> MediaAnalysis:
    media = snapshot.media
    images = [m for m in media if m.get("media_type") == "image"]
    videos = [m for m in media if m.get("media_type") == "video"]

    formats: List[str] = []
    for item in media:
        mime = item.get("mime_type")
        if isinstance(mime, str) and mime and mime not in formats:
            formats.append(mime)

    with_alt = sum(
        1 for img in images
        if isinstance(img.get("alt_text"), str) and img["alt_text"].strip()
    )

    sizes = []
    for img in images:
        details = img.get("media_details")
        if isinstance(details, dict):
            size = as_int(details.get("filesize"))
            if size > 0:
                sizes.append(size)

    posts = snapshot.posts
    with_featured = sum(1 for p in posts if as_int(p.get("featured_media")) > 0)

    analysis = MediaAnalysis(
        total_images=len(images),
        total_videos=len(videos),
        total_documents=len(media) - len(images) - len(videos),
        avg_image_size=average(sizes),
        formats_used=formats,
        images_with_alt=with_alt,
        images_without_alt=len(images) - with_alt,
        has_webp=WEBP_MIME in formats,
        has_lazy_loading=any(LAZY_LOADING_MARKER in post_html(p) for p in posts),
        featured_image_usage=percentage(with_featured, len(posts)),
    )
    logger.debug(
        "Media: %d images (%d with alt), featured %d%%",
        analysis.total_images,
        with_alt,
        analysis.featured_image_usage,
    )
    return analysis
