"""
Advisory recommendations from fixed threshold rules.

Rules are evaluated in ``RECOMMENDATION_RULES`` order and each true rule
adds exactly one message, so the output never contains duplicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from site_audit import config
from site_audit.content_analyzer import ContentAnalysis
from site_audit.design_analyzer import DesignAnalysis
from site_audit.media_analyzer import MediaAnalysis
from site_audit.overview import SiteOverview
from site_audit.seo_analyzer import SeoAnalysis
from site_audit.writing_style import WritingStyleAnalysis

logger = config.get_logger("recommendations")

MIN_AVG_WORD_COUNT = 800
MIN_POST_COUNT = 20
MIN_META_DESC_RATIO = 0.5
MIN_FEATURED_IMAGE_USAGE = 80


@dataclass(frozen=True)
class AuditFindings:
    """The analysis sections the rules read."""

    overview: SiteOverview
    content: ContentAnalysis
    seo: SeoAnalysis
    design: DesignAnalysis
    media: MediaAnalysis
    writing: WritingStyleAnalysis


Rule = Tuple[str, Callable[[AuditFindings], bool], Callable[[AuditFindings], str]]

RECOMMENDATION_RULES: Tuple[Rule, ...] = (
    (
        "short_articles",
        lambda f: f.content.avg_word_count < MIN_AVG_WORD_COUNT,
        lambda f: "Increase average article length to 1000+ words for better SEO performance",
    ),
    (
        "few_posts",
        lambda f: f.overview.total_posts < MIN_POST_COUNT,
        lambda f: "Publish more content: sites with 50+ posts rank significantly better",
    ),
    (
        "no_seo_plugin",
        lambda f: f.seo.seo_plugin is None,
        lambda f: "Install an SEO plugin (Yoast SEO or RankMath) for meta optimization",
    ),
    (
        "missing_meta_descriptions",
        lambda f: f.seo.posts_with_meta_desc < f.overview.total_posts * MIN_META_DESC_RATIO,
        lambda f: "Add meta descriptions to all posts: currently less than 50% have them",
    ),
    (
        "missing_featured_images",
        lambda f: f.media.featured_image_usage < MIN_FEATURED_IMAGE_USAGE,
        lambda f: (
            f"Only {f.media.featured_image_usage}% of posts have featured images; aim for 100%"
        ),
    ),
    (
        "missing_alt_text",
        lambda f: f.media.images_without_alt > f.media.images_with_alt,
        lambda f: "Add alt text to images: more than half are missing accessibility text",
    ),
    (
        "no_webp",
        lambda f: not f.media.has_webp,
        lambda f: "Enable WebP image format for faster loading (use ShortPixel or Imagify)",
    ),
    (
        "no_subheadings",
        lambda f: not f.writing.uses_subheadings,
        lambda f: "Use H2/H3 subheadings to improve content structure and scannability",
    ),
    (
        "no_cta",
        lambda f: not f.writing.uses_cta,
        lambda f: "Add clear calls to action to improve engagement and conversions",
    ),
    (
        "no_page_builder",
        lambda f: f.design.page_builder is None,
        lambda f: "Consider a page builder (Elementor, Gutenberg blocks) for richer layouts",
    ),
)


def generate_recommendations(findings: AuditFindings) -> List[str]:
    recommendations = []
    for name, predicate, message in RECOMMENDATION_RULES:
        if predicate(findings):
            recommendations.append(message(findings))
            logger.debug("Rule %s triggered", name)
    return recommendations
