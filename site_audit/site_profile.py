"""
Site profile synthesis.

Renders the analysis sections into three text blocks for the content
generation pipeline: a system prompt, content guidelines and SEO
guidelines. Output depends only on the inputs, so the same audit always
renders byte-identical text. Conditional lines that do not apply are
left out rather than rendered blank.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from site_audit import config
from site_audit.content_analyzer import ContentAnalysis
from site_audit.design_analyzer import DesignAnalysis
from site_audit.language_analyzer import LanguageAnalysis
from site_audit.models import AuditSection
from site_audit.seo_analyzer import SeoAnalysis
from site_audit.writing_style import WritingStyleAnalysis

logger = config.get_logger("site_profile")

# Article length target is the site average plus or minus this many words
LENGTH_TARGET_SPREAD = 200


@dataclass
class SiteProfile(AuditSection):
    site_name: str = ""
    site_url: str = ""
    niche: str = ""
    sub_niches: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    primary_language: str = ""
    tone: str = ""
    writing_style: str = ""
    content_types: List[str] = field(default_factory=list)
    top_categories: List[str] = field(default_factory=list)
    design_style: str = ""
    color_palette: Dict[str, str] = field(default_factory=dict)
    fonts: Dict[str, str] = field(default_factory=dict)
    system_prompt: str = ""
    content_guidelines: str = ""
    seo_guidelines: str = ""


def _join(lines: List[Optional[str]]) -> str:
    return "\n".join(line for line in lines if line is not None)


def render_system_prompt(
    site_name: str,
    site_url: str,
    content: ContentAnalysis,
    design: DesignAnalysis,
    writing: WritingStyleAnalysis,
    languages: LanguageAnalysis,
) -> str:
    patterns = content.content_patterns
    categories = ", ".join(c.name for c in content.top_categories)
    return _join([
        f'You are a content writer for "{site_name}" ({site_url}).',
        "",
        "SITE IDENTITY:",
        f"- Niche: {content.niche}",
        f"- Sub-niches: {', '.join(content.sub_niches)}",
        f"- Primary language: {languages.primary_language}",
        "- Arabic content supported (RTL)" if languages.has_arabic_content else None,
        "- Right-to-left layout required" if languages.rtl_support else None,
        "",
        "WRITING STYLE:",
        f"- Tone: {writing.tone}",
        f"- Perspective: {writing.perspective}",
        f"- Average article length: ~{content.avg_word_count} words ({content.avg_reading_time} read)",
        f"- Sentence style: Avg {writing.avg_sentence_length} words/sentence",
        "- Uses H2/H3 subheadings to structure content"
        if writing.uses_subheadings else "- Uses minimal subheadings",
        "- Frequently uses bullet points and numbered lists"
        if writing.uses_bullet_points else "- Prefers prose over lists",
        "- Includes calls to action"
        if writing.uses_cta else "- Informational style without hard CTAs",
        "",
        "CONTENT PATTERNS:",
        "- Writes listicle-style articles (top X, best X)" if patterns.uses_listicles else None,
        "- Publishes comprehensive guides" if patterns.uses_guides else None,
        "- Creates how-to tutorials" if patterns.uses_how_to else None,
        "- Writes reviews and ratings" if patterns.uses_reviews else None,
        "- Creates comparison articles" if patterns.uses_comparisons else None,
        "- Covers news and updates" if patterns.uses_news else None,
        "",
        f"TOP CATEGORIES: {categories}",
        "",
        "DESIGN CONTEXT:",
        f"- Theme: {design.theme}",
        f"- Page builder: {design.page_builder or 'WordPress default'}",
        "",
        "Write content that matches this site's established voice, structure, "
        "and audience expectations. Always respond with valid JSON when asked "
        "for structured content.",
    ])


def render_content_guidelines(
    site_name: str,
    content: ContentAnalysis,
    writing: WritingStyleAnalysis,
) -> str:
    low = max(0, content.avg_word_count - LENGTH_TARGET_SPREAD)
    high = content.avg_word_count + LENGTH_TARGET_SPREAD
    categories = ", ".join(c.name for c in content.top_categories)
    return _join([
        f"CONTENT GUIDELINES FOR {site_name.upper()}:",
        "",
        f"1. ARTICLE LENGTH: Target {low}-{high} words",
        "2. STRUCTURE: "
        + ("Use H2 for main sections, H3 for subsections" if writing.uses_subheadings else "Keep structure simple"),
        "3. LISTS: "
        + ("Use bullet points for key takeaways and feature lists" if writing.uses_bullet_points else "Prefer flowing prose"),
        "4. IMAGES: "
        + ("Include 3-5 relevant images per article with descriptive alt text" if writing.uses_images else "Text-focused content"),
        f"5. TONE: {writing.tone}, {writing.perspective} perspective",
        f"6. READABILITY: Keep sentences around {writing.avg_sentence_length} words, "
        f"paragraphs under {writing.avg_paragraph_length} words",
        "7. CTAs: "
        + ("Include a clear call to action in every article" if writing.uses_cta else "Focus on information delivery"),
        f"8. CATEGORIES: Assign to one of: {categories}",
        "9. TAGS: Use 3-8 relevant tags per post",
        "10. SEO: Include focus keyword in title, first paragraph, and at least 2 subheadings",
    ])


def render_seo_guidelines(site_name: str, seo: SeoAnalysis) -> str:
    if seo.has_sitemap:
        sitemap = f"Auto-generated by {seo.seo_plugin or 'plugin'}"
    else:
        sitemap = "Manual sitemap needed"
    return _join([
        f"SEO GUIDELINES FOR {site_name.upper()}:",
        "",
        "1. TITLE: 50-60 characters, include primary keyword",
        "2. META DESCRIPTION: 150-160 characters, compelling and keyword-rich",
        "3. URL SLUG: Short, keyword-rich, hyphenated",
        "4. HEADINGS: H1 (title only), H2 (main sections), H3 (subsections)",
        "5. INTERNAL LINKS: Link to 2-3 related articles",
        "6. EXTERNAL LINKS: 1-2 authoritative source links",
        "7. IMAGES: Descriptive filenames, alt text with keywords",
        "8. FOCUS KEYWORD: Natural placement, 1-2% density",
        "9. SCHEMA: "
        + ("Article schema is auto-generated" if seo.schema_markup else "Add structured data manually"),
        f"10. SITEMAP: {sitemap}",
    ])


def synthesize_profile(
    site_name: str,
    site_url: str,
    content: ContentAnalysis,
    design: DesignAnalysis,
    writing: WritingStyleAnalysis,
    languages: LanguageAnalysis,
    seo: SeoAnalysis,
) -> SiteProfile:
    profile = SiteProfile(
        site_name=site_name,
        site_url=site_url,
        niche=content.niche,
        sub_niches=list(content.sub_niches),
        languages=list(languages.detected_languages),
        primary_language=languages.primary_language,
        tone=writing.tone,
        writing_style=writing.author_voice,
        content_types=[c.type for c in content.content_types],
        top_categories=[c.name for c in content.top_categories],
        design_style=f"{design.theme} with {design.page_builder or 'default editor'}",
        color_palette=dict(design.color_scheme),
        fonts={"heading": design.font_primary, "body": design.font_secondary},
        system_prompt=render_system_prompt(site_name, site_url, content, design, writing, languages),
        content_guidelines=render_content_guidelines(site_name, content, writing),
        seo_guidelines=render_seo_guidelines(site_name, seo),
    )
    logger.debug("Profile rendered for %s", site_name)
    return profile
