"""
Writing style analysis over a sample of published posts.

Heuristic only: pronoun and marker-word counts for perspective and tone,
punctuation splits for sentence and paragraph length, and a simplified
Flesch reading-ease score.

The readability score does not count syllables. It assumes
``SYLLABLES_PER_WORD_ESTIMATE`` syllables per word, so the syllable term is
a constant and the score varies with sentence length alone. Treat it as a
rough sentence-length indicator, not a real Flesch score.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Sequence

from site_audit import config
from site_audit.models import AuditSection, ContentSnapshot
from site_audit.text_utils import average, count_words, post_html, round_half_up, strip_html

logger = config.get_logger("writing")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SAMPLE_SIZE = 20

# A perspective or tone must beat the runner-up by more than this factor
DOMINANCE_FACTOR = 2

SYLLABLES_PER_WORD_ESTIMATE = 1.5

MIN_SENTENCE_CHARS = 5
MIN_PARAGRAPH_CHARS = 10

BIGRAM_MIN_WORD_LENGTH = 4
BIGRAM_MIN_FREQUENCY = 3
COMMON_PHRASE_LIMIT = 10

UNKNOWN = "unknown"

FIRST_PERSON = re.compile(r"\b(i|we|our|my|us)\b", re.IGNORECASE)
SECOND_PERSON = re.compile(r"\b(you're|your|you)\b", re.IGNORECASE)
THIRD_PERSON = re.compile(r"\b(they|their|he|she|it)\b", re.IGNORECASE)

FORMAL_WORDS = re.compile(
    r"\b(furthermore|moreover|consequently|therefore|thus|hereby|accordingly)\b",
    re.IGNORECASE,
)
CASUAL_WORDS = re.compile(
    r"\b(awesome|cool|great|love|amazing|hey|totally|definitely|super|really)\b",
    re.IGNORECASE,
)

SUBHEADING_TAG = re.compile(r"<h[2-4]", re.IGNORECASE)
LIST_TAG = re.compile(r"<(ul|ol)", re.IGNORECASE)
IMAGE_TAG = re.compile(r"<img", re.IGNORECASE)
CTA_PHRASES = re.compile(
    r"call.to.action|subscribe|sign.up|buy.now|learn.more|get.started",
    re.IGNORECASE,
)

_SENTENCE_END = re.compile(r"[.!?]+")
_PARAGRAPH_BREAK = re.compile(r"\n\n+")
_EDGE_PUNCTUATION = "\"'.,;:!?()[]{}<>“”‘’…-"


@dataclass
class WritingStyleAnalysis(AuditSection):
    tone: str = UNKNOWN
    perspective: str = UNKNOWN
    avg_sentence_length: int = 0
    avg_paragraph_length: int = 0
    readability_score: int = 0
    uses_subheadings: bool = False
    uses_bullet_points: bool = False
    uses_images: bool = False
    uses_cta: bool = False
    common_phrases: List[str] = field(default_factory=list)
    writing_patterns: List[str] = field(default_factory=list)
    author_voice: str = UNKNOWN


# ---------------------------------------------------------------------------
# Classifiers
# ---------------------------------------------------------------------------


def classify_perspective(first: int, second: int, third: int) -> str:
    """
    Dominant narrative perspective, or "mixed" unless one count is more
    than twice the next highest.
    """
    ranked = sorted(
        (("first-person", first), ("second-person", second), ("third-person", third)),
        key=lambda pair: pair[1],
        reverse=True,
    )
    (label, top), (_, runner_up) = ranked[0], ranked[1]
    if top > runner_up * DOMINANCE_FACTOR:
        return label
    return "mixed"


def classify_tone(formal: int, casual: int) -> str:
    if formal > casual * DOMINANCE_FACTOR:
        return "formal"
    if casual > formal * DOMINANCE_FACTOR:
        return "casual"
    if casual > formal:
        return "friendly"
    return "professional"


def readability_score(total_words: int, total_sentences: int) -> int:
    """Simplified Flesch reading ease, clamped to 0-100."""
    words = total_words or 1
    sentences = total_sentences or 1
    syllables = words * SYLLABLES_PER_WORD_ESTIMATE
    score = 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)
    return max(0, min(100, round_half_up(score)))


def common_phrases(text: str) -> List[str]:
    """Word bigrams seen at least ``BIGRAM_MIN_FREQUENCY`` times, most frequent first."""
    words = []
    for token in text.lower().split():
        token = token.strip(_EDGE_PUNCTUATION)
        if len(token) >= BIGRAM_MIN_WORD_LENGTH:
            words.append(token)

    bigrams = Counter(f"{a} {b}" for a, b in zip(words, words[1:]))
    frequent = [(phrase, n) for phrase, n in bigrams.items() if n >= BIGRAM_MIN_FREQUENCY]
    frequent.sort(key=lambda pair: pair[1], reverse=True)
    return [phrase for phrase, _ in frequent[:COMMON_PHRASE_LIMIT]]


def _split_units(texts: Sequence[str], splitter: "re.Pattern[str]", min_chars: int) -> List[str]:
    units = []
    for text in texts:
        units.extend(u for u in splitter.split(text) if len(u.strip()) > min_chars)
    return units


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def analyze_writing_style(snapshot: ContentSnapshot) -> WritingStyleAnalysis:
    sample = snapshot.posts[:SAMPLE_SIZE]
    if not sample:
        return WritingStyleAnalysis()

    html_samples = [post_html(p) for p in sample]
    texts = [strip_html(h) for h in html_samples]
    all_text = " ".join(texts).lower()

    perspective = classify_perspective(
        len(FIRST_PERSON.findall(all_text)),
        len(SECOND_PERSON.findall(all_text)),
        len(THIRD_PERSON.findall(all_text)),
    )
    tone = classify_tone(len(FORMAL_WORDS.findall(all_text)), len(CASUAL_WORDS.findall(all_text)))

    sentences = _split_units(texts, _SENTENCE_END, MIN_SENTENCE_CHARS)
    paragraphs = _split_units(texts, _PARAGRAPH_BREAK, MIN_PARAGRAPH_CHARS)
    avg_sentence = average([count_words(s) for s in sentences])
    avg_paragraph = average([count_words(p) for p in paragraphs])

    uses_subheadings = any(SUBHEADING_TAG.search(h) for h in html_samples)
    uses_lists = any(LIST_TAG.search(h) for h in html_samples)
    uses_images = any(IMAGE_TAG.search(h) for h in html_samples)
    uses_cta = any(CTA_PHRASES.search(h) for h in html_samples)

    analysis = WritingStyleAnalysis(
        tone=tone,
        perspective=perspective,
        avg_sentence_length=avg_sentence,
        avg_paragraph_length=avg_paragraph,
        readability_score=readability_score(sum(count_words(t) for t in texts), len(sentences)),
        uses_subheadings=uses_subheadings,
        uses_bullet_points=uses_lists,
        uses_images=uses_images,
        uses_cta=uses_cta,
        common_phrases=common_phrases(all_text),
        writing_patterns=[
            "Uses H2/H3 subheadings" if uses_subheadings else "Minimal subheadings",
            "Uses bullet/numbered lists" if uses_lists else "Prose-heavy style",
            "Integrates images in content" if uses_images else "Text-focused",
            "Includes calls to action" if uses_cta else "No clear CTAs",
            f"Avg {avg_sentence} words/sentence",
            f"Avg {avg_paragraph} words/paragraph",
        ],
        author_voice=f"{tone}, {perspective} perspective",
    )
    logger.debug("Writing: tone=%s perspective=%s sample=%d", tone, perspective, len(sample))
    return analysis
