"""Tests for tone, perspective, readability and phrase extraction."""

import pytest

from site_audit.models import ContentSnapshot
from site_audit.writing_style import (
    SAMPLE_SIZE,
    analyze_writing_style,
    classify_perspective,
    classify_tone,
    common_phrases,
    readability_score,
)


class TestClassifiers:

    @pytest.mark.unit
    @pytest.mark.parametrize("counts,expected", [
        ((10, 2, 3), "first-person"),
        ((2, 9, 4), "second-person"),
        ((1, 1, 5), "third-person"),
        ((6, 3, 1), "mixed"),
        ((5, 5, 0), "mixed"),
        ((0, 0, 0), "mixed"),
    ])
    def test_perspective(self, counts, expected):
        assert classify_perspective(*counts) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("formal,casual,expected", [
        (5, 2, "formal"),
        (1, 3, "casual"),
        (2, 3, "friendly"),
        (2, 2, "professional"),
        (0, 0, "professional"),
    ])
    def test_tone(self, formal, casual, expected):
        assert classify_tone(formal, casual) == expected

    @pytest.mark.unit
    def test_readability_uses_fixed_syllable_estimate(self):
        # 206.835 - 1.015 * 10 - 84.6 * 1.5 = 69.785
        assert readability_score(100, 10) == 70
        assert readability_score(0, 0) == 79
        assert readability_score(10000, 1) == 0

    @pytest.mark.unit
    def test_common_phrases(self):
        text = "Visit London today. " * 3 + "London today is sunny."
        assert common_phrases(text) == ["london today", "visit london"]

    @pytest.mark.unit
    def test_common_phrases_needs_three(self):
        assert common_phrases("great food great food") == []


class TestAnalyzeWritingStyle:

    @pytest.mark.unit
    def test_first_person_dominant(self, make_post):
        body = "<p>We went to the market and I bought bread for my family. Our trip was fun.</p>"
        posts = [make_post(i, content=body) for i in range(3)]
        result = analyze_writing_style(ContentSnapshot.build(posts=posts))
        assert result.perspective == "first-person"

    @pytest.mark.unit
    def test_balanced_mix(self, make_post):
        body = "<p>I think you will like it. We know your plans and they agree.</p>"
        result = analyze_writing_style(ContentSnapshot.build(posts=[make_post(1, content=body)]))
        assert result.perspective == "mixed"

    @pytest.mark.unit
    def test_features_and_stats(self, make_post):
        body = (
            "<h2>Packing</h2>"
            "<p>This is an awesome list of things. You should really pack light.</p>"
            "<ul><li>Passport</li></ul>"
            '<img src="a.jpg">'
            "<p>Subscribe to our newsletter for more travel tips.</p>"
        )
        result = analyze_writing_style(ContentSnapshot.build(posts=[make_post(1, content=body)]))

        assert result.uses_subheadings is True
        assert result.uses_bullet_points is True
        assert result.uses_images is True
        assert result.uses_cta is True
        assert result.tone == "casual"
        assert result.avg_sentence_length > 0
        assert result.avg_paragraph_length > 0
        assert result.author_voice == f"casual, {result.perspective} perspective"
        assert result.writing_patterns[0] == "Uses H2/H3 subheadings"
        assert result.to_dict()["usesCTA"] is True

    @pytest.mark.unit
    def test_only_first_posts_sampled(self, make_post):
        plain = [make_post(i, content="<p>Plain words only here.</p>") for i in range(SAMPLE_SIZE)]
        late = make_post(99, content="<h2>Late</h2><p>Heading after the sample.</p>")
        result = analyze_writing_style(ContentSnapshot.build(posts=plain + [late]))
        assert result.uses_subheadings is False

    @pytest.mark.unit
    def test_empty_corpus(self, empty_snapshot):
        result = analyze_writing_style(empty_snapshot)
        assert result.tone == "unknown"
        assert result.perspective == "unknown"
        assert result.author_voice == "unknown"
        assert result.readability_score == 0
        assert result.common_phrases == []
