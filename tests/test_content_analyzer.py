"""Tests for content statistics, niche classification and title patterns."""

import pytest

from site_audit.content_analyzer import analyze_content, detect_content_types, detect_niche
from site_audit.models import ContentSnapshot


class TestNicheDetection:

    @pytest.mark.unit
    def test_travel_site(self, travel_snapshot):
        result = analyze_content(travel_snapshot)
        assert result.niche == "Travel & Tourism"
        assert result.content_patterns.uses_listicles is True
        assert result.content_patterns.uses_guides is True

    @pytest.mark.unit
    def test_no_keywords_is_general(self):
        assert detect_niche(["zzz qqq", "lorem ipsum"]) == "General"

    @pytest.mark.unit
    def test_tie_goes_to_first_niche(self):
        # One hit each for Travel ("hotel") and Food ("recipe")
        assert detect_niche(["recipe", "hotel"]) == "Travel & Tourism"

    @pytest.mark.unit
    def test_prefix_matches_count(self):
        # "recipes", "cooking" and "chefs" all hit Food keywords
        assert detect_niche(["easy recipes", "cooking with chefs", "hotel"]) == "Food & Restaurant"

    @pytest.mark.unit
    def test_deterministic(self, travel_snapshot):
        niches = {analyze_content(travel_snapshot).niche for _ in range(5)}
        assert niches == {"Travel & Tourism"}


class TestContentTypes:

    @pytest.mark.unit
    def test_counts_per_type(self):
        titles = [
            "10 best beaches in spain",
            "7 tips for packing light",
            "how to pack a carry-on",
            "paris vs rome: which to visit",
            "hotel review: the savoy",
        ]
        patterns, types = detect_content_types(titles)
        counts = {t.type: t.count for t in types}

        assert counts["listicle"] == 2
        assert counts["how-to"] == 1
        assert counts["comparison"] == 1
        assert counts["review"] == 1
        assert "guide" not in counts
        assert patterns.uses_guides is False
        assert patterns.uses_comparisons is True

    @pytest.mark.unit
    def test_vs_needs_word_boundary(self):
        patterns, _ = detect_content_types(["gadgets for devs"])
        assert patterns.uses_comparisons is False


class TestContentStats:

    @pytest.mark.unit
    def test_word_counts_and_reading_time(self, make_post):
        posts = [
            make_post(1, content="<p>" + "word " * 300 + "</p>"),
            make_post(2, content="<p>" + "word " * 100 + "</p>"),
        ]
        result = analyze_content(ContentSnapshot.build(posts=posts))
        assert result.avg_word_count == 200
        assert result.min_word_count == 100
        assert result.max_word_count == 300
        assert result.avg_reading_time == "1 min"

    @pytest.mark.unit
    def test_category_and_tag_ranking(self, make_post):
        posts = [
            make_post(1, categories=[1, 2]),
            make_post(2, categories=[2]),
            make_post(3, categories=[2, 99]),
        ]
        categories = [
            {"id": 1, "name": "Hotels", "count": 1},
            {"id": 2, "name": "Food", "count": 3},
            {"id": 3, "name": "Nightlife", "count": 0},
        ]
        tags = [{"id": i, "name": f"tag{i}", "count": i} for i in range(1, 21)]
        result = analyze_content(ContentSnapshot.build(posts=posts, categories=categories, tags=tags))

        assert [(c.name, c.count, c.percentage) for c in result.top_categories] == [
            ("Food", 3, 100),
            ("Hotels", 1, 33),
        ]
        assert result.sub_niches == ["Food", "Hotels"]
        assert len(result.top_tags) == 15
        assert result.top_tags[0].name == "tag20"
        assert result.content_gaps == ["Nightlife"]

    @pytest.mark.unit
    def test_empty_corpus(self, empty_snapshot):
        result = analyze_content(empty_snapshot)
        assert result.niche == "General"
        assert result.avg_word_count == 0
        assert result.min_word_count == 0
        assert result.avg_reading_time == "0 min"
        assert result.top_categories == []
        assert result.content_types == []

    @pytest.mark.unit
    def test_malformed_posts(self):
        posts = [{"id": 1, "title": None, "content": "raw", "categories": "x"}, {"id": 2}]
        result = analyze_content(ContentSnapshot.build(posts=posts))
        assert result.avg_word_count == 1
        assert result.top_categories == []
