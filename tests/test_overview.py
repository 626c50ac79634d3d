"""Tests for the site overview section."""

import pytest

from site_audit.models import ContentSnapshot
from site_audit.overview import analyze_overview, classify_publish_frequency


class TestPublishFrequency:

    @pytest.mark.unit
    @pytest.mark.parametrize("per_week,expected", [
        (7, "~7 posts/week (daily)"),
        (10.4, "~10 posts/week (daily)"),
        (6.99, "~7 posts/week"),
        (1, "~1 posts/week"),
        (0.99, "~4 posts/month"),
        (0.5, "~2 posts/month"),
        (0, "~0 posts/month"),
    ])
    def test_boundaries(self, per_week, expected):
        assert classify_publish_frequency(per_week) == expected

    @pytest.mark.unit
    def test_weekly_from_post_dates(self, make_post):
        posts = [
            make_post(1, date="2026-01-01T09:00:00"),
            make_post(2, date="2026-01-15T09:00:00"),
        ]
        overview = analyze_overview(ContentSnapshot.build(posts=posts))
        assert overview.publish_frequency == "~1 posts/week"
        assert overview.oldest_post == "2026-01-01T09:00:00"
        assert overview.newest_post == "2026-01-15T09:00:00"

    @pytest.mark.unit
    def test_daily_from_post_dates(self, make_post):
        posts = [make_post(i, date=f"2026-03-{i:02d}T08:00:00") for i in range(1, 9)]
        overview = analyze_overview(ContentSnapshot.build(posts=posts))
        assert overview.publish_frequency == "~8 posts/week (daily)"

    @pytest.mark.unit
    def test_single_post_is_unknown(self, make_post):
        overview = analyze_overview(ContentSnapshot.build(posts=[make_post(1)]))
        assert overview.publish_frequency == "unknown"

    @pytest.mark.unit
    def test_one_dated_post_is_unknown(self, make_post):
        posts = [make_post(1), make_post(2, date=None)]
        overview = analyze_overview(ContentSnapshot.build(posts=posts))
        assert overview.publish_frequency == "unknown"
        assert overview.oldest_post == overview.newest_post


class TestOverview:

    @pytest.mark.unit
    def test_totals_and_settings(self, make_post, wp_settings):
        snap = ContentSnapshot.build(
            posts=[make_post(1), make_post(2)],
            drafts=[make_post(3, status="draft")],
            pages=[{"id": 10}],
            media=[{"id": 20}],
            media_total=57,
            categories=[{"id": 1}],
            tags=[{"id": 1}, {"id": 2}],
            users=[{"id": 1}],
            settings=wp_settings,
        )
        overview = analyze_overview(snap)

        assert overview.total_posts == 2
        assert overview.total_drafts == 1
        assert overview.total_pages == 1
        assert overview.total_media == 57
        assert overview.total_tags == 2
        assert overview.timezone == "Europe/London"
        assert overview.posts_per_page == 12

    @pytest.mark.unit
    def test_empty_defaults(self, empty_snapshot):
        overview = analyze_overview(empty_snapshot)
        assert overview.total_posts == 0
        assert overview.site_language == "en-US"
        assert overview.timezone == "UTC"
        assert overview.posts_per_page == 10
        assert overview.oldest_post is None
        assert overview.publish_frequency == "unknown"
        assert overview.to_dict()["totalPosts"] == 0
