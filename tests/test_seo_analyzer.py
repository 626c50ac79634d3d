"""Tests for SEO plugin detection and meta coverage."""

import pytest

from site_audit.models import ContentSnapshot
from site_audit.seo_analyzer import (
    analyze_seo,
    count_internal_links,
    detect_seo_plugin,
    seo_meta,
)


class TestPluginDetection:

    @pytest.mark.unit
    def test_priority_order(self):
        plugins = [{"name": "Rank Math SEO"}, {"name": "Yoast SEO"}]
        assert detect_seo_plugin(plugins) == "yoast"

    @pytest.mark.unit
    @pytest.mark.parametrize("name,expected", [
        ("Rank Math SEO", "rankmath"),
        ("All in One SEO Pack", "aioseo"),
        ("SEOPress", "seopress"),
        ("Hello Dolly", None),
    ])
    def test_providers(self, name, expected):
        assert detect_seo_plugin([{"name": name}]) == expected


class TestSeoMeta:

    @pytest.mark.unit
    def test_first_non_empty_source_wins(self):
        post = {
            "yoast_head_json": {},
            "rank_math": {"rank_math_title": "RM"},
            "meta": {"title": "generic"},
        }
        assert seo_meta(post) == {"rank_math_title": "RM"}

    @pytest.mark.unit
    def test_no_metadata(self):
        assert seo_meta({"meta": []}) == {}


class TestAnalyzeSeo:

    @pytest.mark.unit
    def test_coverage(self, make_post, wp_plugins):
        posts = [
            make_post(1, yoast_head_json={
                "title": "Best Hotels in London",
                "description": "Where to stay in London.",
                "focuskw": "london hotels",
            }),
            make_post(2, meta={"_yoast_wpseo_title": "Camden Guide", "_yoast_wpseo_metadesc": ["Camden"]}),
            make_post(3, meta={}),
            make_post(4),
        ]
        result = analyze_seo(ContentSnapshot.build(posts=posts, plugins=wp_plugins))

        assert result.seo_plugin == "yoast"
        assert result.posts_with_meta_title == 2
        assert result.posts_with_meta_desc == 2
        assert result.posts_with_focus_keyword == 1
        assert result.meta_desc_coverage == 50
        assert result.focus_keyword_coverage == 25
        assert result.avg_title_length == 17
        assert result.schema_markup is True
        assert result.has_sitemap is True
        assert result.og_tags is True

    @pytest.mark.unit
    def test_no_plugin(self, make_post):
        result = analyze_seo(ContentSnapshot.build(posts=[make_post(1)]))
        assert result.seo_plugin is None
        assert result.has_sitemap is False
        assert result.schema_markup is False
        assert result.has_robots_txt is True

    @pytest.mark.unit
    def test_aioseo_has_no_schema(self):
        result = analyze_seo(ContentSnapshot.build(plugins=[{"name": "All in One SEO"}]))
        assert result.seo_plugin == "aioseo"
        assert result.schema_markup is False
        assert result.canonical_urls is True

    @pytest.mark.unit
    def test_empty(self, empty_snapshot):
        result = analyze_seo(empty_snapshot)
        assert result.posts_with_meta_title == 0
        assert result.meta_title_coverage == 0
        assert result.internal_linking_avg == 0


class TestInternalLinks:

    @pytest.mark.unit
    def test_counts_relative_and_same_host(self):
        html = (
            '<a href="/about/">About</a>'
            '<a href="https://testsite.com/post-2/">Post</a>'
            '<a href="https://other.com/">Other</a>'
            '<a href="#top">Top</a>'
        )
        assert count_internal_links(html, "testsite.com") == 2

    @pytest.mark.unit
    def test_average_per_post(self, make_post):
        posts = [
            make_post(1, content='<p><a href="/a/">a</a><a href="/b/">b</a><a href="/c/">c</a></p>'),
            make_post(2, content="<p>none</p>"),
        ]
        snap = ContentSnapshot.build(posts=posts, site_url="https://testsite.com")
        assert analyze_seo(snap).internal_linking_avg == 2
