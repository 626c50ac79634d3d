"""Tests for plugin categorization and stack detection."""

import pytest

from site_audit.models import ContentSnapshot
from site_audit.technical_analyzer import analyze_technical, categorize_plugin


class TestCategorize:

    @pytest.mark.unit
    @pytest.mark.parametrize("name,expected", [
        ("Yoast SEO", "SEO"),
        ("WP Rocket", "Performance"),
        ("Wordfence Security", "Security"),
        ("Contact Form 7", "Forms"),
        ("WooCommerce", "E-Commerce"),
        ("Site Kit by Google", "Analytics"),
        ("UpdraftPlus Backup", "Backup"),
        ("Elementor", "Page Builder"),
        ("WPML Multilingual CMS", "Multilingual"),
        ("Social Warfare", "Social"),
        ("Smush Image Compression", "Media"),
        ("Hello Dolly", "Other"),
    ])
    def test_categories(self, name, expected):
        assert categorize_plugin(name) == expected

    @pytest.mark.unit
    def test_first_match_wins(self):
        # Matches both SEO ("sitemap") and Analytics ("google")
        assert categorize_plugin("Google XML Sitemaps") == "SEO"


class TestAnalyzeTechnical:

    @pytest.mark.unit
    def test_stack(self, wp_plugins, wp_themes):
        snap = ContentSnapshot.build(
            plugins=wp_plugins, themes=wp_themes, site_url="https://testsite.com"
        )
        result = analyze_technical(snap)

        assert [p.name for p in result.active_plugins] == ["Yoast SEO", "Elementor", "WP Rocket"]
        assert result.active_plugins[2].category == "Performance"
        assert result.cache_plugin == "WP Rocket"
        assert result.security_plugin is None
        assert result.active_theme.name == "Astra Child"
        assert result.ssl_enabled is True
        assert result.wp_version == "unknown"

    @pytest.mark.unit
    def test_empty(self, empty_snapshot):
        result = analyze_technical(empty_snapshot)
        assert result.active_plugins == []
        assert result.active_theme.name == "Unknown"
        assert result.ssl_enabled is False
        assert result.to_dict()["activeTheme"] == {"name": "Unknown", "version": "Unknown"}
