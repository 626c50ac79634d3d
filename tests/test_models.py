"""Tests for the content snapshot and section serialization."""

from dataclasses import dataclass, field
from typing import List

import pytest

from site_audit.models import AuditSection, ContentSnapshot, camel_key


@dataclass
class _Inner(AuditSection):
    has_webp: bool = True


@dataclass
class _Outer(AuditSection):
    posts_with_meta_desc: int = 3
    uses_cta: bool = False
    items: List[_Inner] = field(default_factory=lambda: [_Inner()])


class TestSerialization:

    @pytest.mark.unit
    def test_camel_key(self):
        assert camel_key("posts_with_meta_desc") == "postsWithMetaDesc"
        assert camel_key("niche") == "niche"
        assert camel_key("uses_cta") == "usesCTA"

    @pytest.mark.unit
    def test_to_dict_is_recursive(self):
        assert _Outer().to_dict() == {
            "postsWithMetaDesc": 3,
            "usesCTA": False,
            "items": [{"hasWebP": True}],
        }


class TestContentSnapshot:

    @pytest.mark.unit
    def test_build_defaults_are_empty(self):
        snap = ContentSnapshot.build()
        assert snap.posts == ()
        assert snap.settings == {}
        assert snap.media_total == 0
        assert snap.active_theme is None

    @pytest.mark.unit
    def test_build_coerces_junk(self):
        snap = ContentSnapshot.build(posts=None, pages="oops", tags=[{"id": 1}, "bad"], settings=[])
        assert snap.posts == ()
        assert snap.pages == ()
        assert snap.tags == ({"id": 1},)
        assert snap.settings == {}

    @pytest.mark.unit
    def test_media_total_falls_back_to_page_size(self):
        snap = ContentSnapshot.build(media=[{"id": 1}, {"id": 2}], media_total=0)
        assert snap.media_total == 2
        snap = ContentSnapshot.build(media=[{"id": 1}], media_total=90)
        assert snap.media_total == 90

    @pytest.mark.unit
    def test_active_plugins_and_theme(self, wp_plugins, wp_themes):
        snap = ContentSnapshot.build(plugins=wp_plugins, themes=wp_themes)
        assert [p["name"] for p in snap.active_plugins] == ["Yoast SEO", "Elementor", "WP Rocket"]
        assert snap.active_theme["stylesheet"] == "astra-child"

    @pytest.mark.unit
    def test_snapshot_is_frozen(self):
        snap = ContentSnapshot.build()
        with pytest.raises(Exception):
            snap.posts = ({"id": 1},)
