"""
Shared fixtures for the site audit test suite.

Provides WordPress REST API payloads, snapshot factories and mock aiohttp
objects so that all tests run WITHOUT a live WordPress site.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from site_audit.models import ContentSnapshot


# ---------------------------------------------------------------------------
# WordPress payload factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_post():
    """Factory for WP REST API post records."""

    def _make(post_id=1, title="Test Post", content="<p>Test content</p>", **overrides):
        post = {
            "id": post_id,
            "date": "2026-02-14T10:00:00",
            "slug": f"post-{post_id}",
            "status": "publish",
            "type": "post",
            "link": f"https://testsite.com/post-{post_id}/",
            "title": {"rendered": title},
            "content": {"rendered": content},
            "excerpt": {"rendered": ""},
            "author": 1,
            "featured_media": 0,
            "categories": [],
            "tags": [],
        }
        post.update(overrides)
        return post

    return _make


@pytest.fixture
def make_page():
    """Factory for WP REST API page records."""

    def _make(page_id, title, slug, parent=0):
        return {
            "id": page_id,
            "slug": slug,
            "parent": parent,
            "title": {"rendered": title},
            "content": {"rendered": ""},
        }

    return _make


@pytest.fixture
def wp_settings():
    return {
        "title": "Test Travel Blog",
        "url": "https://testsite.com",
        "language": "en-US",
        "timezone_string": "Europe/London",
        "posts_per_page": 12,
    }


@pytest.fixture
def wp_plugins():
    return [
        {"plugin": "wordpress-seo/wp-seo", "name": "Yoast SEO", "version": "22.0", "status": "active"},
        {"plugin": "elementor/elementor", "name": "Elementor", "version": "3.20.0", "status": "active"},
        {"plugin": "wp-rocket/wp-rocket", "name": "WP Rocket", "version": "3.15", "status": "active"},
        {"plugin": "wordfence/wordfence", "name": "Wordfence Security", "version": "7.11", "status": "inactive"},
    ]


@pytest.fixture
def wp_themes():
    return [
        {
            "stylesheet": "astra-child",
            "template": "astra",
            "name": {"rendered": "Astra Child"},
            "version": "1.0.0",
            "status": "active",
        },
        {
            "stylesheet": "twentytwentyfour",
            "template": "twentytwentyfour",
            "name": {"rendered": "Twenty Twenty-Four"},
            "version": "1.1",
            "status": "inactive",
        },
    ]


@pytest.fixture
def travel_snapshot(make_post):
    """Three travel posts in a "Travel" category."""
    posts = [
        make_post(1, "10 Best Hotels in London", categories=[5]),
        make_post(2, "Top 5 Things to Do", categories=[5]),
        make_post(3, "Ultimate Guide to Camden", categories=[5]),
    ]
    categories = [{"id": 5, "name": "Travel", "count": 3}]
    return ContentSnapshot.build(posts=posts, categories=categories)


@pytest.fixture
def empty_snapshot():
    return ContentSnapshot.build()


# ---------------------------------------------------------------------------
# Site registry fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def site_registry():
    """Return test site registry data."""
    return {
        "sites": [
            {
                "id": "travelblog",
                "domain": "travelblog.com",
                "wp_user": "testuser",
                "wp_app_password_env": "WP_TEST_TRAVEL_PASSWORD",
            },
            {
                "id": "foodblog",
                "api_url": "https://food.example.com/wp-json/wp/v2/",
                "wp_user": "cook",
                "wp_app_password_env": "WP_TEST_FOOD_PASSWORD",
            },
        ],
    }


@pytest.fixture
def site_registry_file(tmp_path, site_registry):
    """Write site registry to a temp JSON file and return its path."""
    path = tmp_path / "site-registry.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(site_registry, f)
    return path


# ---------------------------------------------------------------------------
# HTTP mock fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_aiohttp_response():
    """Create a mock aiohttp response factory."""

    def _make(status=200, json_data=None, text="", headers=None):
        resp = AsyncMock()
        resp.status = status
        resp.json = AsyncMock(return_value=json_data if json_data is not None else {})
        resp.text = AsyncMock(return_value=text)
        resp.headers = headers or {"Content-Type": "application/json"}
        return resp

    return _make


@pytest.fixture
def make_mock_session():
    """Mock aiohttp session whose .request() yields the given responses in order.

    The client uses ``async with session.request(method, url, **kwargs) as resp``
    so each call returns an async context manager wrapping the next response.
    """

    def _make(*responses):
        queue = list(responses)
        session = AsyncMock()

        def _request(method, url, **kwargs):
            resp = queue.pop(0) if len(queue) > 1 else queue[0]
            ctx = AsyncMock()
            ctx.__aenter__ = AsyncMock(return_value=resp)
            ctx.__aexit__ = AsyncMock(return_value=False)
            return ctx

        session.request = MagicMock(side_effect=_request)
        session.close = AsyncMock()
        session.closed = False
        return session

    return _make
