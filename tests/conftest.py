"""Shared fixtures: upstream post payloads and environment isolation."""

import copy

import pytest

from app.config import reset_settings_cache
from app.dependencies import reset_dependencies

_WRAPPED_POST = {
    "id": "cG9zdDoxMjM=",
    "title": "Kitchen Remodel &#8211; A Guide",
    "slug": "kitchen-remodel",
    "content": "[vc_row]<p>Plan the layout first.</p><script>track()</script>[/vc_row]",
    "excerpt": "<p>Everything you need to know about remodeling [&hellip;]</p>\n",
    "date": "2024-03-01T09:30:00",
    "modified": "2024-03-05T12:00:00",
    "status": "publish",
    "author": {
        "node": {
            "id": "dXNlcjox",
            "name": "Jane Builder",
            "slug": "jane-builder",
            "avatar": {"url": "https://secure.gravatar.com/avatar/abc"},
            "description": "Contractor for 20 years.",
        }
    },
    "featuredImage": {
        "node": {
            "id": "img1",
            "sourceUrl": "https://cms.example.com/wp-content/uploads/kitchen.jpg",
            "altText": "",
            "caption": "<p>The finished kitchen</p>",
            "mediaDetails": {"width": 1600, "height": 900},
        }
    },
    "categories": {
        "nodes": [
            {"id": "cat1", "name": "Kitchens", "slug": "kitchens", "description": None, "count": 4},
        ]
    },
    "tags": {
        "nodes": [
            {"id": "tag1", "name": "Budget", "slug": "budget", "description": "", "count": 2},
            {"id": "tag2", "name": "Layout", "slug": "layout", "description": None, "count": None},
        ]
    },
    "seo": {
        "title": "Kitchen Remodel Guide | Cloud Renovation",
        "metaDesc": "How to plan a kitchen remodel.",
        "canonical": "https://cloudrenovation.ca/blog/kitchen-remodel-guide",
        "opengraphTitle": "OG Kitchen",
        "opengraphDescription": "OG description",
        "opengraphImage": {
            "sourceUrl": "https://cms.example.com/og-kitchen.jpg",
            "mediaDetails": {"width": 1200, "height": 628},
        },
        "twitterTitle": "Tweet Kitchen",
        "twitterDescription": "Tweet description",
        "twitterImage": {"sourceUrl": "https://cms.example.com/tw-kitchen.jpg"},
        "schema": {"raw": '{"@context":"https://schema.org","@graph":[]}'},
        "focuskw": "kitchen remodel",
        "metaRobotsNoindex": "noindex",
        "metaRobotsNofollow": "follow",
    },
}

_DIRECT_POST = {
    "id": "cG9zdDo0NTY=",
    "title": "Bathroom Tiles",
    "slug": "bathroom-tiles",
    "content": "<p>Tile choices.</p>",
    "excerpt": "Tile choices.",
    "date": "2024-02-01T08:00:00+00:00",
    "modified": "2024-02-01T08:00:00+00:00",
    "status": "publish",
    "author": {"id": "dXNlcjoy", "name": "Sam Tiler", "slug": "sam-tiler"},
    "featuredImage": None,
    "categories": [{"id": "cat2", "name": "Bathrooms", "slug": "bathrooms"}],
    "tags": None,
}


@pytest.fixture
def wrapped_post() -> dict:
    return copy.deepcopy(_WRAPPED_POST)


@pytest.fixture
def direct_post() -> dict:
    return copy.deepcopy(_DIRECT_POST)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Give every test a known environment and fresh process-wide caches."""
    monkeypatch.setenv("WP_GRAPHQL_ENDPOINT", "https://cms.example.com/graphql")
    monkeypatch.setenv("REVALIDATE_TOKEN", "s3cret")
    monkeypatch.setenv("SITE_URL", "https://cloudrenovation.ca")
    monkeypatch.delenv("NEXT_PUBLIC_WP_GRAPHQL_ENDPOINT", raising=False)
    reset_settings_cache()
    reset_dependencies()
    yield
    reset_settings_cache()
    reset_dependencies()
