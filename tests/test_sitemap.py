"""Tests for sitemap and robots.txt generation."""

from datetime import datetime, timezone
from xml.etree import ElementTree

from app.models.content import SitemapPost
from app.services.robots import render_robots
from app.services.sitemap import SITEMAP_NS, build_sitemap, render_sitemap_xml

BASE = "https://cloudrenovation.ca"
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

_POSTS = [
    SitemapPost(slug="kitchen-remodel", modified=datetime(2024, 3, 5, tzinfo=timezone.utc)),
    SitemapPost(slug="bathroom-tiles", modified=datetime(2024, 2, 1, tzinfo=timezone.utc)),
]


class TestBuildSitemap:
    def test_index_entry_comes_first(self):
        entries = build_sitemap(_POSTS, BASE, NOW)
        index = entries[0]
        assert index.url == f"{BASE}/blog"
        assert index.last_modified == NOW
        assert index.change_frequency == "daily"
        assert index.priority == 0.8

    def test_one_entry_per_post(self):
        entries = build_sitemap(_POSTS, BASE + "/", NOW)
        assert [e.url for e in entries[1:]] == [
            f"{BASE}/blog/kitchen-remodel",
            f"{BASE}/blog/bathroom-tiles",
        ]
        assert entries[1].last_modified == _POSTS[0].modified
        assert all(e.change_frequency == "weekly" and e.priority == 0.7 for e in entries[1:])

    def test_failed_fetch_gives_index_only(self):
        entries = build_sitemap(None, BASE, NOW)
        assert len(entries) == 1
        assert entries[0].url == f"{BASE}/blog"

    def test_no_posts_gives_index_only(self):
        assert len(build_sitemap([], BASE, NOW)) == 1


class TestRenderSitemapXml:
    def test_urlset_document(self):
        xml = render_sitemap_xml(build_sitemap(_POSTS, BASE, NOW))
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')

        root = ElementTree.fromstring(xml.split("\n", 1)[1])
        assert root.tag == f"{{{SITEMAP_NS}}}urlset"
        urls = root.findall(f"{{{SITEMAP_NS}}}url")
        assert len(urls) == 3

        first = urls[1]
        assert first.findtext(f"{{{SITEMAP_NS}}}loc") == f"{BASE}/blog/kitchen-remodel"
        assert first.findtext(f"{{{SITEMAP_NS}}}lastmod") == "2024-03-05T00:00:00+00:00"
        assert first.findtext(f"{{{SITEMAP_NS}}}changefreq") == "weekly"
        assert first.findtext(f"{{{SITEMAP_NS}}}priority") == "0.7"


class TestRobots:
    def test_policy_lines(self):
        lines = render_robots(BASE + "/").splitlines()
        assert lines[:2] == ["User-agent: *", "Allow: /"]
        for rule in ("Disallow: /api/", "Disallow: /admin/", "Disallow: /*.json$", "Disallow: /*?*"):
            assert rule in lines

    def test_sitemaps_and_host(self):
        lines = render_robots(BASE).splitlines()
        assert f"Sitemap: {BASE}/sitemap.xml" in lines
        assert f"Sitemap: {BASE}/blog/sitemap.xml" in lines
        assert lines[-1] == f"Host: {BASE}"
