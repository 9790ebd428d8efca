"""Sitemap generation for the blog index and published posts."""

from datetime import datetime
from typing import Iterable, List, Optional
from xml.etree import ElementTree

from app.models.content import SitemapPost
from app.models.sitemap import SitemapEntry
from app.services.seo import BLOG_PREFIX, post_path

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

_INDEX_FREQUENCY = "daily"
_INDEX_PRIORITY = 0.8
_POST_FREQUENCY = "weekly"
_POST_PRIORITY = 0.7


def build_sitemap(
    posts: Optional[Iterable[SitemapPost]],
    base_url: str,
    now: datetime,
) -> List[SitemapEntry]:
    """Return the sitemap entries: the blog index first, then one per post.

    Pass ``posts=None`` when the upstream fetch failed; the result then holds
    only the index entry.
    """
    base = base_url.rstrip("/")
    entries = [
        SitemapEntry(
            url=f"{base}{BLOG_PREFIX}",
            last_modified=now,
            change_frequency=_INDEX_FREQUENCY,
            priority=_INDEX_PRIORITY,
        )
    ]
    for post in posts or ():
        entries.append(
            SitemapEntry(
                url=f"{base}{post_path(post.slug)}",
                last_modified=post.modified,
                change_frequency=_POST_FREQUENCY,
                priority=_POST_PRIORITY,
            )
        )
    return entries


def render_sitemap_xml(entries: Iterable[SitemapEntry]) -> str:
    """Serialise *entries* as a sitemaps.org ``<urlset>`` document."""
    ElementTree.register_namespace("", SITEMAP_NS)
    urlset = ElementTree.Element(f"{{{SITEMAP_NS}}}urlset")
    for entry in entries:
        url = ElementTree.SubElement(urlset, f"{{{SITEMAP_NS}}}url")
        ElementTree.SubElement(url, f"{{{SITEMAP_NS}}}loc").text = entry.url
        ElementTree.SubElement(url, f"{{{SITEMAP_NS}}}lastmod").text = entry.last_modified.isoformat()
        ElementTree.SubElement(url, f"{{{SITEMAP_NS}}}changefreq").text = entry.change_frequency
        ElementTree.SubElement(url, f"{{{SITEMAP_NS}}}priority").text = f"{entry.priority:.1f}"
    body = ElementTree.tostring(urlset, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body
