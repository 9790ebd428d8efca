"""Content fetch layer: runs catalog queries and applies the degradation policy.

Secondary fetches (categories, related posts, site settings) degrade to
empty or default results on any upstream failure.  A failed primary fetch
for a detail page is reported as :class:`NotFoundError` so the page renders
as a regular 404.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.errors import FetchError, NormalizationError, NotFoundError
from app.models.content import ContentItem, ContentPage, SitemapPost, SiteSettings, Term
from app.services import queries
from app.services.graphql import GraphQLClient
from app.services.normalizer import (
    normalize,
    normalize_many,
    normalize_page,
    normalize_site_settings,
    normalize_sitemap,
    normalize_terms,
)

logger = logging.getLogger(__name__)

LISTING_PAGE_SIZE = 12
RELATED_COUNT = 3
SITEMAP_LIMIT = 1000


@dataclass
class Listing:
    page: ContentPage
    categories: List[Term]
    site: SiteSettings
    category: Optional[str] = None


@dataclass
class Detail:
    item: ContentItem
    related: List[ContentItem]


class ContentService:
    """High-level reads against the upstream content source."""

    def __init__(self, client: GraphQLClient, site_defaults: SiteSettings) -> None:
        self.client = client
        self.site_defaults = site_defaults

    async def _run(self, query: queries.QueryDescriptor, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            return await self.client.execute(query, variables)
        except FetchError as exc:
            logger.warning(
                "Upstream query %s failed (variables=%s): %s", query.name, variables or {}, exc
            )
            raise

    async def list_posts(
        self,
        category: Optional[str] = None,
        first: int = LISTING_PAGE_SIZE,
        after: Optional[str] = None,
    ) -> ContentPage:
        """Return one page of published posts, optionally filtered by category slug."""
        if category:
            query = queries.POSTS_BY_CATEGORY
            variables: Dict[str, Any] = {"category_slug": category, "first": first, "after": after}
        else:
            query = queries.ALL_POSTS
            variables = {"first": first, "after": after}
        try:
            data = await self._run(query, variables)
        except FetchError:
            return ContentPage()
        return normalize_page(data.get("posts"))

    async def list_categories(self) -> List[Term]:
        try:
            data = await self._run(queries.CATEGORIES)
        except FetchError:
            return []
        return normalize_terms(data.get("categories"))

    async def get_post(self, slug: str) -> ContentItem:
        """Return the post for *slug*.

        Raises:
            NotFoundError: when no post matches or the upstream fetch fails.
        """
        variables = {"slug": slug}
        try:
            data = await self._run(queries.POST_BY_SLUG, variables)
        except FetchError as exc:
            raise NotFoundError(slug) from exc

        raw = data.get("post")
        if not raw:
            raise NotFoundError(slug)
        try:
            return normalize(raw)
        except NormalizationError as exc:
            logger.warning("Post %s could not be normalised: %s", slug, exc)
            raise NotFoundError(slug) from exc

    async def related_posts(self, exclude_id: str, first: int = RELATED_COUNT) -> List[ContentItem]:
        try:
            data = await self._run(queries.RECENT_POSTS, {"first": first, "not_in": [exclude_id]})
        except FetchError:
            return []
        posts = data.get("posts") or {}
        return normalize_many(posts.get("nodes"))

    async def sitemap_posts(self) -> List[SitemapPost]:
        """Return slug/modified pairs for every published post.

        Upstream failures propagate so the caller can fall back to an index-only sitemap.
        """
        data = await self._run(queries.POSTS_SITEMAP, {"first": SITEMAP_LIMIT})
        posts = data.get("posts") or {}
        return normalize_sitemap(posts.get("nodes"))

    async def site_settings(self) -> SiteSettings:
        try:
            data = await self._run(queries.SITE_SETTINGS)
        except FetchError:
            return self.site_defaults
        return normalize_site_settings(data.get("generalSettings"), self.site_defaults)

    async def listing(self, category: Optional[str] = None, after: Optional[str] = None) -> Listing:
        """Fetch a listing page, the category filter and site settings concurrently."""
        page, categories, site = await asyncio.gather(
            self.list_posts(category, after=after),
            self.list_categories(),
            self.site_settings(),
        )
        return Listing(page=page, categories=categories, site=site, category=category)

    async def detail(self, slug: str) -> Detail:
        """Fetch a post and its related posts.

        Related posts exclude the post itself, so they are requested once
        the post id is known.
        """
        item = await self.get_post(slug)
        related = await self.related_posts(item.id)
        return Detail(item=item, related=[r for r in related if r.id != item.id])

