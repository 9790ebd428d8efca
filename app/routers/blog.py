import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response

from app.config import get_settings
from app.dependencies import get_content_service, get_page_cache, get_site_defaults
from app.errors import FetchError, NotFoundError
from app.models.blog_response import DetailResponse, ListingResponse
from app.services.cache import PageCache
from app.services.content import ContentService
from app.services.revalidation import SITEMAP_PATH
from app.services.robots import render_robots
from app.services.seo import (
    BLOG_PREFIX,
    SiteDefaults,
    article_json_ld,
    breadcrumb_json_ld,
    derive_metadata,
    listing_metadata,
    post_path,
)
from app.services.sitemap import build_sitemap, render_sitemap_xml

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Blog"])


def _cache_key(path: str, **params: Optional[str]) -> str:
    """Page-cache key: the path plus the route parameters that shape the render.

    Unrelated query-string parameters are ignored, so they cannot mint new entries.
    """
    query = urlencode(sorted((name, value) for name, value in params.items() if value))
    return f"{path}?{query}" if query else path


@router.get(
    "/blog",
    response_model=ListingResponse,
    summary="Blog index",
    description=(
        "Published posts (12 per page), optionally filtered by category slug, "
        "together with the non-empty categories and the index page's SEO metadata.  "
        "Upstream failures degrade to an empty listing."
    ),
)
async def blog_index(
    category: Optional[str] = Query(default=None, description="Category slug to filter by."),
    after: Optional[str] = Query(default=None, description="Pagination cursor."),
    service: ContentService = Depends(get_content_service),
    page_cache: PageCache = Depends(get_page_cache),
    site: SiteDefaults = Depends(get_site_defaults),
) -> ListingResponse:
    category = category or None
    key = _cache_key(BLOG_PREFIX, category=category, after=after)
    cached = page_cache.get(key)
    if cached is not None:
        return cached

    listing = await service.listing(category, after=after)
    response = ListingResponse(
        items=listing.page.items,
        page_info=listing.page.page_info,
        categories=listing.categories,
        category=listing.category,
        site=listing.site,
        seo=listing_metadata(site),
    )
    page_cache.set(key, response)
    return response


# Declared before /blog/{slug} so the slug route does not capture it
@router.get("/blog/sitemap.xml", summary="Blog sitemap", response_class=Response)
async def blog_sitemap(
    service: ContentService = Depends(get_content_service),
    page_cache: PageCache = Depends(get_page_cache),
    site: SiteDefaults = Depends(get_site_defaults),
) -> Response:
    body = page_cache.get(SITEMAP_PATH)
    if body is None:
        try:
            posts = await service.sitemap_posts()
        except FetchError as exc:
            logger.warning("Sitemap falling back to index-only: %s", exc)
            posts = None
        entries = build_sitemap(posts, site.base_url, datetime.now(timezone.utc))
        body = render_sitemap_xml(entries)
        page_cache.set(SITEMAP_PATH, body)
    return Response(content=body, media_type="application/xml")


@router.get(
    "/blog/{slug}",
    response_model=DetailResponse,
    summary="Blog post",
    description=(
        "A single post with up to three related posts, resolved SEO metadata, and "
        "Article and BreadcrumbList JSON-LD.  Returns 404 when the post cannot be found "
        "or fetched.  If the related-posts fetch fails, the related list is empty."
    ),
)
async def blog_post(
    slug: str,
    service: ContentService = Depends(get_content_service),
    page_cache: PageCache = Depends(get_page_cache),
    site: SiteDefaults = Depends(get_site_defaults),
) -> DetailResponse:
    key = _cache_key(post_path(slug))
    cached = page_cache.get(key)
    if cached is not None:
        return cached

    try:
        detail = await service.detail(slug)
    except NotFoundError:
        logger.info("Post not found: %s", slug)
        raise HTTPException(status_code=404, detail="Post not found")

    response = DetailResponse(
        item=detail.item,
        related=detail.related,
        seo=derive_metadata(detail.item, site),
        json_ld=article_json_ld(detail.item, site),
        breadcrumb_json_ld=breadcrumb_json_ld(detail.item, site),
    )
    page_cache.set(key, response)
    return response


@router.get("/robots.txt", response_class=PlainTextResponse, summary="robots.txt")
async def robots() -> str:
    return render_robots(get_settings().site_url)
