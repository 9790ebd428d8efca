"""Process-wide service instances, exposed as FastAPI dependencies."""

from functools import lru_cache

from app.config import Settings, get_settings
from app.models.content import SiteSettings
from app.services.cache import PageCache, TTLCache
from app.services.content import ContentService
from app.services.graphql import GraphQLClient
from app.services.revalidation import RevalidationCoordinator
from app.services.seo import SiteDefaults


@lru_cache()
def get_response_cache() -> TTLCache:
    settings = get_settings()
    return TTLCache(ttl=settings.cache_ttl_seconds, maxsize=settings.cache_max_entries)


@lru_cache()
def get_page_cache() -> PageCache:
    settings = get_settings()
    return PageCache(ttl=settings.cache_ttl_seconds, maxsize=settings.cache_max_entries)


def get_site_defaults() -> SiteDefaults:
    return SiteDefaults.from_settings(get_settings())


@lru_cache()
def get_content_service() -> ContentService:
    """Build the content service; raises ConfigurationError without an endpoint."""
    settings: Settings = get_settings()
    client = GraphQLClient.from_settings(settings, cache=get_response_cache())
    defaults = SiteSettings(
        title=settings.site_name,
        description=settings.site_description,
        url=settings.site_url,
    )
    return ContentService(client, defaults)


def get_coordinator() -> RevalidationCoordinator:
    token = get_settings().revalidate_token
    return RevalidationCoordinator(
        secret=token.get_secret_value() if token is not None else None,
        page_cache=get_page_cache(),
        response_cache=get_response_cache(),
    )


def reset_dependencies() -> None:
    """Drop every cached instance (used by tests and after settings changes)."""
    get_response_cache.cache_clear()
    get_page_cache.cache_clear()
    get_content_service.cache_clear()
