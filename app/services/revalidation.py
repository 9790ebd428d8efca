"""Webhook-triggered invalidation of cached blog renders."""

import hmac
import logging
import time
from typing import Callable, List, Optional

from app.errors import AuthenticationError, ConfigurationError
from app.models.revalidate import InvalidatedPaths
from app.services.cache import PageCache, ResponseCache
from app.services.seo import BLOG_PREFIX, post_path

logger = logging.getLogger(__name__)

INDEX_PATH = BLOG_PREFIX
SITEMAP_PATH = f"{BLOG_PREFIX}/sitemap.xml"


def paths_for(slug: Optional[str], content_type: str = "post") -> List[str]:
    """Return the paths affected by a change to *slug* (or a global refresh when absent)."""
    paths = [INDEX_PATH, SITEMAP_PATH]
    if slug and content_type == "post":
        paths.insert(0, post_path(slug))
    return paths


class RevalidationCoordinator:
    """Authenticate revalidation requests and drop the affected cached renders.

    Invalidation is idempotent: dropping a path that is not cached is a no-op.
    The upstream response cache is cleared as well, otherwise the next render
    would be rebuilt from the same cached payload.
    """

    def __init__(
        self,
        secret: Optional[str],
        page_cache: PageCache,
        response_cache: Optional[ResponseCache] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self.page_cache = page_cache
        self.response_cache = response_cache
        self._clock = clock

    def authenticate(self, presented: Optional[str]) -> None:
        """Check *presented* against the configured secret.

        Raises:
            ConfigurationError: when no secret is configured on the server.
            AuthenticationError: when *presented* is missing or wrong.
        """
        if not self._secret:
            logger.error("Revalidation requested but no revalidation token is configured")
            raise ConfigurationError("Revalidation token not configured")
        if not presented or not hmac.compare_digest(presented.encode(), self._secret.encode()):
            logger.warning("Revalidation rejected: invalid token")
            raise AuthenticationError("Invalid token")

    def invalidate(
        self,
        secret: Optional[str],
        slug: Optional[str] = None,
        content_type: str = "post",
        method: str = "POST",
    ) -> InvalidatedPaths:
        """Authenticate, then mark every path affected by *slug* as stale."""
        self.authenticate(secret)

        paths = paths_for(slug, content_type)
        dropped = self.page_cache.invalidate(paths)
        if self.response_cache is not None:
            self.response_cache.clear()

        logger.info("Revalidated paths %s (%d cached renders dropped)", paths, len(dropped))
        return InvalidatedPaths(
            revalidated=True,
            now=int(self._clock() * 1000),
            paths=paths,
            method=method,
        )
