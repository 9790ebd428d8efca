import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.dependencies import get_coordinator
from app.errors import AuthenticationError, ConfigurationError
from app.models.revalidate import InvalidatedPaths, RevalidateRequest
from app.services.revalidation import RevalidationCoordinator

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/api", tags=["Revalidation"])


def _run(
    coordinator: RevalidationCoordinator,
    secret: Optional[str],
    slug: Optional[str],
    content_type: str,
    method: str,
    rejection_message: str,
) -> InvalidatedPaths:
    """Invoke the coordinator and translate its failures into HTTP errors."""
    try:
        return coordinator.invalidate(secret, slug=slug or None, content_type=content_type, method=method)
    except ConfigurationError:
        raise HTTPException(status_code=500, detail="Revalidation token not configured")
    except AuthenticationError:
        logger.warning("Rejected revalidation request", extra={"slug": slug, "method": method})
        raise HTTPException(status_code=401, detail=rejection_message)


@router.post(
    "/revalidate",
    response_model=InvalidatedPaths,
    summary="Invalidate cached blog pages",
    description=(
        "Webhook target for the CMS.  With a `slug`, invalidates the post page, the blog "
        "index and the sitemap; without one, only the index and the sitemap.  Responds "
        "500 when no token is configured on the server and 401 when the token is wrong."
    ),
)
@limiter.limit("30/minute")
async def revalidate(
    request: Request,
    body: RevalidateRequest,
    coordinator: RevalidationCoordinator = Depends(get_coordinator),
) -> InvalidatedPaths:
    return _run(coordinator, body.secret, body.slug, body.type, "POST", "Invalid token")


@router.get(
    "/revalidate",
    response_model=InvalidatedPaths,
    summary="Invalidate cached blog pages (manual testing)",
)
@limiter.limit("30/minute")
async def revalidate_get(
    request: Request,
    secret: Optional[str] = Query(default=None),
    slug: Optional[str] = Query(default=None),
    coordinator: RevalidationCoordinator = Depends(get_coordinator),
) -> InvalidatedPaths:
    return _run(
        coordinator,
        secret,
        slug,
        "post",
        "GET",
        "Invalid token. Use ?secret=YOUR_TOKEN&slug=post-slug (optional)",
    )
