"""Normalisation of WPGraphQL post payloads into :class:`ContentItem`.

The upstream returns nested relations either wrapped (``{"node": {...}}``,
``{"nodes": [...]}``) or direct depending on the query and plugin versions.
Everything here resolves that variance once, so callers only ever see the
flat model.  Inputs are never mutated.
"""

import html
import logging
import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from app.errors import NormalizationError
from app.models.content import (
    Author,
    ContentItem,
    ContentPage,
    ImageDescriptor,
    PageInfo,
    SeoImage,
    SeoOverride,
    SitemapPost,
    SiteSettings,
    Term,
)
from app.services.sanitizer import clean_body, to_plain_text

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)

_STATUS_MAP = {
    "publish": "published",
    "published": "published",
    "draft": "draft",
    "pending": "draft",
    "future": "draft",
    "private": "private",
}

# Internal SeoOverride field -> provider (Yoast via WPGraphQL) field name
_SEO_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("title", "title"),
    ("description", "metaDesc"),
    ("canonical", "canonical"),
    ("og_title", "opengraphTitle"),
    ("og_description", "opengraphDescription"),
    ("twitter_title", "twitterTitle"),
    ("twitter_description", "twitterDescription"),
    ("focus_keyword", "focuskw"),
)


def generate_slug(text: str) -> str:
    """Generate a clean URL slug from *text*.

    The slug is lowercased, ASCII-only, and uses hyphens as separators.
    """
    slug = unicodedata.normalize("NFKD", text)
    slug = slug.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", slug.lower())
    return slug.strip("-")


# ---------------------------------------------------------------------------
# Wrapper resolution
# ---------------------------------------------------------------------------

def _unwrap_node(value: Any) -> Optional[Dict[str, Any]]:
    """Resolve ``{"node": {...}}`` to its inner object; pass direct objects through."""
    if isinstance(value, dict) and "node" in value:
        value = value["node"]
    return value if isinstance(value, dict) and value else None


def _unwrap_nodes(value: Any) -> List[Dict[str, Any]]:
    """Resolve ``{"nodes": [...]}`` or a bare list to a plain list; absent becomes ``[]``."""
    if isinstance(value, dict):
        value = value.get("nodes")
    if not isinstance(value, list):
        return []
    return [_unwrap_node(v) for v in value if _unwrap_node(v) is not None]


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        parsed = _DATETIME.validate_python(value)
    except ValidationError:
        return None
    # WPGraphQL omits the offset on ``date``/``modified``; treat those as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Nested entities
# ---------------------------------------------------------------------------

def normalize_image(raw: Any, fallback_alt: Optional[str] = None) -> Optional[ImageDescriptor]:
    """Normalise a featured-image payload; returns ``None`` when there is no usable source URL."""
    node = _unwrap_node(raw)
    if node is None:
        return None
    url = _text(node.get("sourceUrl")) or _text(node.get("url"))
    if not url:
        return None

    details = node.get("mediaDetails")
    if isinstance(details, dict):
        width, height = _int(details.get("width")), _int(details.get("height"))
    else:
        width, height = _int(node.get("width")), _int(node.get("height"))

    alt = _text(node.get("altText")) if "altText" in node else _text(node.get("alt"))
    caption = node.get("caption")
    return ImageDescriptor(
        url=url,
        alt=alt or fallback_alt,
        caption=to_plain_text(caption) or None if caption else None,
        width=width,
        height=height,
    )


def normalize_author(raw: Any) -> Optional[Author]:
    node = _unwrap_node(raw)
    if node is None or not _text(node.get("name")):
        return None
    name = _text(node.get("name")) or ""
    bio = node.get("bio") if "bio" in node else node.get("description")
    return Author(
        id=str(node.get("id") or ""),
        name=name,
        slug=_text(node.get("slug")) or generate_slug(name),
        avatar=normalize_image(node.get("avatar"), fallback_alt=name),
        bio=_text(bio),
    )


def normalize_term(raw: Any) -> Optional[Term]:
    node = _unwrap_node(raw)
    if node is None:
        return None
    name = _text(node.get("name"))
    slug = _text(node.get("slug")) or (generate_slug(name) if name else None)
    if not name or not slug:
        return None
    return Term(
        id=str(node.get("id") or slug),
        name=name,
        slug=slug,
        description=_text(node.get("description")),
        count=_int(node.get("count")),
    )


def normalize_terms(raw: Any) -> List[Term]:
    """Normalise a category/tag collection, preserving upstream order."""
    terms = (normalize_term(node) for node in _unwrap_nodes(raw))
    return [t for t in terms if t is not None]


def _seo_image(raw: Any) -> Optional[SeoImage]:
    image = normalize_image(raw)
    if image is None:
        return None
    return SeoImage(url=image.url, width=image.width, height=image.height)


def _robots_flag(value: Any, directive: str) -> bool:
    # Yoast reports "noindex"/"index" strings; older schemas use booleans
    if isinstance(value, str):
        return value.strip().lower() == directive
    return bool(value)


def normalize_seo(raw: Any) -> Optional[SeoOverride]:
    """Map a provider SEO block onto :class:`SeoOverride`.

    Accepts either provider field names or the internal names.  Returns
    ``None`` when the block carries no usable value at all.
    """
    if not isinstance(raw, dict):
        return None

    def pick(internal: str, provider: str) -> Any:
        return raw[provider] if provider in raw else raw.get(internal)

    fields: Dict[str, Any] = {
        internal: _text(pick(internal, provider)) for internal, provider in _SEO_FIELDS
    }
    fields["og_image"] = _seo_image(pick("og_image", "opengraphImage"))
    fields["twitter_image"] = _seo_image(pick("twitter_image", "twitterImage"))

    schema = raw.get("schema", raw.get("schema_raw"))
    if isinstance(schema, dict):
        schema = schema.get("raw")
    fields["schema_raw"] = schema if isinstance(schema, str) and schema.strip() else None

    fields["noindex"] = _robots_flag(pick("noindex", "metaRobotsNoindex"), "noindex")
    fields["nofollow"] = _robots_flag(pick("nofollow", "metaRobotsNofollow"), "nofollow")

    if not any(fields.values()):
        return None
    return SeoOverride(**fields)


def _normalize_status(value: Any) -> str:
    key = str(value or "publish").strip().lower()
    status = _STATUS_MAP.get(key)
    if status is None:
        logger.warning("Unknown post status '%s' – treating as draft", value)
        return "draft"
    return status


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

def normalize(raw: Dict[str, Any]) -> ContentItem:
    """Convert one upstream post payload into a :class:`ContentItem`.

    Raises:
        NormalizationError: when the payload lacks an identifier or any timestamp.
    """
    if not isinstance(raw, dict):
        raise NormalizationError("Post payload is not an object")

    item_id = _text(raw.get("id"))
    if not item_id:
        raise NormalizationError("Post payload has no id")

    title = to_plain_text(raw.get("title") or "")
    slug = _text(raw.get("slug")) or generate_slug(title)
    if not slug:
        raise NormalizationError(f"Post {item_id} has neither slug nor title")

    published_at = _parse_datetime(raw.get("date"))
    modified_at = _parse_datetime(raw.get("modified"))
    if published_at is None and modified_at is None:
        raise NormalizationError(f"Post {item_id} has no usable timestamps")
    published_at = published_at or modified_at
    modified_at = modified_at or published_at
    if modified_at < published_at:
        logger.debug("Post %s modified before published; clamping", item_id)
        modified_at = published_at

    return ContentItem(
        id=item_id,
        title=title,
        slug=slug,
        body=clean_body(raw.get("content") or ""),
        excerpt=to_plain_text(raw.get("excerpt") or ""),
        published_at=published_at,
        modified_at=modified_at,
        status=_normalize_status(raw.get("status")),
        author=normalize_author(raw.get("author")),
        featured_image=normalize_image(raw.get("featuredImage"), fallback_alt=title or None),
        categories=normalize_terms(raw.get("categories")),
        tags=normalize_terms(raw.get("tags")),
        seo=normalize_seo(raw.get("seo")),
    )


def normalize_many(nodes: Any) -> List[ContentItem]:
    """Normalise a list of post payloads, skipping (and logging) malformed entries."""
    items: List[ContentItem] = []
    for node in _unwrap_nodes(nodes):
        try:
            items.append(normalize(node))
        except (NormalizationError, ValidationError) as exc:
            logger.warning("Skipping malformed post payload: %s", exc)
    return items


def normalize_page(connection: Any) -> ContentPage:
    """Normalise a ``{"nodes": [...], "pageInfo": {...}}`` connection."""
    if not isinstance(connection, dict):
        return ContentPage()
    info = connection.get("pageInfo") or {}
    return ContentPage(
        items=normalize_many(connection.get("nodes")),
        page_info=PageInfo(
            has_next_page=bool(info.get("hasNextPage")),
            has_previous_page=bool(info.get("hasPreviousPage")),
            start_cursor=_text(info.get("startCursor")),
            end_cursor=_text(info.get("endCursor")),
        ),
    )


def normalize_sitemap(nodes: Any) -> List[SitemapPost]:
    entries: List[SitemapPost] = []
    for node in _unwrap_nodes(nodes):
        slug = _text(node.get("slug"))
        modified = _parse_datetime(node.get("modified"))
        if slug and modified:
            entries.append(SitemapPost(slug=slug, modified=modified))
    return entries


def normalize_site_settings(raw: Any, defaults: SiteSettings) -> SiteSettings:
    if not isinstance(raw, dict):
        return defaults
    return SiteSettings(
        title=to_plain_text(raw.get("title") or "") or defaults.title,
        description=to_plain_text(raw.get("description") or "") or defaults.description,
        url=_text(raw.get("url")) or defaults.url,
    )


# ---------------------------------------------------------------------------
# Reverse mapping
# ---------------------------------------------------------------------------

def _image_to_raw(image: Optional[ImageDescriptor]) -> Optional[Dict[str, Any]]:
    if image is None:
        return None
    return {
        "url": image.url,
        "alt": image.alt,
        "caption": html.escape(image.caption) if image.caption else None,
        "width": image.width,
        "height": image.height,
    }


def _term_to_raw(term: Term) -> Dict[str, Any]:
    return term.model_dump()


def to_raw(item: ContentItem) -> Dict[str, Any]:
    """Return the direct (unwrapped) upstream shape equivalent to *item*.

    Title, excerpt and caption hold plain text and are re-escaped, as the
    upstream sends them as markup.  ``normalize(to_raw(item)) == item`` for
    any normalised item.
    """
    author = None
    if item.author is not None:
        author = {
            "id": item.author.id,
            "name": item.author.name,
            "slug": item.author.slug,
            "avatar": _image_to_raw(item.author.avatar),
            "bio": item.author.bio,
        }

    seo = None
    if item.seo is not None:
        seo = item.seo.model_dump()
        seo["og_image"] = item.seo.og_image.model_dump() if item.seo.og_image else None
        seo["twitter_image"] = item.seo.twitter_image.model_dump() if item.seo.twitter_image else None

    return {
        "id": item.id,
        "title": html.escape(item.title),
        "slug": item.slug,
        "content": item.body,
        "excerpt": html.escape(item.excerpt),
        "date": item.published_at.isoformat(),
        "modified": item.modified_at.isoformat(),
        "status": item.status,
        "author": author,
        "featuredImage": _image_to_raw(item.featured_image),
        "categories": [_term_to_raw(t) for t in item.categories],
        "tags": [_term_to_raw(t) for t in item.tags],
        "seo": seo,
    }
