"""SEO metadata and JSON-LD derivation for blog pages.

Every metadata field is resolved through an ordered list of
``(predicate, producer)`` rules; the first rule whose predicate holds
supplies the value.  The tables below are the whole precedence policy.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from app.config import Settings
from app.models.content import ContentItem, SeoOverride
from app.models.seo import OpenGraph, OpenGraphImage, Robots, SeoMetadata, TwitterCard

DEFAULT_IMAGE_WIDTH = 1200
DEFAULT_IMAGE_HEIGHT = 630
BLOG_PREFIX = "/blog"


@dataclass(frozen=True)
class SiteDefaults:
    """Site-level values used at the end of every fallback chain."""

    base_url: str
    site_name: str = "Cloud Renovation"
    team_name: str = "Cloud Renovation Team"
    description: str = ""
    default_image_path: str = "/og-default.jpg"
    blog_image_path: str = "/og-blog.jpg"
    logo_path: str = "/logo.png"

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_settings(cls, settings: Settings) -> "SiteDefaults":
        return cls(
            base_url=settings.site_url,
            site_name=settings.site_name,
            team_name=settings.site_team_name,
            description=settings.site_description,
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"


SiteLike = Union[SiteDefaults, str]


def _site(site: SiteLike) -> SiteDefaults:
    return SiteDefaults(base_url=site) if isinstance(site, str) else site


def post_path(slug: str) -> str:
    """Path of a post's detail page; shared by canonicals, sitemaps and revalidation."""
    return f"{BLOG_PREFIX}/{slug}"


@dataclass
class _Context:
    item: ContentItem
    site: SiteDefaults
    seo: SeoOverride
    resolved: Dict[str, Any] = field(default_factory=dict)

    @property
    def post_url(self) -> str:
        return self.site.url(post_path(self.item.slug))


Rule = Tuple[Callable[[_Context], bool], Callable[[_Context], Any]]


def _always(_: _Context) -> bool:
    return True


def first_match(rules: Sequence[Rule], ctx: _Context) -> Any:
    """Return the value of the first rule whose predicate accepts *ctx*."""
    for predicate, produce in rules:
        if predicate(ctx):
            return produce(ctx)
    raise LookupError("fallback chain has no terminal rule")


def _image_alt(c: _Context) -> str:
    image = c.item.featured_image
    return (image.alt if image and image.alt else None) or c.item.title


TITLE_RULES: List[Rule] = [
    (lambda c: bool(c.seo.title), lambda c: c.seo.title),
    (_always, lambda c: c.item.title),
]

DESCRIPTION_RULES: List[Rule] = [
    (lambda c: bool(c.seo.description), lambda c: c.seo.description),
    (lambda c: bool(c.item.excerpt), lambda c: c.item.excerpt),
    (_always, lambda c: ""),
]

CANONICAL_RULES: List[Rule] = [
    (lambda c: bool(c.seo.canonical), lambda c: c.seo.canonical),
    (_always, lambda c: c.post_url),
]

OG_TITLE_RULES: List[Rule] = [
    (lambda c: bool(c.seo.og_title), lambda c: c.seo.og_title),
    (_always, lambda c: c.resolved["title"]),
]

OG_DESCRIPTION_RULES: List[Rule] = [
    (lambda c: bool(c.seo.og_description), lambda c: c.seo.og_description),
    (_always, lambda c: c.resolved["description"]),
]

OG_IMAGE_RULES: List[Rule] = [
    (
        lambda c: c.seo.og_image is not None,
        lambda c: OpenGraphImage(
            url=c.seo.og_image.url,
            width=c.seo.og_image.width or DEFAULT_IMAGE_WIDTH,
            height=c.seo.og_image.height or DEFAULT_IMAGE_HEIGHT,
            alt=_image_alt(c),
        ),
    ),
    (
        lambda c: c.item.featured_image is not None,
        lambda c: OpenGraphImage(
            url=c.item.featured_image.url,
            width=c.item.featured_image.width or DEFAULT_IMAGE_WIDTH,
            height=c.item.featured_image.height or DEFAULT_IMAGE_HEIGHT,
            alt=_image_alt(c),
        ),
    ),
    (
        _always,
        lambda c: OpenGraphImage(
            url=c.site.url(c.site.default_image_path),
            width=DEFAULT_IMAGE_WIDTH,
            height=DEFAULT_IMAGE_HEIGHT,
            alt=c.item.title,
        ),
    ),
]

TWITTER_TITLE_RULES: List[Rule] = [
    (lambda c: bool(c.seo.twitter_title), lambda c: c.seo.twitter_title),
    (_always, lambda c: c.resolved["title"]),
]

TWITTER_DESCRIPTION_RULES: List[Rule] = [
    (lambda c: bool(c.seo.twitter_description), lambda c: c.seo.twitter_description),
    (_always, lambda c: c.resolved["description"]),
]

TWITTER_IMAGE_RULES: List[Rule] = [
    (lambda c: c.seo.twitter_image is not None, lambda c: c.seo.twitter_image.url),
    (_always, lambda c: c.resolved["og_image"].url),
]

# Field name -> rules, in resolution order (later chains read earlier results)
_CHAINS: Tuple[Tuple[str, List[Rule]], ...] = (
    ("title", TITLE_RULES),
    ("description", DESCRIPTION_RULES),
    ("canonical", CANONICAL_RULES),
    ("og_title", OG_TITLE_RULES),
    ("og_description", OG_DESCRIPTION_RULES),
    ("og_image", OG_IMAGE_RULES),
    ("twitter_title", TWITTER_TITLE_RULES),
    ("twitter_description", TWITTER_DESCRIPTION_RULES),
    ("twitter_image", TWITTER_IMAGE_RULES),
)


def derive_metadata(item: ContentItem, site: SiteLike) -> SeoMetadata:
    """Resolve the render-ready metadata for *item*'s detail page.  Performs no I/O."""
    site = _site(site)
    ctx = _Context(item=item, site=site, seo=item.seo or SeoOverride())
    for name, rules in _CHAINS:
        ctx.resolved[name] = first_match(rules, ctx)
    r = ctx.resolved

    return SeoMetadata(
        title=r["title"],
        description=r["description"],
        canonical=r["canonical"],
        open_graph=OpenGraph(
            title=r["og_title"],
            description=r["og_description"],
            url=ctx.post_url,
            site_name=site.site_name,
            images=[r["og_image"]],
            type="article",
        ),
        twitter=TwitterCard(
            card="summary_large_image",
            title=r["twitter_title"],
            description=r["twitter_description"],
            images=[r["twitter_image"]],
        ),
        robots=Robots(index=not ctx.seo.noindex, follow=not ctx.seo.nofollow),
    )


def listing_metadata(site: SiteLike, title: Optional[str] = None) -> SeoMetadata:
    """Metadata for the blog index page."""
    site = _site(site)
    blog_url = site.url(BLOG_PREFIX)
    heading = title or f"{site.site_name} Blog"
    image = OpenGraphImage(
        url=site.url(site.blog_image_path),
        width=DEFAULT_IMAGE_WIDTH,
        height=DEFAULT_IMAGE_HEIGHT,
        alt=heading,
    )
    return SeoMetadata(
        title=f"Blog - {site.site_name}",
        description=site.description,
        canonical=blog_url,
        open_graph=OpenGraph(
            title=heading,
            description=site.description,
            url=blog_url,
            site_name=site.site_name,
            images=[image],
            type="website",
        ),
        twitter=TwitterCard(
            card="summary_large_image",
            title=heading,
            description=site.description,
            images=[image.url],
        ),
    )


def article_json_ld(item: ContentItem, site: SiteLike) -> str:
    """Return the Article JSON-LD for *item*.

    A schema document supplied by the CMS is returned verbatim; otherwise a
    minimal Article is synthesised from the item.
    """
    site = _site(site)
    if item.seo is not None and item.seo.schema_raw:
        return item.seo.schema_raw

    url = site.url(post_path(item.slug))
    schema: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": item.title,
        "description": item.excerpt,
    }
    if item.featured_image is not None:
        schema["image"] = item.featured_image.url
    schema.update(
        {
            "datePublished": item.published_at.isoformat(),
            "dateModified": item.modified_at.isoformat(),
            "author": {
                "@type": "Person",
                "name": item.author.name if item.author else site.team_name,
            },
            "publisher": {
                "@type": "Organization",
                "name": site.site_name,
                "logo": {"@type": "ImageObject", "url": site.url(site.logo_path)},
            },
            "mainEntityOfPage": {"@type": "WebPage", "@id": url},
            "url": url,
        }
    )
    return json.dumps(schema, ensure_ascii=False)


def breadcrumb_json_ld(item: ContentItem, site: SiteLike) -> str:
    """Return the Home → Blog → post BreadcrumbList JSON-LD."""
    site = _site(site)
    trail = (
        ("Home", site.base_url),
        ("Blog", site.url(BLOG_PREFIX)),
        (item.title, site.url(post_path(item.slug))),
    )
    schema = {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i, "name": name, "item": url}
            for i, (name, url) in enumerate(trail, start=1)
        ],
    }
    return json.dumps(schema, ensure_ascii=False)
