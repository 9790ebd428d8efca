from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

ContentStatus = Literal["published", "draft", "private"]


class ImageDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class Author(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str
    avatar: Optional[ImageDescriptor] = None
    bio: Optional[str] = None


class Term(BaseModel):
    """A category or tag attached to a post."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    count: Optional[int] = None


class SeoImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class SeoOverride(BaseModel):
    """Per-post SEO fields supplied by the CMS; each one beats the computed default."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    canonical: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[SeoImage] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[SeoImage] = None
    schema_raw: Optional[str] = None  # JSON-LD document, kept verbatim
    focus_keyword: Optional[str] = None
    noindex: bool = False
    nofollow: bool = False


class ContentItem(BaseModel):
    """Normalized representation of one article."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    slug: str
    body: str = ""
    excerpt: str = ""
    published_at: datetime
    modified_at: datetime
    status: ContentStatus = "published"
    author: Optional[Author] = None
    featured_image: Optional[ImageDescriptor] = None
    categories: List[Term] = []
    tags: List[Term] = []
    seo: Optional[SeoOverride] = None

    @model_validator(mode="after")
    def _check_dates(self) -> "ContentItem":
        if self.modified_at < self.published_at:
            raise ValueError("modified_at must not precede published_at")
        return self


class PageInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None


class ContentPage(BaseModel):
    """One page of a cursor-paginated post listing."""

    items: List[ContentItem] = []
    page_info: PageInfo = PageInfo()


class SitemapPost(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    modified: datetime


class SiteSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    url: str
