from typing import List, Optional

from pydantic import BaseModel

from app.models.content import ContentItem, PageInfo, SiteSettings, Term
from app.models.seo import SeoMetadata


class ListingResponse(BaseModel):
    items: List[ContentItem]
    page_info: PageInfo
    categories: List[Term]
    category: Optional[str] = None
    site: SiteSettings
    seo: SeoMetadata


class DetailResponse(BaseModel):
    item: ContentItem
    related: List[ContentItem]
    seo: SeoMetadata
    json_ld: str
    """Article JSON-LD, either CMS-supplied (verbatim) or synthesised."""
    breadcrumb_json_ld: str
