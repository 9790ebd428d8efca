from typing import List, Literal, Optional

from pydantic import BaseModel


class OpenGraphImage(BaseModel):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    alt: Optional[str] = None


class OpenGraph(BaseModel):
    title: str
    description: str
    url: str
    site_name: str
    images: List[OpenGraphImage]
    type: Literal["website", "article"]


class TwitterCard(BaseModel):
    card: Literal["summary_large_image", "summary"]
    title: str
    description: str
    images: List[str]


class Robots(BaseModel):
    index: bool = True
    follow: bool = True


class SeoMetadata(BaseModel):
    """Render-ready metadata for one page.  Derived per request, never stored."""

    title: str
    description: str
    canonical: str
    open_graph: OpenGraph
    twitter: TwitterCard
    robots: Robots = Robots()
