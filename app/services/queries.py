"""Fixed catalog of WPGraphQL queries used by the blog.

Each entry pairs a GraphQL document with a pydantic model describing its
variables, so malformed variables are rejected before any request is sent.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from app.errors import QueryVariablesError

POST_FRAGMENT = """
  fragment PostFields on Post {
    id
    title
    slug
    content
    excerpt
    date
    modified
    status
    author {
      node {
        id
        name
        slug
        avatar {
          url
        }
        description
      }
    }
    featuredImage {
      node {
        id
        sourceUrl
        altText
        caption
        mediaDetails {
          width
          height
        }
      }
    }
    categories {
      nodes {
        id
        name
        slug
        description
        count
      }
    }
    tags {
      nodes {
        id
        name
        slug
        description
        count
      }
    }
  }
"""

SEO_FRAGMENT = """
  fragment SeoFields on Post {
    seo {
      title
      metaDesc
      canonical
      opengraphTitle
      opengraphDescription
      opengraphImage {
        sourceUrl
        mediaDetails {
          width
          height
        }
      }
      twitterTitle
      twitterDescription
      twitterImage {
        sourceUrl
      }
      schema {
        raw
      }
      focuskw
      metaRobotsNoindex
      metaRobotsNofollow
    }
  }
"""

_PAGE_INFO = """
      pageInfo {
        hasNextPage
        hasPreviousPage
        startCursor
        endCursor
      }
"""


class _Variables(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


class NoVariables(_Variables):
    pass


class PaginatedVariables(_Variables):
    first: int = Field(default=10, ge=1, le=100)
    after: Optional[StrictStr] = None


class SlugVariables(_Variables):
    slug: StrictStr = Field(min_length=1)


class CategoryVariables(PaginatedVariables):
    category_slug: StrictStr = Field(min_length=1, serialization_alias="categorySlug")


class RecentVariables(_Variables):
    first: int = Field(default=5, ge=1, le=100)
    not_in: List[StrictStr] = Field(default_factory=list, serialization_alias="notIn")


class SitemapVariables(_Variables):
    first: int = Field(default=100, ge=1, le=1000)


@dataclass(frozen=True)
class QueryDescriptor:
    """A named GraphQL document together with its variable schema."""

    name: str
    document: str
    variables_model: Type[_Variables]

    def bind(self, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Validate *variables* and return the JSON-ready mapping to send upstream.

        Raises:
            QueryVariablesError: if a variable is unknown, missing, or of the wrong type.
        """
        try:
            model = self.variables_model.model_validate(variables or {})
        except ValidationError as exc:
            raise QueryVariablesError(self.name, _describe(exc)) from exc
        return model.model_dump(by_alias=True, exclude_none=True)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


ALL_POSTS = QueryDescriptor(
    name="all_posts",
    document=f"""
  query GetAllPosts($first: Int = 10, $after: String) {{
    posts(first: $first, after: $after, where: {{status: PUBLISH}}) {{
      nodes {{
        ...PostFields
      }}
{_PAGE_INFO}
    }}
  }}
  {POST_FRAGMENT}
""",
    variables_model=PaginatedVariables,
)

POST_BY_SLUG = QueryDescriptor(
    name="post_by_slug",
    document=f"""
  query GetPostBySlug($slug: ID!) {{
    post(id: $slug, idType: SLUG) {{
      ...PostFields
      ...SeoFields
    }}
  }}
  {POST_FRAGMENT}
  {SEO_FRAGMENT}
""",
    variables_model=SlugVariables,
)

POSTS_BY_CATEGORY = QueryDescriptor(
    name="posts_by_category",
    document=f"""
  query GetPostsByCategory($categorySlug: String!, $first: Int = 10, $after: String) {{
    posts(first: $first, after: $after, where: {{status: PUBLISH, categoryName: $categorySlug}}) {{
      nodes {{
        ...PostFields
      }}
{_PAGE_INFO}
    }}
  }}
  {POST_FRAGMENT}
""",
    variables_model=CategoryVariables,
)

RECENT_POSTS = QueryDescriptor(
    name="recent_posts",
    document="""
  query GetRecentPosts($first: Int = 5, $notIn: [ID]) {
    posts(first: $first, where: {status: PUBLISH, notIn: $notIn}) {
      nodes {
        id
        title
        slug
        excerpt
        date
        modified
        featuredImage {
          node {
            id
            sourceUrl
            altText
            mediaDetails {
              width
              height
            }
          }
        }
        categories {
          nodes {
            id
            name
            slug
          }
        }
      }
    }
  }
""",
    variables_model=RecentVariables,
)

POSTS_SITEMAP = QueryDescriptor(
    name="posts_sitemap",
    document="""
  query GetPostsSitemap($first: Int = 100) {
    posts(first: $first, where: {status: PUBLISH}) {
      nodes {
        slug
        modified
      }
    }
  }
""",
    variables_model=SitemapVariables,
)

CATEGORIES = QueryDescriptor(
    name="categories",
    document="""
  query GetCategories {
    categories(where: {hideEmpty: true}) {
      nodes {
        id
        name
        slug
        description
        count
      }
    }
  }
""",
    variables_model=NoVariables,
)

SITE_SETTINGS = QueryDescriptor(
    name="site_settings",
    document="""
  query GetSiteSettings {
    generalSettings {
      title
      description
      url
    }
  }
""",
    variables_model=NoVariables,
)

CATALOG: Dict[str, QueryDescriptor] = {
    q.name: q
    for q in (
        ALL_POSTS,
        POST_BY_SLUG,
        POSTS_BY_CATEGORY,
        RECENT_POSTS,
        POSTS_SITEMAP,
        CATEGORIES,
        SITE_SETTINGS,
    )
}
