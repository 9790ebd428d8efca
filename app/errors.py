"""Exception hierarchy shared by the services and routers."""

from typing import Any, Dict, List, Optional


class BlogError(Exception):
    """Base class for every error raised by the blog services."""


class ConfigurationError(BlogError):
    """A required setting (GraphQL endpoint, revalidation token) is missing."""


class QueryVariablesError(BlogError, ValueError):
    """Variables passed to a catalog query do not match its schema."""

    def __init__(self, query_name: str, detail: str) -> None:
        self.query_name = query_name
        self.detail = detail
        super().__init__(f"Invalid variables for query '{query_name}': {detail}")


class FetchError(BlogError):
    """Base class for failures talking to the upstream content source."""


class TransportError(FetchError):
    """The upstream endpoint could not be reached."""


class ProtocolError(FetchError):
    """The upstream answered with a non-success status or a malformed envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class UpstreamError(FetchError):
    """The upstream envelope carried one or more GraphQL error entries."""

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = errors
        messages = "; ".join(str(e.get("message", "unknown error")) for e in errors)
        super().__init__(f"GraphQL errors: {messages}")


class NormalizationError(BlogError, ValueError):
    """An upstream post payload is missing fields every post must carry."""


class NotFoundError(BlogError):
    """No published item matches the requested slug."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"No post found for slug '{slug}'")


class AuthenticationError(BlogError):
    """A revalidation request presented a wrong or missing secret."""
