"""Async WPGraphQL transport with a time-windowed response cache."""

import logging
from typing import Any, Dict, Optional

import httpx

from app.config import Settings
from app.errors import ConfigurationError, ProtocolError, TransportError, UpstreamError
from app.services.cache import ResponseCache, TTLCache, response_key
from app.services.queries import QueryDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15  # seconds
DEFAULT_USER_AGENT = "CloudReno-Blog/1.0"


class GraphQLClient:
    """Send catalog queries to the upstream GraphQL endpoint.

    Every call is a single POST; the client never retries.  Successful
    payloads are cached by *cache* under the exact query + variables pair, so
    a repeat call within the cache window is served without a round-trip.
    """

    def __init__(
        self,
        endpoint: Optional[str],
        cache: Optional[ResponseCache] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not endpoint:
            raise ConfigurationError("WordPress GraphQL endpoint not configured")
        self.endpoint = endpoint
        self.cache: ResponseCache = cache if cache is not None else TTLCache(ttl=60)
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GraphQLClient":
        return cls(
            settings.require_endpoint(),
            cache=cache if cache is not None else TTLCache(ttl=settings.cache_ttl_seconds),
            timeout=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
            transport=transport,
        )

    async def execute(
        self, query: QueryDescriptor, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Run *query* with *variables* and return the envelope's ``data`` payload.

        Raises:
            QueryVariablesError: if *variables* do not match the query's schema.
            TransportError: when the endpoint is unreachable.
            ProtocolError: on a non-2xx status or a malformed response envelope.
            UpstreamError: when the envelope carries GraphQL ``errors``.
        """
        bound = query.bind(variables)
        key = response_key(query.document, bound)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("GraphQL cache hit for %s", query.name)
            return cached

        data = await self._post(query, bound)
        self.cache.set(key, data)
        return data

    async def _post(self, query: QueryDescriptor, variables: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", "User-Agent": self.user_agent}
        payload = {"query": query.document, "variables": variables}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TransportError as exc:
            raise TransportError(f"GraphQL endpoint unreachable: {exc}") from exc

        if not resp.is_success:
            raise ProtocolError(
                f"GraphQL request failed: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )

        try:
            envelope = resp.json()
        except ValueError as exc:
            raise ProtocolError("GraphQL response is not valid JSON", resp.status_code) from exc

        return _unwrap(envelope, resp.status_code)


def _unwrap(envelope: Any, status_code: int) -> Dict[str, Any]:
    """Return the ``data`` member of a GraphQL envelope, enforcing the error contract.

    Partial success (``data`` alongside ``errors``) is treated as a failure.
    """
    if not isinstance(envelope, dict) or ("data" not in envelope and "errors" not in envelope):
        raise ProtocolError("GraphQL response envelope has neither data nor errors", status_code)

    errors = envelope.get("errors")
    if errors:
        if not isinstance(errors, list):
            errors = [{"message": str(errors)}]
        entries = [e if isinstance(e, dict) else {"message": str(e)} for e in errors]
        raise UpstreamError(entries)

    data = envelope.get("data")
    if not isinstance(data, dict):
        raise ProtocolError("GraphQL response data is not an object", status_code)
    return data
