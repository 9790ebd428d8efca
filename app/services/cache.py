"""Time-bounded in-process caches.

:class:`ResponseCache` holds upstream GraphQL payloads keyed by the exact
query + variables pair.  :class:`PageCache` holds rendered views keyed by
request path and is the target of revalidation.
"""

import json
import time
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Protocol, Tuple, TypeVar

V = TypeVar("V")

Clock = Callable[[], float]


class ResponseCache(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear(self) -> None: ...


def response_key(query: str, variables: Dict[str, Any]) -> str:
    """Build a stable cache key from a query document and its variables."""
    return query + "\x00" + json.dumps(variables, sort_keys=True, separators=(",", ":"))


class TTLCache(Generic[V]):
    """Dictionary cache whose entries expire *ttl* seconds after they are stored.

    At most *maxsize* entries are held; expired entries are purged on every
    write and the oldest entry is evicted when the cache is full.  Entries
    are kept in expiry order (the TTL is fixed and the clock monotonic), so
    both operations only look at the front of the dict.

    Concurrent writers for the same key simply overwrite each other with an
    equivalent value, so no locking is needed under asyncio.
    """

    def __init__(self, ttl: float = 60, clock: Clock = time.monotonic, maxsize: int = 1024) -> None:
        self.ttl = ttl
        self.maxsize = maxsize
        self._clock = clock
        self._entries: Dict[str, Tuple[float, V]] = {}

    def get(self, key: str) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    def set(self, key: str, value: V) -> None:
        now = self._clock()
        self.purge(now)
        # Re-inserting moves the key to the back, keeping expiry order
        self._entries.pop(key, None)
        while len(self._entries) >= self.maxsize:
            del self._entries[next(iter(self._entries))]
        self._entries[key] = (now + self.ttl, value)

    def purge(self, now: Optional[float] = None) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock() if now is None else now
        removed = 0
        while self._entries:
            oldest = next(iter(self._entries))
            if self._entries[oldest][0] > now:
                break
            del self._entries[oldest]
            removed += 1
        return removed

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache that never stores anything; useful for tests and debugging."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any) -> None:
        return None

    def clear(self) -> None:
        return None


class PageCache(TTLCache[Any]):
    """Rendered-view cache keyed by request path (including any query string)."""

    def invalidate(self, paths: Iterable[str]) -> List[str]:
        """Drop every entry for *paths*, including query-string variants.

        ``/blog`` also drops ``/blog?category=kitchens``.  Paths that are not
        cached are skipped silently.  Returns the keys that were removed.
        """
        targets = set(paths)
        doomed = [
            key for key in self._entries
            if key in targets or key.split("?", 1)[0] in targets
        ]
        for key in doomed:
            del self._entries[key]
        return doomed
