"""Tests for app.services.cache."""

from app.services.cache import NullCache, PageCache, TTLCache, response_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestResponseKey:
    def test_variable_order_does_not_matter(self):
        assert response_key("q", {"a": 1, "b": 2}) == response_key("q", {"b": 2, "a": 1})

    def test_query_and_variables_both_count(self):
        assert response_key("q1", {"a": 1}) != response_key("q2", {"a": 1})
        assert response_key("q", {"a": 1}) != response_key("q", {"a": 2})


class TestTTLCache:
    def test_hit_within_window(self):
        cache = TTLCache(ttl=60, clock=FakeClock())
        cache.set("k", {"v": 1})
        assert cache.get("k") == {"v": 1}

    def test_expired_entry_is_evicted(self):
        clock = FakeClock()
        cache = TTLCache(ttl=60, clock=clock)
        cache.set("k", "v")
        clock.now += 60
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_write_purges_expired_entries(self):
        clock = FakeClock()
        cache = TTLCache(ttl=60, clock=clock, maxsize=20000)
        for i in range(10000):
            cache.set(f"/blog?junk={i}", i)
        clock.now += 3600
        cache.set("/blog", "fresh")
        assert len(cache) == 1
        assert cache.keys() == ["/blog"]

    def test_purge_keeps_live_entries(self):
        clock = FakeClock()
        cache = TTLCache(ttl=60, clock=clock)
        cache.set("old", 1)
        clock.now += 30
        cache.set("new", 2)
        clock.now += 31
        assert cache.purge() == 1
        assert cache.keys() == ["new"]

    def test_maxsize_evicts_oldest(self):
        cache = TTLCache(ttl=60, clock=FakeClock(), maxsize=3)
        for key in ("a", "b", "c", "d"):
            cache.set(key, key)
        assert cache.keys() == ["b", "c", "d"]

    def test_rewriting_a_key_refreshes_its_position(self):
        cache = TTLCache(ttl=60, clock=FakeClock(), maxsize=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 3)
        cache.set("c", 4)
        assert cache.keys() == ["a", "c"]
        assert cache.get("a") == 3

    def test_clear(self):
        cache = TTLCache(ttl=60, clock=FakeClock())
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None


class TestNullCache:
    def test_never_stores(self):
        cache = NullCache()
        cache.set("k", "v")
        assert cache.get("k") is None


class TestPageCacheInvalidate:
    def _filled(self) -> PageCache:
        cache = PageCache(ttl=60, clock=FakeClock())
        for key in ("/blog", "/blog?category=kitchens", "/blog/kitchen-remodel", "/blog/sitemap.xml", "/blog/other"):
            cache.set(key, key)
        return cache

    def test_drops_paths_and_query_variants(self):
        cache = self._filled()
        dropped = cache.invalidate(["/blog", "/blog/sitemap.xml"])
        assert set(dropped) == {"/blog", "/blog?category=kitchens", "/blog/sitemap.xml"}
        assert cache.get("/blog/kitchen-remodel") == "/blog/kitchen-remodel"
        assert cache.get("/blog/other") == "/blog/other"

    def test_uncached_paths_are_a_no_op(self):
        cache = PageCache(ttl=60, clock=FakeClock())
        assert cache.invalidate(["/blog/missing"]) == []

    def test_repeated_invalidation_is_idempotent(self):
        cache = self._filled()
        cache.invalidate(["/blog/kitchen-remodel"])
        assert cache.invalidate(["/blog/kitchen-remodel"]) == []
        assert len(cache) == 4
