"""
Tests for the search result cache.
"""
from hero_catalog.cache import SearchResultCache
from fakes import entry


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestSearchResultCache:
    def test_keys_are_normalized(self, heroes):
        cache = SearchResultCache()
        cache.put("  Spi ", heroes[:2])
        assert cache.get("spi") == heroes[:2]
        assert cache.get("SPI") == heroes[:2]
        assert "sPi" in cache

    def test_miss(self):
        cache = SearchResultCache()
        assert cache.get("thor") is None
        assert cache.misses == 1

    def test_put_overwrites(self, heroes):
        cache = SearchResultCache()
        cache.put("spi", heroes[:1])
        cache.put("spi", heroes[:2])
        assert cache.get("spi") == heroes[:2]

    def test_returned_list_is_a_copy(self, heroes):
        cache = SearchResultCache()
        cache.put("spi", heroes[:2])
        cache.get("spi").clear()
        assert len(cache.get("spi")) == 2

    def test_clear_all_when_over_threshold(self):
        cache = SearchResultCache(max_entries=50)
        for i in range(51):
            cache.put(f"q{i}", [entry(i, f"Hero {i}")])
        assert len(cache) == 51

        cache.put("one more", [])

        assert len(cache) == 1
        assert cache.get("q0") is None
        assert cache.get("one more") == []

    def test_periodic_clear(self, heroes):
        clock = FakeClock()
        cache = SearchResultCache(clear_interval=300, clock=clock)
        cache.put("spi", heroes)

        clock.now += 299
        assert cache.get("spi") == heroes

        clock.now += 1
        assert cache.get("spi") is None
        assert len(cache) == 0

    def test_clear_if_due_restarts_period(self, heroes):
        clock = FakeClock()
        cache = SearchResultCache(clear_interval=10, clock=clock)
        clock.now += 10
        assert cache.clear_if_due()
        cache.put("spi", heroes)
        clock.now += 5
        assert not cache.clear_if_due()
        assert cache.get("spi") == heroes
