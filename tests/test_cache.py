from __future__ import annotations

from fplspace.cache import DataCache


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


def test_cache_roundtrip():
    cache = DataCache()
    cache.set("key", {"a": 1})
    loaded = cache.get("key")
    assert loaded == {"a": 1}


def test_cache_respects_ttl():
    clock = FakeClock()
    cache = DataCache(clock=clock)
    cache.set("key", {"a": 1}, ttl=60)
    clock.now += 59.9
    assert cache.get("key") == {"a": 1}
    clock.now += 0.1
    assert cache.get("key") is None
    assert "key" not in cache


def test_cache_default_ttl_applies_when_none_given():
    clock = FakeClock()
    cache = DataCache(default_ttl=5, clock=clock)
    cache.set("key", "value")
    clock.now += 5
    assert cache.get("key") is None


def test_set_overwrites_and_restamps_entry():
    clock = FakeClock()
    cache = DataCache(clock=clock)
    cache.set("key", "old", ttl=10)
    clock.now += 8
    cache.set("key", "new", ttl=10)
    clock.now += 8
    assert cache.get("key") == "new"


def test_delete_and_clear():
    cache = DataCache()
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.delete("missing")
    assert cache.get("a") is None
    assert cache.get("b") == 2
    cache.clear()
    assert cache.get("b") is None
