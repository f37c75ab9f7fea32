"""Tests for the translation cache."""

import threading

import pytest

from viewlingo.cache import DEFAULT_CACHE_SIZE, TranslationCache


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestLookup:
    """Tests for lookup and insert."""

    def test_insert_then_lookup(self, cache):
        cache.insert("Cache test", "en", "ko", "캐시 테스트")
        assert cache.lookup("Cache test", "en", "ko") == "캐시 테스트"

    def test_miss_returns_none(self, cache):
        assert cache.lookup("Missing", "en", "ko") is None

    def test_key_is_exact(self, cache):
        """Case and whitespace differences are different keys."""
        cache.insert("Hello", "en", "ko", "안녕하세요")

        assert cache.lookup("hello", "en", "ko") is None
        assert cache.lookup("Hello ", "en", "ko") is None
        assert cache.lookup("Hello", "en", "ja") is None
        assert cache.lookup("Hello", "fr", "ko") is None

    def test_insert_same_value_is_noop(self):
        clock = FakeClock(1.0)
        cache = TranslationCache(clock=clock)
        cache.insert("Hello", "en", "ko", "안녕")
        first = cache.get_entry("Hello", "en", "ko")

        clock.now = 5.0
        cache.insert("Hello", "en", "ko", "안녕")

        assert cache.get_entry("Hello", "en", "ko") == first
        assert len(cache) == 1

    def test_insert_new_value_replaces(self, cache):
        cache.insert("Hello", "en", "ko", "안녕")
        cache.insert("Hello", "en", "ko", "안녕하세요")
        assert cache.lookup("Hello", "en", "ko") == "안녕하세요"
        assert len(cache) == 1

    def test_empty_translation_cached(self, cache):
        cache.insert("Hmm", "en", "ko", "")
        assert cache.lookup("Hmm", "en", "ko") == ""

    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    def test_empty_text_rejected(self, cache, text):
        with pytest.raises(ValueError):
            cache.insert(text, "en", "ko", "x")
        assert len(cache) == 0

    def test_contains(self, cache):
        cache.insert("Hello", "en", "ko", "안녕")
        assert TranslationCache.make_key("Hello", "en", "ko") in cache
        assert ("Hello", "en", "ja") not in cache


class TestEviction:
    """Tests for size and age limits."""

    def test_default_size(self, cache):
        assert cache.max_size == DEFAULT_CACHE_SIZE

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            TranslationCache(max_size=0)

    def test_least_recently_used_evicted(self):
        cache = TranslationCache(max_size=2)
        cache.insert("a", "en", "ko", "A")
        cache.insert("b", "en", "ko", "B")
        cache.lookup("a", "en", "ko")

        cache.insert("c", "en", "ko", "C")

        assert len(cache) == 2
        assert cache.lookup("a", "en", "ko") == "A"
        assert cache.lookup("b", "en", "ko") is None
        assert cache.lookup("c", "en", "ko") == "C"

    def test_expired_entries_dropped(self):
        clock = FakeClock()
        cache = TranslationCache(ttl_seconds=10, clock=clock)
        cache.insert("Hello", "en", "ko", "안녕")

        clock.now = 9.0
        assert cache.lookup("Hello", "en", "ko") == "안녕"

        clock.now = 10.0
        assert cache.lookup("Hello", "en", "ko") is None
        assert len(cache) == 0

    def test_no_ttl_never_expires(self):
        clock = FakeClock()
        cache = TranslationCache(clock=clock)
        cache.insert("Hello", "en", "ko", "안녕")
        clock.now = 1e9
        assert cache.lookup("Hello", "en", "ko") == "안녕"


class TestStats:
    """Tests for counters."""

    def test_hits_and_misses(self, cache):
        cache.insert("Hello", "en", "ko", "안녕")
        cache.lookup("Hello", "en", "ko")
        cache.lookup("Hello", "en", "ko")
        cache.lookup("Bye", "en", "ko")

        stats = cache.stats
        assert stats.hits == 2
        assert stats.misses == 1
        assert stats.size == 1
        assert stats.hit_rate == pytest.approx(2 / 3)

    def test_get_entry_does_not_count(self, cache):
        cache.insert("Hello", "en", "ko", "안녕")
        cache.get_entry("Hello", "en", "ko")
        assert cache.stats.hits == 0
        assert cache.stats.misses == 0

    def test_clear(self, cache):
        cache.insert("Hello", "en", "ko", "안녕")
        cache.lookup("Hello", "en", "ko")
        cache.clear()

        assert len(cache) == 0
        assert cache.stats.hits == 0
        assert cache.stats.hit_rate == 0.0


def test_concurrent_inserts():
    """Inserts from several threads never exceed the size limit."""
    cache = TranslationCache(max_size=50)

    def worker(n):
        for i in range(200):
            cache.insert(f"text {n}-{i}", "en", "ko", str(i))
            cache.lookup(f"text {n}-{i // 2}", "en", "ko")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 50
