"""
Unit tests for the analysis result cache.
"""

import threading

import pytest

from emotion_backend.analysis.base import AnalysisResult, MoodType
from emotion_backend.core.result_cache import (
    CachedEntry,
    ResultCache,
    make_cache_key,
    normalize_content,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _result(score=60, method="rule"):
    return AnalysisResult(mood_type=MoodType.POSITIVE, emotion_score=score, analysis_method=method)


class TestCacheKey:

    def test_same_content_same_key(self):
        assert make_cache_key("今天很开心", "rule") == make_cache_key("今天很开心", "rule")

    def test_method_scoped(self):
        """Same text under two methods must not collide."""
        assert make_cache_key("today", "rule") != make_cache_key("today", "llm")

    def test_whitespace_normalized(self):
        assert make_cache_key("  good   day \n", "llm") == make_cache_key("good day", "llm")

    def test_different_content_different_key(self):
        assert make_cache_key("good day", "llm") != make_cache_key("bad day", "llm")

    def test_normalize_content(self):
        assert normalize_content(" a \t b\n\nc ") == "a b c"

    def test_lone_surrogate_content_hashes(self):
        """Strings decoded from JSON may carry unpaired surrogates."""
        content = "bad \ud800 text"

        key = make_cache_key(content, "rule")

        assert key.startswith("rule:")
        assert key == make_cache_key(content, "rule")
        assert key != make_cache_key("bad \ud801 text", "rule")


class TestResultCache:

    def setup_method(self):
        self.clock = FakeClock()
        self.cache = ResultCache(max_size=3, ttl_seconds=100, clock=self.clock)

    def test_miss_returns_none(self):
        assert self.cache.get("missing") is None

    def test_put_then_get(self):
        result = _result()
        self.cache.put("k", result)
        assert self.cache.get("k") is result

    def test_expired_entry_is_dropped_on_read(self):
        self.cache.put("k", _result())
        self.clock.now += 101

        assert self.cache.get("k") is None
        assert len(self.cache) == 0

    def test_entry_valid_at_exact_expiry(self):
        """Expired only when now > expiry."""
        self.cache.put("k", _result())
        self.clock.now += 100
        assert self.cache.get("k") is not None

    def test_never_exceeds_max_size(self):
        for i in range(4):
            self.cache.put(f"k{i}", _result(score=i))
            self.clock.now += 1

        assert len(self.cache) == 3

    def test_evicts_soonest_expiry(self):
        self.cache.put("old", _result())
        self.clock.now += 1
        self.cache.put("mid", _result())
        self.clock.now += 1
        self.cache.put("new", _result())
        self.clock.now += 1
        self.cache.put("newest", _result())

        assert self.cache.get("old") is None
        assert self.cache.get("mid") is not None
        assert self.cache.get("newest") is not None

    def test_evicts_by_expiry_not_insertion_order(self):
        """Nearest expiry wins even when it was not the first insert."""
        self.cache.put("a", _result())
        self.cache.put("b", _result())
        self.cache.put("c", _result())
        # Rewrite "a" later so that "b" now expires first
        self.clock.now += 5
        self.cache.put("a", _result())
        self.cache.put("d", _result())

        assert self.cache.get("b") is None
        assert self.cache.get("a") is not None
        assert self.cache.get("c") is not None

    def test_overwrite_existing_key_does_not_evict(self):
        for key in ("a", "b", "c"):
            self.cache.put(key, _result())
        self.cache.put("b", _result(score=99))

        assert len(self.cache) == 3
        assert self.cache.get("b").emotion_score == 99

    def test_clear(self):
        self.cache.put("a", _result())
        self.cache.clear()
        self.cache.clear()  # idempotent

        assert self.cache.get("a") is None
        assert len(self.cache) == 0

    def test_stats(self):
        self.cache.put("a", _result())
        self.clock.now += 50
        self.cache.put("b", _result())
        self.clock.now += 60  # "a" expired, "b" still valid

        assert self.cache.stats() == {
            "total_entries": 2,
            "valid_entries": 1,
            "expired_entries": 1,
            "max_size": 3,
        }

    def test_stats_after_clear(self):
        cache = ResultCache()
        cache.put("a", _result())
        cache.clear()

        assert cache.stats() == {
            "total_entries": 0,
            "valid_entries": 0,
            "expired_entries": 0,
            "max_size": 100,
        }

    def test_invalid_max_size(self):
        with pytest.raises(ValueError):
            ResultCache(max_size=0)

    def test_concurrent_puts_respect_capacity(self):
        cache = ResultCache(max_size=10)

        def writer(offset):
            for i in range(50):
                cache.put(f"{offset}-{i}", _result())

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 10


class TestCachedEntry:

    def test_is_expired(self):
        entry = CachedEntry(result=_result(), expiry=10.0)
        assert entry.is_expired(10.5) is True
        assert entry.is_expired(10.0) is False
