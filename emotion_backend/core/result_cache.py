"""
Bounded, TTL-based cache of analysis results.

Avoids re-running a backend (notably paid LLM calls) for content that was
analyzed recently under the same method:
- Keys are derived from normalized content and the configured method
- Entries expire after a TTL (24h by default), checked lazily on read
- When full, the entry expiring soonest is evicted before an insert
"""

import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..analysis.base import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_SECONDS = 24 * 3600


@dataclass
class CachedEntry:
    """A cached result and its absolute expiry (epoch seconds)."""
    result: AnalysisResult
    expiry: float

    def is_expired(self, now: float) -> bool:
        return now > self.expiry


def normalize_content(content: str) -> str:
    """Collapse whitespace runs so formatting changes do not miss the cache."""
    return " ".join(content.split())


def make_cache_key(content: str, method: str) -> str:
    """
    Cache key for content analyzed under a method.

    The method is part of the key: the same text analyzed by two backends
    gives two distinct entries.
    """
    # Lone surrogates (e.g. from json.loads) must still hash
    digest = hashlib.sha256(normalize_content(content).encode("utf-8", "surrogatepass")).hexdigest()
    return f"{method}:{digest}"


class ResultCache:
    """
    Thread-safe key -> AnalysisResult store with uniform TTL.

    Usage:
        cache = ResultCache()
        key = make_cache_key(text, "llm")
        result = cache.get(key)
        if result is None:
            result = strategy.analyze(text)
            cache.put(key, result)
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CachedEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[AnalysisResult]:
        """Cached result, or None if absent or expired (expired entries are dropped)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.result

    def put(self, key: str, result: AnalysisResult) -> None:
        """Store a result with expiry now + TTL, evicting one entry if full."""
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._evict_soonest_expiry()
            self._entries[key] = CachedEntry(result=result, expiry=self._clock() + self.ttl_seconds)

    def _evict_soonest_expiry(self) -> None:
        # Caller holds the lock. Under a uniform TTL this is the oldest insert.
        victim = min(self._entries, key=lambda k: self._entries[k].expiry)
        del self._entries[victim]
        logger.debug(f"Cache full, evicted {victim[:16]}...")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Result cache cleared")

    def stats(self) -> Dict[str, int]:
        with self._lock:
            now = self._clock()
            total = len(self._entries)
            expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        return {
            "total_entries": total,
            "valid_entries": total - expired,
            "expired_entries": expired,
            "max_size": self.max_size,
        }
