"""Translation cache keyed by (text, source, target)."""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from . import log

logger = log.get_logger("cache")

# Translation cache defaults
DEFAULT_CACHE_SIZE = 1000   # Max cached translations
DEFAULT_TTL_SECONDS = None  # Entries never expire

CacheKey = tuple[str, str, str]


@dataclass(frozen=True)
class CacheEntry:
    """A cached translation and the time it was stored."""

    key: CacheKey
    value: str
    inserted_at: float


@dataclass(frozen=True)
class CacheStats:
    """Hit/miss counters and current size."""

    hits: int
    misses: int
    size: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class TranslationCache:
    """LRU cache for translations with exact key matching.

    Keys are the text exactly as received (case and inner whitespace kept)
    plus the source and target language codes. Lookups never block on I/O,
    so a hit is always cheaper than dispatching to a session.

    The map is guarded by a lock so the cache can be shared by concurrent
    orchestrator calls and by worker threads.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        ttl_seconds: float | None = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries to store.
            ttl_seconds: Entry lifetime in seconds, or None to keep entries
                until evicted by size.
            clock: Monotonic time source (injectable for tests).
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(text: str, source: str, target: str) -> CacheKey:
        return (text, source, target)

    def lookup(self, text: str, source: str, target: str) -> str | None:
        """Get a cached translation.

        Args:
            text: Source text, exactly as it will be sent for translation.
            source: Source language code.
            target: Target language code.

        Returns:
            Cached translation if present and not expired, None otherwise.
        """
        key = self.make_key(text, source, target)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_expired(entry):
                del self._entries[key]
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def insert(self, text: str, source: str, target: str, translation: str) -> None:
        """Store a translation.

        Inserting the same value again is a no-op; a different value
        replaces the old one.

        Args:
            text: Source text.
            source: Source language code.
            target: Target language code.
            translation: Translated text.

        Raises:
            ValueError: If text is empty or whitespace only.
        """
        if not text or not text.strip():
            raise ValueError("Cannot cache a translation for empty text")

        key = self.make_key(text, source, target)
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None and existing.value == translation and not self._is_expired(existing):
                return

            self._entries[key] = CacheEntry(key=key, value=translation, inserted_at=self._clock())
            self._entries.move_to_end(key)

            # Evict least recently used entries once over capacity
            while len(self._entries) > self._max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("cache eviction", source=evicted[1], target=evicted[2])

    def get_entry(self, text: str, source: str, target: str) -> CacheEntry | None:
        """Return the raw entry without touching hit counters or recency."""
        with self._lock:
            entry = self._entries.get(self.make_key(text, source, target))
            if entry is None or self._is_expired(entry):
                return None
            return entry

    def clear(self) -> None:
        """Remove all entries and reset counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    @property
    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, size=len(self._entries))

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._is_expired(entry)

    def _is_expired(self, entry: CacheEntry) -> bool:
        if self._ttl is None:
            return False
        return self._clock() - entry.inserted_at >= self._ttl
