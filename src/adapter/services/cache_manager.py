"""In-memory implementation of CacheManager

Each named cache is an ExpiringLRUCache: an OrderedDict in LRU order,
bounded by size and by two TTLs (age since write, idle time since last
access). All operations hold a threading.Lock, so one instance can be
shared process-wide by request handlers and worker threads alike.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from src.app.services.cache_manager import CacheManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheSettings:
    """Sizing and expiry shared by every cache of a manager"""

    initial_capacity: int = 200
    maximum_size: int = 10000
    expire_after_write_seconds: float = 30 * 60
    expire_after_access_seconds: float = 10 * 60

    @classmethod
    def from_config(cls, config) -> "CacheSettings":
        return cls(
            initial_capacity=int(config.CACHE_INITIAL_CAPACITY),
            maximum_size=int(config.CACHE_MAXIMUM_SIZE),
            expire_after_write_seconds=float(config.CACHE_EXPIRE_AFTER_WRITE_MINUTES) * 60,
            expire_after_access_seconds=float(config.CACHE_EXPIRE_AFTER_ACCESS_MINUTES) * 60,
        )


@dataclass
class _CacheEntry:
    value: Any
    written_at: float
    accessed_at: float


class ExpiringLRUCache:
    """
    Thread-safe LRU cache with write and access expiry

    An entry expires when it is older than expire_after_write_seconds OR
    has not been read or written for expire_after_access_seconds.
    When maximum_size is reached the least recently used entry is dropped.

    initial_capacity is kept as a sizing hint only; dicts grow on demand.

    Every evict stamps the key with a new invalidation version. A reader
    takes token() before loading from the store and fills the cache with
    put_if_unchanged(), which drops the value if the key was evicted in
    between. The version table is bounded by maximum_size; versions
    pushed out of it raise a floor below which every token is rejected.
    """

    def __init__(
        self,
        name: str,
        settings: Optional[CacheSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.settings = settings or CacheSettings()
        self._clock = clock
        self._entries: "OrderedDict[Hashable, _CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

        self._version = 0
        self._invalidations: "OrderedDict[Hashable, int]" = OrderedDict()
        self._invalidation_floor = 0

        # Statistics
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            now = self._clock()
            if self._is_expired(entry, now):
                del self._entries[key]
                self._misses += 1
                self._expirations += 1
                return None

            entry.accessed_at = now
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._store(key, value)

    def token(self, key: Hashable) -> int:
        """Current invalidation version, to be passed to put_if_unchanged"""
        with self._lock:
            return self._version

    def put_if_unchanged(self, key: Hashable, token: int, value: Any) -> bool:
        """
        Store a value only if the key was not evicted since token() was taken

        Returns:
            True if stored, False if the value was discarded as stale
        """
        with self._lock:
            if token < self._invalidation_floor or self._invalidations.get(key, 0) > token:
                logger.debug("%s: discarded stale fill for key %s", self.name, key)
                return False
            self._store(key, value)
            return True

    def evict(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._invalidate(key)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._version += 1
            self._invalidations.clear()
            self._invalidation_floor = self._version
            return count

    def cleanup_expired(self) -> int:
        """Drop every expired entry. Returns count removed."""
        with self._lock:
            now = self._clock()
            expired_keys = [
                key for key, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]
            for key in expired_keys:
                del self._entries[key]
            self._expirations += len(expired_keys)
            return len(expired_keys)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "size": len(self._entries),
                "maximum_size": self.settings.maximum_size,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        # Presence check only: does not refresh access time or count a hit
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._is_expired(entry, self._clock())

    def _store(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        if key in self._entries:
            del self._entries[key]
        while len(self._entries) >= self.settings.maximum_size:
            evicted_key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug("%s: evicted least recently used key %s", self.name, evicted_key)
        self._entries[key] = _CacheEntry(value=value, written_at=now, accessed_at=now)

    def _invalidate(self, key: Hashable) -> None:
        self._version += 1
        self._invalidations[key] = self._version
        self._invalidations.move_to_end(key)
        while len(self._invalidations) > self.settings.maximum_size:
            _, dropped_version = self._invalidations.popitem(last=False)
            self._invalidation_floor = max(self._invalidation_floor, dropped_version)

    def _is_expired(self, entry: _CacheEntry, now: float) -> bool:
        return (
            now - entry.written_at >= self.settings.expire_after_write_seconds
            or now - entry.accessed_at >= self.settings.expire_after_access_seconds
        )


class InMemoryCacheManager(CacheManager):
    """
    Process-local CacheManager

    Caches are created lazily on first use and all share the same
    CacheSettings and clock.
    """

    def __init__(
        self,
        settings: Optional[CacheSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or CacheSettings()
        self._clock = clock
        self._caches: Dict[str, ExpiringLRUCache] = {}
        self._lock = threading.Lock()
        logger.info(
            "Initializing cache manager: initial_capacity %s, maximum_size %s, "
            "expire_after_write %ss, expire_after_access %ss",
            self.settings.initial_capacity,
            self.settings.maximum_size,
            self.settings.expire_after_write_seconds,
            self.settings.expire_after_access_seconds,
        )

    def get_cache(self, cache_name: str) -> ExpiringLRUCache:
        with self._lock:
            cache = self._caches.get(cache_name)
            if cache is None:
                cache = ExpiringLRUCache(cache_name, self.settings, clock=self._clock)
                self._caches[cache_name] = cache
            return cache

    def get(self, cache_name: str, key: Hashable) -> Optional[Any]:
        return self.get_cache(cache_name).get(key)

    def put(self, cache_name: str, key: Hashable, value: Any) -> None:
        self.get_cache(cache_name).put(key, value)

    def token(self, cache_name: str, key: Hashable) -> int:
        return self.get_cache(cache_name).token(key)

    def put_if_unchanged(self, cache_name: str, key: Hashable, token: int, value: Any) -> bool:
        return self.get_cache(cache_name).put_if_unchanged(key, token, value)

    def evict(self, cache_name: str, key: Hashable) -> None:
        self.get_cache(cache_name).evict(key)

    def clear(self, cache_name: str) -> None:
        self.get_cache(cache_name).clear()

    def stats(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            caches = list(self._caches.values())
        return {cache.name: cache.stats() for cache in caches}
