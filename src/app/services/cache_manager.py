"""Cache Manager Interface

Defines the contract for named key/value caches used by the services.
"""

from abc import ABC, abstractmethod
from typing import Any, Hashable, Optional


class CacheManager(ABC):
    """
    Abstract registry of named caches

    Absence of a key is never an error: get returns None and evict of an
    absent key is a silent no-op. Implementations never perform store I/O
    and must be safe for concurrent use.
    """

    @abstractmethod
    def get(self, cache_name: str, key: Hashable) -> Optional[Any]:
        """
        Look up a cached value

        Args:
            cache_name: Name of the cache (e.g. "transaction-by-id")
            key: Cache key

        Returns:
            Cached value, or None when absent or expired
        """
        pass

    @abstractmethod
    def put(self, cache_name: str, key: Hashable, value: Any) -> None:
        """Store a value, replacing any previous entry for the key"""
        pass

    @abstractmethod
    def token(self, cache_name: str, key: Hashable) -> int:
        """
        Snapshot the key's invalidation state before a store read

        Returns:
            Opaque token for put_if_unchanged
        """
        pass

    @abstractmethod
    def put_if_unchanged(self, cache_name: str, key: Hashable, token: int, value: Any) -> bool:
        """
        Store a value unless the key was evicted after token was taken

        Returns:
            True if stored, False if discarded as stale
        """
        pass

    @abstractmethod
    def evict(self, cache_name: str, key: Hashable) -> None:
        """Remove a key; no-op when the key is absent"""
        pass

    @abstractmethod
    def clear(self, cache_name: str) -> None:
        """Remove every entry of one cache"""
        pass
