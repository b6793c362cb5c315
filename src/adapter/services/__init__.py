from .unit_of_work import SqlAlchemyUnitOfWork
from .cache_manager import (
    CacheSettings,
    ExpiringLRUCache,
    InMemoryCacheManager,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "CacheSettings",
    "ExpiringLRUCache",
    "InMemoryCacheManager",
]
