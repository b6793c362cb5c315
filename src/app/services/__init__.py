from .unit_of_work import UnitOfWork
from .cache_manager import CacheManager

__all__ = [
    "UnitOfWork",
    "CacheManager",
]
