"""Cache backends."""

from talentpool.cache.base import CacheService
from talentpool.cache.memory import MemoryCacheService
from talentpool.cache.redis_cache import RedisCacheService

__all__ = [
    "CacheService",
    "MemoryCacheService",
    "RedisCacheService",
]
