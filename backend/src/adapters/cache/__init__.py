"""
Cache adapters for the RecLeague league service client.
"""

from .redis_client import RedisCache, cache, CacheManager, CacheEntry

__all__ = [
    "RedisCache",
    "cache",
    "CacheManager",
    "CacheEntry",
]
