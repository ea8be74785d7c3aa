"""
Redis caching client for league service responses.
Implements TTL per endpoint, compression of large payloads and endpoint-level invalidation.
"""
import json
import gzip
import logging
import hashlib
from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict
from datetime import datetime, timezone

import redis.asyncio as redis

from config.settings import settings
from core.exceptions import CacheConnectionError, ErrorContext

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


@dataclass
class CacheEntry:
    """Structure for cached data with metadata."""
    data: Any
    timestamp: str
    endpoint: str
    compressed: bool = False
    hit_count: int = 0


class RedisCache:
    """
    Redis-based cache for league service GET responses.
    Features:
    - Endpoint-specific TTL strategies
    - Automatic compression for large responses
    - Invalidation of every cached variant of an endpoint after a write
    - Cache failures degrade to a miss, never to an error
    """

    def __init__(self, key_prefix: str = "recleague", default_ttl: Optional[int] = None):
        """Initialize Redis cache; call connect() before use."""
        self.redis_client: Optional[redis.Redis] = None
        self.connection_pool: Optional[redis.ConnectionPool] = None
        self.enabled = True

        default_ttl = default_ttl or settings.cache_ttl

        # Endpoint TTL strategies (in seconds), keyed by resource
        self.ttl_strategies = {
            'team': 3600,        # Records change after every result (1 hour)
            'game': 300,         # Results and times change on game days (5 min)
            'player': 1800,      # Roster moves (30 min)
            'user': 21600,       # Account details rarely change (6 hours)
            'payment': 600,      # Payment status settles quickly (10 min)
            'default': default_ttl
        }

        # Compression threshold (bytes)
        self.compression_threshold = 1024  # 1KB

        # Cache key prefixes
        self.key_prefix = key_prefix
        self.version = "v1"

    async def connect(self, raise_on_failure: bool = False) -> bool:
        """
        Establish Redis connection. A failed connection disables the cache
        unless raise_on_failure is set.
        """
        try:
            conn_kwargs = settings.redis_connection_kwargs

            self.connection_pool = redis.ConnectionPool(**conn_kwargs)
            self.redis_client = redis.Redis(connection_pool=self.connection_pool)

            await self.redis_client.ping()
            self.enabled = True
            logger.info("Redis cache connected successfully")
            return True

        except (redis.RedisError, OSError) as e:
            logger.error(f"Redis connection failed: {e}")
            self.enabled = False
            if raise_on_failure:
                raise CacheConnectionError(
                    cache_url=settings.redis_url,
                    context=ErrorContext(operation="cache_connect"),
                    original_error=e
                ) from e
            return False

    async def disconnect(self):
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("Redis cache disconnected")

    def _endpoint_pattern(self, endpoint: str) -> str:
        return f"{self.key_prefix}:{self.version}:{endpoint.strip('/')}:*"

    def _generate_cache_key(self, endpoint: str, params: Optional[Dict] = None) -> str:
        """Generate a hierarchical cache key, stable across processes."""
        params_str = json.dumps(params or {}, sort_keys=True, default=str)
        params_hash = hashlib.sha1(params_str.encode('utf-8')).hexdigest()[:16]
        return f"{self.key_prefix}:{self.version}:{endpoint.strip('/')}:{params_hash}"

    def _get_ttl_for_endpoint(self, endpoint: str) -> int:
        """TTL by resource: "/api/game/list" uses the 'game' strategy."""
        parts = [part for part in endpoint.strip('/').split('/') if part]
        resource = parts[1] if len(parts) > 1 and parts[0] == 'api' else (parts[0] if parts else '')
        return self.ttl_strategies.get(resource, self.ttl_strategies['default'])

    def _should_compress(self, data: bytes) -> bool:
        """Determine if data should be compressed."""
        return len(data) > self.compression_threshold

    def _encode(self, entry: CacheEntry) -> bytes:
        raw = json.dumps(asdict(entry), default=str).encode('utf-8')
        if entry.compressed:
            return gzip.compress(raw)
        return raw

    def _decode(self, cached_data: bytes) -> CacheEntry:
        if isinstance(cached_data, str):
            cached_data = cached_data.encode('utf-8')
        if cached_data[:2] == GZIP_MAGIC:
            cached_data = gzip.decompress(cached_data)
        return CacheEntry(**json.loads(cached_data.decode('utf-8')))

    async def get(self, endpoint: str, params: Optional[Dict] = None) -> Optional[Any]:
        """Retrieve a cached response payload, or None on a miss."""
        if not self.enabled or not self.redis_client:
            return None

        try:
            cache_key = self._generate_cache_key(endpoint, params)

            cached_data = await self.redis_client.get(cache_key)
            if not cached_data:
                return None

            entry = self._decode(cached_data)
            entry.hit_count += 1
            await self._update_hit_count(cache_key, entry)

            logger.debug(f"Cache hit for {endpoint} (hits: {entry.hit_count})")
            return entry.data

        except (redis.RedisError, ValueError, OSError) as e:
            logger.error(f"Cache get error for {endpoint}: {e}")
            return None

    async def set(self, endpoint: str, data: Any, params: Optional[Dict] = None) -> bool:
        """Store a response payload in cache."""
        if not self.enabled or not self.redis_client:
            return False

        try:
            cache_key = self._generate_cache_key(endpoint, params)

            entry = CacheEntry(
                data=data,
                timestamp=datetime.now(timezone.utc).isoformat(),
                endpoint=endpoint,
            )
            entry.compressed = self._should_compress(json.dumps(data, default=str).encode('utf-8'))

            ttl = self._get_ttl_for_endpoint(endpoint)
            await self.redis_client.setex(cache_key, ttl, self._encode(entry))

            logger.debug(f"Cached {endpoint} for {ttl}s (compressed: {entry.compressed})")
            return True

        except (redis.RedisError, TypeError, ValueError) as e:
            logger.error(f"Cache set error for {endpoint}: {e}")
            return False

    async def _update_hit_count(self, cache_key: str, entry: CacheEntry):
        """Update hit count for analytics, keeping the remaining TTL."""
        try:
            ttl = await self.redis_client.ttl(cache_key)
            if ttl > 0:
                await self.redis_client.setex(cache_key, ttl, self._encode(entry))

        except redis.RedisError as e:
            logger.error(f"Hit count update error: {e}")

    async def invalidate(self, endpoint: str, params: Optional[Dict] = None):
        """Invalidate a single cache entry."""
        if not self.enabled or not self.redis_client:
            return

        try:
            cache_key = self._generate_cache_key(endpoint, params)
            await self.redis_client.delete(cache_key)
            logger.debug(f"Invalidated cache for {endpoint}")

        except redis.RedisError as e:
            logger.error(f"Cache invalidation error: {e}")

    async def invalidate_endpoint(self, endpoint: str) -> int:
        """Invalidate every cached parameter variant of an endpoint."""
        if not self.enabled or not self.redis_client:
            return 0

        try:
            keys = await self.redis_client.keys(self._endpoint_pattern(endpoint))
            if keys:
                await self.redis_client.delete(*keys)
                logger.info(f"Invalidated {len(keys)} cache entries for {endpoint}")
            return len(keys)

        except redis.RedisError as e:
            logger.error(f"Endpoint cache invalidation error: {e}")
            return 0

    async def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics by endpoint."""
        if not self.enabled or not self.redis_client:
            return {}

        try:
            stats = {
                "total_keys": 0,
                "by_endpoint": {},
                "memory_usage": "N/A",
            }

            pattern = f"{self.key_prefix}:{self.version}:*"
            keys = await self.redis_client.keys(pattern)
            stats["total_keys"] = len(keys)

            prefix_len = len(f"{self.key_prefix}:{self.version}:")
            for key in keys:
                if isinstance(key, bytes):
                    key = key.decode('utf-8')
                endpoint = key[prefix_len:].rsplit(":", 1)[0]
                stats["by_endpoint"][endpoint] = stats["by_endpoint"].get(endpoint, 0) + 1

            info = await self.redis_client.info("memory")
            stats["memory_usage"] = info.get("used_memory_human", "N/A")

            return stats

        except redis.RedisError as e:
            logger.error(f"Cache stats error: {e}")
            return {}

    async def clear_all(self):
        """Clear all cache entries under this prefix."""
        if not self.enabled or not self.redis_client:
            return

        try:
            pattern = f"{self.key_prefix}:{self.version}:*"
            keys = await self.redis_client.keys(pattern)

            if keys:
                await self.redis_client.delete(*keys)
                logger.warning(f"Cleared {len(keys)} cache entries")

        except redis.RedisError as e:
            logger.error(f"Cache clear error: {e}")


# Global cache instance
cache = RedisCache()


class CacheManager:
    """Context manager for Redis cache operations."""

    def __init__(self, redis_cache: Optional[RedisCache] = None):
        self.cache = redis_cache or cache

    async def __aenter__(self):
        """Connect to Redis on entry."""
        await self.cache.connect()
        return self.cache

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Disconnect from Redis on exit."""
        await self.cache.disconnect()
