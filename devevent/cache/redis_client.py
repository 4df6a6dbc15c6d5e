"""
Redis cache client with connection pooling and JSON serialization.

Cache failures never fail a request: every operation logs the error and
behaves like a miss.
"""
import json
from typing import Optional, Any
import redis.asyncio as redis
from redis.exceptions import RedisError
from devevent.core.config import settings
from devevent.core.logging import logger


class RedisCache:
    """Redis cache client with connection pooling."""

    def __init__(self, url: str, enabled: bool = True):
        self.url = url
        self.enabled = enabled
        self._pool: Optional[redis.ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    def _get_client(self) -> redis.Redis:
        """Get or create Redis client with connection pooling."""
        if self._client is None:
            self._pool = redis.ConnectionPool.from_url(
                self.url,
                decode_responses=True,
                max_connections=20,
                socket_connect_timeout=2,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            logger.info("Redis connection pool created")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache by key.

        Returns:
            Cached value or None if not found (or caching is disabled)
        """
        if not self.enabled:
            return None
        try:
            value = await self._get_client().get(key)
            if value:
                return json.loads(value)
            return None
        except (RedisError, OSError, ValueError) as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, expire: int = 60) -> bool:
        """Store a JSON-serializable value with a TTL in seconds."""
        if not self.enabled:
            return False
        try:
            serialized = json.dumps(value, default=str)
            await self._get_client().setex(key, expire, serialized)
            return True
        except (RedisError, OSError, TypeError) as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching pattern.

        Args:
            pattern: Key pattern (e.g., 'events:*')

        Returns:
            Number of keys deleted
        """
        if not self.enabled:
            return 0
        try:
            client = self._get_client()
            keys = [key async for key in client.scan_iter(match=pattern)]
            if keys:
                return await client.delete(*keys)
            return 0
        except (RedisError, OSError) as e:
            logger.error(f"Redis DELETE_PATTERN error for pattern {pattern}: {e}")
            return 0

    async def close(self):
        """Close Redis connection pool."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._pool = None
            logger.info("Redis connection pool closed")


# Create a single instance to be imported throughout the app
cache = RedisCache(settings.REDIS_URL, enabled=settings.CACHE_ENABLED)
