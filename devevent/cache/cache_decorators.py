"""
Cache decorators for easy function result caching.
"""
import hashlib
import json
from functools import wraps
from typing import Callable, Any
from sqlalchemy.ext.asyncio import AsyncSession
from devevent.cache.redis_client import cache
from devevent.core.logging import logger

# Key prefixes of the aggregate views; writes invalidate everything under "views:"
CATEGORIES_KEY = "views:categories"
STATS_KEY = "views:stats"


def cached(key_prefix: str, expire: int = 60):
    """
    Decorator to cache function results with configurable TTL.

    The wrapped coroutine must return JSON-serializable data.

    Usage:
        @cached('views:categories', expire=60)
        async def get_category_counts(db):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            cache_key = f"{key_prefix}:{_generate_key_from_args(args, kwargs)}"

            cached_value = await cache.get(cache_key)
            if cached_value is not None:
                logger.debug(f"Cache hit for key: {cache_key}")
                return cached_value

            logger.debug(f"Cache miss for key: {cache_key}")
            result = await func(*args, **kwargs)
            await cache.set(cache_key, result, expire)
            return result
        return wrapper
    return decorator


async def invalidate_views() -> None:
    """Drop cached aggregate views after a write."""
    await cache.delete_pattern("views:*")


def _generate_key_from_args(args: tuple, kwargs: dict) -> str:
    """MD5 of the call arguments, ignoring database sessions."""
    key_data = {
        'args': [str(arg) for arg in args if not isinstance(arg, AsyncSession)],
        'kwargs': {k: str(v) for k, v in kwargs.items() if not isinstance(v, AsyncSession)},
    }
    key_string = json.dumps(key_data, sort_keys=True)
    return hashlib.md5(key_string.encode()).hexdigest()
