"""
Cache strategies using Strategy Pattern.
Backends for the lookup cache that sits in front of website and session reads.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict
import logging

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    Stores plain strings; the lookup cache handles serialization.
    All methods are async because cache operations involve I/O (network for Redis).
    The cache is best-effort: failures read as misses, never as errors.
    """

    enabled: bool = True

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (Time To Live).

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key from cache. True if something was deleted."""
        pass


class RedisCache(CacheStrategy):
    """
    Redis cache shared by every collector process.

    Errors are logged and reported as misses.
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
            return value.decode("utf-8") if value else None
        except Exception as e:
            logger.warning("Redis get error for %s: %s", key, e)
            return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(key, ttl, value))
        except Exception as e:
            logger.warning("Redis set error for %s: %s", key, e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(self.redis.delete(key))
        except Exception as e:
            logger.warning("Redis delete error for %s: %s", key, e)
            return False


class InMemoryCache(CacheStrategy):
    """
    Per-process dict cache for development and tests.

    TTL is ignored: entries live until deleted or the process exits.
    """

    def __init__(self):
        self._cache: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        self._cache[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Selecting it turns the lookup cache off: resolution reads
    straight from the database.
    """

    enabled = False

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True

    async def delete(self, key: str) -> bool:
        return True
