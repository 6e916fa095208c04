"""
Redis Cache Service
===================

Redis caching layer with connection management, JSON cache operations,
and invalidation helpers. Every operation degrades to a cache miss when
Redis is unavailable.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from lifeos.config import settings

logger = logging.getLogger(__name__)

# Global Redis client instance
_redis_client: Optional[Redis] = None


async def init_redis() -> Redis:
    """
    Initialize Redis connection pool and pre-warm a connection.

    Returns:
        Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=50,
            socket_keepalive=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        await _redis_client.ping()
        logger.info("Redis connection established")

    return _redis_client


async def get_redis() -> Redis:
    """Get Redis client, initializing if necessary."""
    if _redis_client is None:
        return await init_redis()

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis connection closed")


class CacheManager:
    """
    Redis cache manager with common operations.

    Key naming convention:
        cache:{module}:{resource}:{identifier}

    TTL Guidelines:
        - Public profile page: 5 minutes (300s)
        - Dashboard summary: 5 minutes (300s)
        - Analytics page: 15 minutes (900s)
    """

    # Default TTLs in seconds
    TTL_SHORT = 300  # 5 minutes
    TTL_MEDIUM = 900  # 15 minutes
    TTL_HOUR = 3600  # 1 hour

    @staticmethod
    async def get(key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value if exists and valid, None otherwise
        """
        try:
            client = await get_redis()
            value = await client.get(key)

            if value is None:
                return None

            return json.loads(value)
        except Exception as e:
            logger.warning("Cache get error for key %s: %s", key, e)
            return None

    @staticmethod
    async def set(
        key: str,
        value: Any,
        ttl: int = TTL_SHORT,
    ) -> bool:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds (default 5 minutes)

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await get_redis()
            serialized = json.dumps(value, default=str)
            await client.setex(key, ttl, serialized)
            return True
        except Exception as e:
            logger.warning("Cache set error for key %s: %s", key, e)
            return False

    @staticmethod
    async def delete(key: str) -> bool:
        """Delete key from cache. Returns True if a key was removed."""
        try:
            client = await get_redis()
            result = await client.delete(key)
            return result > 0
        except Exception as e:
            logger.warning("Cache delete error for key %s: %s", key, e)
            return False

    @staticmethod
    async def delete_pattern(pattern: str) -> int:
        """
        Delete all keys matching a pattern.

        Args:
            pattern: Pattern with wildcards (e.g., "cache:dashboard:<id>:*")

        Returns:
            Number of keys deleted
        """
        try:
            client = await get_redis()
            keys = []

            async for key in client.scan_iter(match=pattern):
                keys.append(key)

            if keys:
                return await client.delete(*keys)
            return 0
        except Exception as e:
            logger.warning("Cache delete pattern error for %s: %s", pattern, e)
            return 0


# =============================================================================
# Cache Key Builders
# =============================================================================

class CacheKeys:
    """Cache key builders for consistent naming."""

    @staticmethod
    def public_profile(username: str) -> str:
        """Public profile page (profile + derived stats) by username."""
        return f"cache:profile:public:{username}"

    @staticmethod
    def analytics(user_id: str, day: str) -> str:
        """Analytics page payload for a user and calendar day."""
        return f"cache:analytics:{user_id}:{day}"


# =============================================================================
# Cache Invalidation Helpers
# =============================================================================

class CacheInvalidator:
    """Helpers for invalidating related cache entries."""

    @staticmethod
    async def on_profile_update(*usernames: Optional[str]) -> None:
        """Drop the public page for the old and new username."""
        for username in usernames:
            if username:
                await CacheManager.delete(CacheKeys.public_profile(username))

    @staticmethod
    async def on_activity_change(user_id: str) -> None:
        """Drop derived analytics after tasks, habits or expenses change."""
        await CacheManager.delete_pattern(f"cache:analytics:{user_id}:*")
