"""
Rate Limiting
=============

Redis-based fixed window rate limiting, applied per authenticated user.

Used in front of the AI relay endpoints so one caller cannot drain the
shared completion-gateway credits.
"""

import logging
from typing import Optional

from lifeos.config import settings
from lifeos.core.errors import RelayRateLimitError
from lifeos.services.cache import get_redis

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed window rate limiter using Redis.

    Default limits:
        - AI relay endpoints: COACH_RATE_LIMIT_PER_MINUTE requests/minute
    """

    LIMITS = {
        "ai": {"max_requests": settings.COACH_RATE_LIMIT_PER_MINUTE, "window_seconds": 60},
    }

    @staticmethod
    def _get_key(identifier: str, action: str) -> str:
        """Generate rate limit key."""
        return f"ratelimit:{action}:{identifier}"

    @staticmethod
    async def check_rate_limit(
        identifier: str,
        action: str,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ) -> dict:
        """
        Check if request is within rate limit.

        Args:
            identifier: User ID
            action: Key into LIMITS (ai)
            max_requests: Override max requests (optional)
            window_seconds: Override window size (optional)

        Returns:
            Dict with 'allowed', 'remaining', 'reset_in' keys
        """
        limits = RateLimiter.LIMITS[action]
        max_req = max_requests or limits["max_requests"]
        window = window_seconds or limits["window_seconds"]

        key = RateLimiter._get_key(identifier, action)

        try:
            client = await get_redis()

            current = await client.incr(key)
            if current == 1:
                await client.expire(key, window)

            ttl = await client.ttl(key)
            reset_in = ttl if ttl and ttl > 0 else window

            if current > max_req:
                return {
                    "allowed": False,
                    "remaining": 0,
                    "reset_in": reset_in,
                }

            return {
                "allowed": True,
                "remaining": max_req - current,
                "reset_in": reset_in,
            }

        except Exception as e:
            # Fail open
            logger.warning("Rate limit check error: %s", e)
            return {
                "allowed": True,
                "remaining": max_req,
                "reset_in": window,
            }

    @staticmethod
    async def enforce(identifier: str, action: str) -> None:
        """Raise RelayRateLimitError when ``identifier`` is over its budget."""
        result = await RateLimiter.check_rate_limit(identifier, action)
        if not result["allowed"]:
            raise RelayRateLimitError()
