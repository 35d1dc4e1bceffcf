"""Redis connection for token revocation and rate limiting."""

import logging

import redis.asyncio as redis

from surveydesk.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis client
redis_client: redis.Redis | None = None


async def connect_redis() -> None:
    """Connect to Redis."""
    global redis_client

    redis_client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    # Test connection
    try:
        await redis_client.ping()
        logger.info(f"Connected to Redis: {settings.redis_url}")
    except Exception as e:
        logger.error(f"Failed to connect to Redis: {e}")
        raise


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client

    if redis_client:
        await redis_client.aclose()
        logger.info("Redis connection closed")


def get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if redis_client is None:
        raise RuntimeError("Redis is not connected")
    return redis_client


class RedisCache:
    """Helper class for common Redis operations."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Build full key with prefix."""
        return f"{self.prefix}:{key}" if self.prefix else key

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> None:
        """Set value with optional TTL (seconds)."""
        client = get_redis()
        if ttl:
            await client.setex(self._key(key), ttl, value)
        else:
            await client.set(self._key(key), value)

    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        client = get_redis()
        return await client.exists(self._key(key)) > 0


# Pre-configured cache instances
jwt_blacklist = RedisCache(prefix="jwt_blacklist")
