"""
Redis client initialization and connection management.

The client is created in the application lifespan and kept on app.state,
so tests can swap in a fake without touching module globals.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from backend.app.core.config import Settings

logger = logging.getLogger("fleet.redis")


def create_redis(settings: Settings) -> redis.Redis:
    """Create an async Redis client from settings."""
    return redis.from_url(
        settings.redis_url,
        decode_responses=settings.redis_decode_responses,
    )


async def ping_redis(client: redis.Redis) -> bool:
    """
    Test Redis connection.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        return bool(await client.ping())
    except (RedisError, OSError):
        logger.warning("Redis ping failed", exc_info=True)
        return False
