"""
Async Redis Client Factory.

Creates Redis client with connection pooling for DI container.
Only used when REALTIME_BACKEND=redis.
"""

import logging
import redis.asyncio as redis
from redis.asyncio import Redis
from portal_chat.config.settings import Config

logger = logging.getLogger(__name__)


async def create_redis_client() -> Redis:
    """
    Create async Redis client with connection pool.

    Raises:
        redis.ConnectionError: If Redis is not reachable
    """
    client = redis.from_url(
        Config.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5.0,
    )

    # Test connection
    await client.ping()
    logger.info(f"[Redis] Connected to {Config.REDIS_URL}")

    return client


async def close_redis_client(client: Redis) -> None:
    """Close Redis client connection."""
    if client:
        await client.aclose()
        logger.info("[Redis] Connection closed")
