"""
Redis client with connection pooling for the persistence layer.

One async connection pool per process, created lazily from settings and
disconnected on application shutdown.
"""

from typing import Optional

import structlog
from redis.asyncio import ConnectionPool as AsyncConnectionPool
from redis.asyncio import Redis as AsyncRedis

from sentiment_pipeline.config import Settings

logger = structlog.get_logger(__name__)


class RedisClient:
    """Owns an async Redis connection pool built from settings."""

    def __init__(self, settings: Settings):
        self.url = settings.REDIS_URL
        self.max_connections = settings.REDIS_MAX_CONNECTIONS
        self._pool: Optional[AsyncConnectionPool] = None

    def get_client(self) -> AsyncRedis:
        """
        Get an AsyncRedis client bound to the shared pool.

        Returns:
            AsyncRedis client instance
        """
        if self._pool is None:
            self._pool = AsyncConnectionPool.from_url(
                self.url,
                max_connections=self.max_connections,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True,
            )
            logger.info("Initialized Redis async connection pool", max_connections=self.max_connections)

        return AsyncRedis(connection_pool=self._pool)

    async def close(self) -> None:
        """Disconnect the pool (cleanup on shutdown)."""
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
            logger.info("Closed Redis async connection pool")
