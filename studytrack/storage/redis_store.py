"""
Redis record store.

Keys are namespaced as "<namespace>:<key>" so several users or
environments can share one Redis database.
"""

import logging
from typing import Any, Optional

import redis.asyncio as redis

from studytrack.config import REDIS_URL, REDIS_NAMESPACE
from studytrack.storage.base import StateStore

logger = logging.getLogger(__name__)


class RedisStore(StateStore):
    """
    Async Redis record store.

    The connection is opened lazily on first use. Connection failures
    surface through the base class: a failed save becomes a SaveResult
    with success=False, a failed load raises StorageError.
    """

    backend = "redis"

    def __init__(
        self,
        redis_url: str = REDIS_URL,
        namespace: str = REDIS_NAMESPACE,
        client: Optional[Any] = None
    ):
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL
            namespace: Prefix for every key
            client: Pre-built redis.asyncio client (tests)
        """
        self.redis_url = redis_url
        self.namespace = namespace
        self._client = client

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    async def connect(self):
        """Establish Redis connection."""
        if self._client is not None:
            return self._client

        client = redis.from_url(
            self.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=10,
        )
        try:
            await client.ping()
        except Exception:
            await client.aclose()
            raise

        # Only a client that answered the ping is reused
        self._client = client
        logger.info(f"✅ Redis connected: {self.redis_url}")
        return self._client

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client is None:
            return
        try:
            await self._client.aclose()
            logger.info("Redis connection closed")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {e}")
        finally:
            self._client = None

    async def _read(self, key: str) -> Optional[str]:
        client = await self.connect()
        return await client.get(self._key(key))

    async def _write(self, key: str, text: str) -> None:
        client = await self.connect()
        await client.set(self._key(key), text)

    async def _delete(self, key: str) -> bool:
        client = await self.connect()
        return await client.delete(self._key(key)) > 0
