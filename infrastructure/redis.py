"""Redis connection used for the per-owner game list cache.

The API opens one pooled connection at startup and closes it on shutdown.
Cache entries are JSON strings, so responses are decoded to `str`.
"""
from typing import Optional
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClient:
    """Owns a pooled `redis.asyncio.Redis` for the lifetime of the app.

    `init()` connects and pings so a bad `REDIS_URL` fails at startup
    rather than on the first game list request.
    """

    def __init__(self, url: str, *, socket_timeout: float = 5.0):
        self.url = url
        self.socket_timeout = socket_timeout
        self._client: Optional[redis.Redis] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def init(self) -> None:
        if self._client is not None:
            return
        client = redis.from_url(
            self.url,
            decode_responses=True,
            socket_timeout=self.socket_timeout,
        )
        try:
            await client.ping()
        except RedisError:
            await client.aclose()
            logger.error(f"[CACHE] Redis unreachable at {self.url}")
            raise
        self._client = client
        logger.info(f"[CACHE] Connected to Redis at {self.url}")

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("[CACHE] Redis connection closed")

    def get(self) -> redis.Redis:
        """The connected client. Raises RuntimeError before `init()`."""
        if self._client is None:
            raise RuntimeError("Redis client not initialized; call init() first")
        return self._client


# One shared connection per process
_default_client: Optional[RedisClient] = None


async def init_default_redis(url: str) -> RedisClient:
    global _default_client
    if _default_client is None:
        _default_client = RedisClient(url)
    await _default_client.init()
    return _default_client


async def close_default_redis() -> None:
    global _default_client
    if _default_client is not None:
        await _default_client.close()
        _default_client = None
