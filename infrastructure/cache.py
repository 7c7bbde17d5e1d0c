"""Read-through cache of each owner's game list.

The list endpoint reads `games:<owner_id>` first and repopulates it from the
store on a miss. Every create, update and delete for that owner deletes the
key, so the next list goes back to the store.
"""
import json
import logging
from typing import Any, Awaitable, Callable

import redis.asyncio as redis

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300


def cache_key(owner_id: str) -> str:
    return f"games:{owner_id}"


class GameListCache:

    def __init__(self, client: redis.Redis, *, ttl: int = DEFAULT_TTL):
        self.client = client
        self.ttl = ttl

    async def get(self, owner_id: str) -> list[dict[str, Any]] | None:
        raw = await self.client.get(cache_key(owner_id))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"[CACHE] Dropping unreadable entry for {owner_id}")
            await self.invalidate(owner_id)
            return None

    async def put(self, owner_id: str, games: list[dict[str, Any]]) -> None:
        await self.client.set(cache_key(owner_id), json.dumps(games), ex=self.ttl)

    async def invalidate(self, owner_id: str) -> None:
        await self.client.delete(cache_key(owner_id))

    async def get_or_load(
        self,
        owner_id: str,
        loader: Callable[[], Awaitable[list[dict[str, Any]]]],
    ) -> list[dict[str, Any]]:
        """Return the cached list, calling `loader` and caching its result on a miss."""
        cached = await self.get(owner_id)
        if cached is not None:
            logger.debug(f"[CACHE] hit {cache_key(owner_id)}")
            return cached

        logger.debug(f"[CACHE] miss {cache_key(owner_id)}")
        games = await loader()
        await self.put(owner_id, games)
        return games


# Module-level singleton used as a FastAPI dependency
_game_cache: GameListCache | None = None


def set_game_cache(cache: GameListCache | None) -> None:
    global _game_cache
    _game_cache = cache


def get_game_cache() -> GameListCache:
    if _game_cache is None:
        raise RuntimeError("Game cache not initialized; call set_game_cache() first")
    return _game_cache
