"""Infrastructure helpers (Redis connection and the game list cache)."""
from .redis import RedisClient, init_default_redis, close_default_redis
from .cache import GameListCache, cache_key, get_game_cache, set_game_cache

__all__ = [
    "RedisClient",
    "init_default_redis",
    "close_default_redis",
    "GameListCache",
    "cache_key",
    "get_game_cache",
    "set_game_cache",
]
