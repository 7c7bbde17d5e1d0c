"""
Game business logic helpers.

These functions pair every store mutation with the invalidation of the
owner's cached game list, so no write path can skip it. They operate on
store and cache instances, not HTTP requests.
"""

from typing import Any, Optional
import logging

from infrastructure import GameListCache
from models import Game
from stores import GameStore

logger = logging.getLogger(__name__)


async def list_games(store: GameStore, cache: GameListCache, owner_id: str) -> list[Game]:
    """Return the owner's games from the cache, or from the store on a miss."""
    return await cache.get_or_load(owner_id, lambda: store.list_games(owner_id))


async def get_game(store: GameStore, game_id: str, owner_id: str) -> Game:
    """Single-game reads always go to the store.

    Raises:
        GameNotFound: if the game is missing or owned by someone else
    """
    return await store.get_game(game_id, owner_id)


async def create_game(
    store: GameStore,
    cache: GameListCache,
    owner_id: str,
    *,
    title: str,
    pieces: Optional[list[dict[str, Any]]] = None,
    rules: Optional[str] = None,
) -> Game:
    game = await store.create_game(owner_id, title=title, pieces=pieces, rules=rules)
    await cache.invalidate(owner_id)
    logger.info(f"Game {game['id']} created for {owner_id}")
    return game


async def update_game(
    store: GameStore,
    cache: GameListCache,
    game_id: str,
    owner_id: str,
    *,
    title: Optional[str] = None,
    pieces: Optional[list[dict[str, Any]]] = None,
    rules: Optional[str] = None,
) -> Game:
    """
    Raises:
        GameNotFound: if the game is missing or owned by someone else
    """
    game = await store.update_game(game_id, owner_id, title=title, pieces=pieces, rules=rules)
    await cache.invalidate(owner_id)
    return game


async def delete_game(store: GameStore, cache: GameListCache, game_id: str, owner_id: str) -> dict[str, str]:
    """
    Raises:
        GameNotFound: if the game is missing or owned by someone else
    """
    await store.delete_game(game_id, owner_id)
    await cache.invalidate(owner_id)
    logger.info(f"Game {game_id} deleted by {owner_id}")
    return {"message": "Game removed"}
