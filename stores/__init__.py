# Abstractions
from .game_store import GameStore
from .auth_store import AuthStore

# Exceptions
from .exceptions import (
    StoreError,
    GameStoreError,
    GameNotFound,
    InvalidState,
    UnexpectedResult,
    AuthStoreError,
    UserNotFound,
    UserAlreadyExists,
    SessionNotFound,
)

# Concrete implementations are private; only abstract interfaces are exported.
from .sqlite_game_store import SqliteGameStore as _SqliteGameStore
from .sqlite_auth_store import SqliteAuthStore as _SqliteAuthStore

__all__ = [
    # Abstractions
    "GameStore",
    "AuthStore",
    # Exceptions
    "StoreError",
    "GameStoreError",
    "GameNotFound",
    "InvalidState",
    "UnexpectedResult",
    "AuthStoreError",
    "UserNotFound",
    "UserAlreadyExists",
    "SessionNotFound",
    # Lifecycle
    "init_stores",
    "close_stores",
    "get_game_store",
    "get_auth_store",
]


# Runtime singletons and initialization helpers
from typing import Optional
import logging

from db import ensure_db

logger = logging.getLogger(__name__)

# Use abstract interfaces for typing; actual instances are _SqliteGameStore/_SqliteAuthStore
game_store: Optional[GameStore] = None
auth_store: Optional[AuthStore] = None


async def init_stores(db_path: str) -> None:
    """Apply the schema and open the module-level store singletons.

    Safe to call more than once; already-open stores are kept.
    """
    global game_store, auth_store

    if game_store is not None and auth_store is not None:
        return

    await ensure_db(db_path)

    if game_store is None:
        store = _SqliteGameStore(db_path)
        await store.init()
        game_store = store

    if auth_store is None:
        store = _SqliteAuthStore(db_path)
        await store.init()
        auth_store = store


async def close_stores() -> None:
    """Close and forget the store singletons."""
    global game_store, auth_store

    if game_store is not None:
        await game_store.close()
        game_store = None
    if auth_store is not None:
        await auth_store.close()
        auth_store = None


def get_game_store() -> GameStore:
    """FastAPI dependency returning the game store."""
    if game_store is None:
        raise RuntimeError("Game store not initialized; call init_stores() first")
    return game_store


def get_auth_store() -> AuthStore:
    """FastAPI dependency returning the auth store."""
    if auth_store is None:
        raise RuntimeError("Auth store not initialized; call init_stores() first")
    return auth_store
