import asyncio
import json
import logging
import sqlite3
import uuid

import aiosqlite

from db import connect
from utils.time import now_utc, to_iso
from .exceptions import (
    GameNotFound,
    InvalidState,
    UnexpectedResult,
)
from .game_store import GameStore

logger = logging.getLogger(__name__)


_GAME_COLUMNS = "game_id, owner_id, title, pieces, rules, created_at, updated_at"


def _row_to_game(row) -> dict:
    try:
        pieces = json.loads(row["pieces"]) if row["pieces"] else []
    except json.JSONDecodeError as exc:
        raise InvalidState(f"Game {row['game_id']} has a corrupt piece list") from exc
    return {
        "id": row["game_id"],
        "title": row["title"],
        "pieces": pieces,
        "rules": row["rules"] or "",
        "owner_id": row["owner_id"],
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


class SqliteGameStore(GameStore):
    """Game rows on a single shared aiosqlite connection.

    Writes hold `_write_lock` from their first statement to commit or
    rollback, so one request's transaction never picks up another's writes.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.db: aiosqlite.Connection = None
        self._write_lock = asyncio.Lock()
        logger.info(f"[STORE] SqliteGameStore initialized with db_path: {db_path}")

    async def init(self):
        """Initialize database connection. Call this after construction."""
        self.db = await connect(self.db_path)

        async with self.db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='games'"
        ) as cursor:
            if await cursor.fetchone() is None:
                logger.error("[STORE] games table missing; was the schema applied?")
                raise RuntimeError(f"Database at {self.db_path} has no games table")
        logger.info(f"[STORE] Database connection established to {self.db_path}")

    async def close(self):
        """Close database connection."""
        if self.db:
            await self.db.close()
            self.db = None

    async def _fetch_owned(self, game_id: str, owner_id: str):
        cur = await self.db.execute(
            f"SELECT {_GAME_COLUMNS} FROM games WHERE game_id = ? AND owner_id = ?",
            (game_id, owner_id),
        )
        return await cur.fetchone()

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------

    async def create_game(
        self,
        owner_id: str,
        *,
        title: str,
        pieces: list[dict] | None = None,
        rules: str | None = None,
    ) -> dict:
        game_id = uuid.uuid4().hex
        now = to_iso(now_utc())
        logger.info(f"[STORE] Creating game {game_id} for owner {owner_id}")

        async with self._write_lock:
            try:
                await self.db.execute(
                    f"""
                    INSERT INTO games ({_GAME_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (game_id, owner_id, title, json.dumps(pieces or []), rules or "", now, now),
                )
            except sqlite3.IntegrityError as exc:
                # owner row missing (foreign key) or a uuid collision
                raise UnexpectedResult(f"Could not insert game for owner {owner_id}") from exc

            row = await self._fetch_owned(game_id, owner_id)
        if row is None:
            raise UnexpectedResult(f"Game {game_id} vanished right after insert")
        return _row_to_game(row)

    async def update_game(
        self,
        game_id: str,
        owner_id: str,
        *,
        title: str | None = None,
        pieces: list[dict] | None = None,
        rules: str | None = None,
    ) -> dict:
        async with self._write_lock:
            await self.db.execute("BEGIN IMMEDIATE")
            try:
                row = await self._fetch_owned(game_id, owner_id)
                if row is None:
                    raise GameNotFound(game_id)

                new_title = title or row["title"]
                new_pieces = json.dumps(pieces) if pieces is not None else row["pieces"]
                new_rules = rules or row["rules"]

                await self.db.execute(
                    """
                    UPDATE games
                    SET title = ?, pieces = ?, rules = ?, updated_at = ?
                    WHERE game_id = ? AND owner_id = ?
                    """,
                    (new_title, new_pieces, new_rules, to_iso(now_utc()), game_id, owner_id),
                )
                row = await self._fetch_owned(game_id, owner_id)
                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

        logger.info(f"[STORE] Updated game {game_id}")
        return _row_to_game(row)

    async def delete_game(
        self,
        game_id: str,
        owner_id: str,
    ) -> None:
        async with self._write_lock:
            cur = await self.db.execute(
                "DELETE FROM games WHERE game_id = ? AND owner_id = ?",
                (game_id, owner_id),
            )
        if cur.rowcount == 0:
            raise GameNotFound(game_id)
        logger.info(f"[STORE] Deleted game {game_id}")

    # -------------------------------------------------
    # Read-side queries
    # -------------------------------------------------

    async def get_game(self, game_id: str, owner_id: str) -> dict:
        row = await self._fetch_owned(game_id, owner_id)
        if row is None:
            raise GameNotFound(game_id)
        return _row_to_game(row)

    async def list_games(self, owner_id: str) -> list[dict]:
        cur = await self.db.execute(
            f"""
            SELECT {_GAME_COLUMNS} FROM games
            WHERE owner_id = ?
            ORDER BY updated_at DESC, rowid DESC
            """,
            (owner_id,),
        )
        return [_row_to_game(r) for r in await cur.fetchall()]
