import logging
import sqlite3
import uuid

import aiosqlite

from db import connect
from utils.time import now_utc, to_iso, parse_iso
from .auth_store import AuthStore
from .exceptions import (
    UserAlreadyExists,
    UserNotFound,
    SessionNotFound,
)

logger = logging.getLogger(__name__)


class SqliteAuthStore(AuthStore):
    """SQLite-based implementation of AuthStore."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.db: aiosqlite.Connection = None

    async def init(self):
        """Initialize database connection. Call this after construction."""
        self.db = await connect(self.db_path)

    async def close(self):
        """Close database connection."""
        if self.db:
            await self.db.close()
            self.db = None

    # -------------------------------------------------
    # Accounts
    # -------------------------------------------------

    async def create_user(
        self,
        username: str,
        salt: bytes,
        hashed: bytes,
    ) -> dict:
        user_id = uuid.uuid4().hex
        created_at = to_iso(now_utc())
        try:
            await self.db.execute(
                """
                INSERT INTO users (user_id, username, salt, hashed, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, username, salt, hashed, created_at),
            )
        except sqlite3.IntegrityError as exc:
            raise UserAlreadyExists(f"User {username} already exists") from exc

        logger.info(f"[STORE] Created user {username} ({user_id})")
        return {"user_id": user_id, "username": username, "created_at": created_at}

    async def get_user(self, user_id: str) -> dict:
        cur = await self.db.execute(
            "SELECT user_id, username, created_at FROM users WHERE user_id = ?",
            (user_id,),
        )
        row = await cur.fetchone()
        if row is None:
            raise UserNotFound(f"User {user_id} not found")
        return {"user_id": row[0], "username": row[1], "created_at": row[2]}

    async def get_user_password(
        self,
        username: str,
    ) -> tuple[str, bytes, bytes] | None:
        cur = await self.db.execute(
            "SELECT user_id, salt, hashed FROM users WHERE username = ?",
            (username,),
        )
        row = await cur.fetchone()
        if not row:
            return None
        return (row[0], row[1], row[2])

    # -------------------------------------------------
    # Session management
    # -------------------------------------------------

    async def create_session_token(
        self,
        session_token: str,
        *,
        user_id: str,
        expires_at,
    ) -> None:
        cur = await self.db.execute("SELECT 1 FROM users WHERE user_id = ?", (user_id,))
        if await cur.fetchone() is None:
            raise UserNotFound(f"User {user_id} not found")

        if not isinstance(expires_at, str):
            expires_at = to_iso(expires_at)

        await self.db.execute(
            """
            INSERT OR REPLACE INTO session_tokens (session_token, user_id, expires_at)
            VALUES (?, ?, ?)
            """,
            (session_token, user_id, expires_at),
        )

    async def validate_session_token(
        self,
        session_token: str,
    ) -> dict | None:
        cur = await self.db.execute(
            """
            SELECT user_id, expires_at
            FROM session_tokens
            WHERE session_token = ?
            """,
            (session_token,),
        )
        row = await cur.fetchone()
        if not row:
            return None

        user_id, expires_at = row[0], row[1]
        expires_dt = parse_iso(expires_at)
        if expires_dt is None or expires_dt < now_utc():
            await self.db.execute(
                "DELETE FROM session_tokens WHERE session_token = ?",
                (session_token,),
            )
            return None

        return {"user_id": user_id}

    async def invalidate_session(
        self,
        session_token: str,
    ) -> None:
        cur = await self.db.execute(
            "DELETE FROM session_tokens WHERE session_token = ?",
            (session_token,),
        )
        if cur.rowcount == 0:
            raise SessionNotFound("Session token not found")

    async def delete_expired_sessions(self) -> int:
        cur = await self.db.execute(
            "DELETE FROM session_tokens WHERE expires_at < ?",
            (to_iso(now_utc()),),
        )
        if cur.rowcount:
            logger.info(f"[STORE] Deleted {cur.rowcount} expired session tokens")
        return cur.rowcount
