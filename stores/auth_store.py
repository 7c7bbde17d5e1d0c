from typing import Optional
from abc import ABC, abstractmethod


# =========================
# AuthStore Interface
# =========================

class AuthStore(ABC):
    """
    The AuthStore is the sole authority over accounts and session state.

    Invariants:
    - Passwords are stored as (salt, hashed) tuples
    - Session tokens are unique and time-limited
    """

    # -------------------------------------------------
    # Accounts
    # -------------------------------------------------

    @abstractmethod
    async def create_user(
        self,
        username: str,
        salt: bytes,
        hashed: bytes,
    ) -> dict:
        """Create an account and return {user_id, username, created_at}.

        Raises:
            UserAlreadyExists: If the username is taken.
        """

    @abstractmethod
    async def get_user(self, user_id: str) -> dict:
        """Return {user_id, username, created_at}.

        Raises:
            UserNotFound: If no such user exists.
        """

    @abstractmethod
    async def get_user_password(
        self,
        username: str,
    ) -> Optional[tuple[str, bytes, bytes]]:
        """
        Retrieve (user_id, salt, hashed) for a username.
        Returns None if the user does not exist.
        """

    # -------------------------------------------------
    # Session management
    # -------------------------------------------------

    @abstractmethod
    async def create_session_token(
        self,
        session_token: str,
        *,
        user_id: str,
        expires_at,
    ) -> None:
        """Create or update a session token.

        Raises:
            UserNotFound: If the user does not exist.
        """

    @abstractmethod
    async def validate_session_token(
        self,
        session_token: str,
    ) -> Optional[dict]:
        """Return {user_id} if the token is valid, None if unknown or expired.

        Expired tokens are deleted on sight.
        """

    @abstractmethod
    async def invalidate_session(
        self,
        session_token: str,
    ) -> None:
        """Explicitly revoke a session (logout).

        Raises:
            SessionNotFound: If the session token is not found.
        """

    @abstractmethod
    async def delete_expired_sessions(self) -> int:
        """Cleanup task. Deletes expired sessions, returns count."""
