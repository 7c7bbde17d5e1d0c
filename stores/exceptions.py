"""
Shared exception definitions for all stores.

Hierarchy:
- StoreError (base for all store exceptions)
  - GameStoreError (game-specific errors)
  - AuthStoreError (auth-specific errors)

Store errors are never retried; routes map them straight to a response.
"""


# =========================
# Base exception
# =========================

class StoreError(Exception):
    """Base exception for all store-related errors."""


class UnexpectedResult(StoreError):
    # rows that should exist vanished between statements, or similar
    pass


# =========================
# GameStore exceptions
# =========================

class GameStoreError(StoreError):
    """Base exception for game store errors."""


class GameNotFound(GameStoreError):
    """The game does not exist or is not owned by the caller."""


class InvalidState(GameStoreError):
    """A stored row could not be decoded."""


# =========================
# AuthStore exceptions
# =========================

class AuthStoreError(StoreError):
    """Base exception for auth store errors."""


class UserNotFound(AuthStoreError):
    pass


class UserAlreadyExists(AuthStoreError):
    pass


class SessionNotFound(AuthStoreError):
    pass
