"""Bearer-token authentication for FastAPI routes.

`current_user_id` is used as a route dependency; it resolves the
`Authorization: Bearer <token>` header against the AuthStore and yields the
owning user's id, or answers 401.
"""
from typing import Optional
import logging

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import config
from stores import AuthStore, get_auth_store

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class UnauthorizedException(Exception):
	"""Raised when credentials are missing or fail validation."""
	pass


def hash_password(password: str) -> tuple[bytes, bytes]:
	"""Hash a password using bcrypt and return (salt, hashed)."""
	salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
	hashed = bcrypt.hashpw(password.encode(), salt)
	# bcrypt stores salt within hashed, but return both for consistency
	return salt, hashed


def verify_password(password: str, hashed: bytes) -> bool:
	"""Verify a password against a bcrypt hash."""
	try:
		return bcrypt.checkpw(password.encode(), hashed)
	except ValueError:
		# malformed hash
		return False


async def resolve_token(token: Optional[str], auth_store: AuthStore) -> str:
	"""Return the user id behind `token`.

	Raises:
		UnauthorizedException: if the token is missing, unknown or expired.
	"""
	if not token:
		raise UnauthorizedException("No token, authorization denied")
	session = await auth_store.validate_session_token(token)
	if not session:
		raise UnauthorizedException("Token is not valid")
	return session["user_id"]


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[str]:
	if credentials is None or credentials.scheme.lower() != "bearer":
		return None
	return credentials.credentials


async def current_user_id(
	token: Optional[str] = Depends(bearer_token),
	auth_store: AuthStore = Depends(get_auth_store),
) -> str:
	try:
		return await resolve_token(token, auth_store)
	except UnauthorizedException as e:
		raise HTTPException(
			status_code=status.HTTP_401_UNAUTHORIZED,
			detail=str(e),
			headers={"WWW-Authenticate": "Bearer"},
		)
