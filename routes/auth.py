from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from typing import Optional
import secrets
import logging

import config
from models import CredentialsRequest, LoginResponse, MessageResponse
from stores import get_auth_store, UserAlreadyExists, UserNotFound, SessionNotFound
from utils.auth import bearer_token, current_user_id, hash_password, verify_password
from utils.time import expires_in
from utils.validation import is_valid_name

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_PASSWORD_LENGTH = 6


@router.post("/register", status_code=201)
async def register(req: CredentialsRequest, auth_store = Depends(get_auth_store)):
	"""Create an account."""
	errors = []
	if not is_valid_name(req.username):
		errors.append({"field": "username", "msg": "Use only letters, numbers, spaces, and .'-_`’· characters"})
	if len(req.password) < MIN_PASSWORD_LENGTH:
		errors.append({"field": "password", "msg": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"})
	if errors:
		return JSONResponse(status_code=400, content={"errors": errors})

	salt, hashed = hash_password(req.password)
	try:
		user = await auth_store.create_user(req.username.strip(), salt, hashed)
	except UserAlreadyExists:
		raise HTTPException(status_code=409, detail="Username already taken")
	except Exception as exc:
		logger.error(f"Failed to create user {req.username}: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Server Error")

	return {"user_id": user["user_id"], "username": user["username"]}


@router.post("/login", response_model=LoginResponse)
async def login(req: CredentialsRequest, auth_store = Depends(get_auth_store)):
	"""Exchange username and password for a bearer token."""
	record = await auth_store.get_user_password(req.username.strip())
	if not record:
		raise HTTPException(status_code=401, detail="Invalid credentials")
	user_id, _salt, hashed = record
	if not verify_password(req.password, hashed):
		raise HTTPException(status_code=401, detail="Invalid credentials")

	session_token = secrets.token_urlsafe(32)
	expires_at = expires_in(config.SESSION_TTL_DAYS)
	try:
		await auth_store.create_session_token(session_token, user_id=user_id, expires_at=expires_at)
	except UserNotFound:
		# account deleted between the two queries
		raise HTTPException(status_code=401, detail="Invalid credentials")
	except Exception as exc:
		logger.error(f"Failed to create session token: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Failed to create session token")

	return {"token": session_token, "user_id": user_id, "expires_at": expires_at}


@router.post("/logout", response_model=MessageResponse)
async def logout(
	user_id: str = Depends(current_user_id),
	token: Optional[str] = Depends(bearer_token),
	auth_store = Depends(get_auth_store),
):
	"""Revoke the presented token."""
	try:
		await auth_store.invalidate_session(token)
	except SessionNotFound:
		# expired between validation and delete; logout is idempotent
		logger.info(f"Session for {user_id} already gone at logout")
	return {"message": "Session revoked"}
