"""Pydantic request/response models for the FastAPI endpoints.

Keep transport concerns (validation, docs) here and keep business/domain
types in `models.domain_models`. The piece list travels as opaque JSON
objects; the server does not check their shape.
"""
from __future__ import annotations

from pydantic import BaseModel
from typing import Any


class CreateGameRequest(BaseModel):
	title: str
	pieces: list[dict[str, Any]] | None = None
	rules: str | None = None


class UpdateGameRequest(BaseModel):
	title: str | None = None
	pieces: list[dict[str, Any]] | None = None
	rules: str | None = None


class GameResponse(BaseModel):
	id: str
	title: str
	pieces: list[dict[str, Any]]
	rules: str
	owner_id: str
	created_at: str
	updated_at: str


class CredentialsRequest(BaseModel):
	username: str
	password: str


class UserResponse(BaseModel):
	user_id: str
	username: str


class LoginResponse(BaseModel):
	token: str
	user_id: str
	expires_at: str


class MessageResponse(BaseModel):
	message: str


__all__ = [
	"CreateGameRequest",
	"UpdateGameRequest",
	"GameResponse",
	"CredentialsRequest",
	"UserResponse",
	"LoginResponse",
	"MessageResponse",
]
