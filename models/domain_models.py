"""Domain-level typed models used by services and stores.

Prefer `TypedDict` for lightweight structural typing that maps directly to
the JSON-like dicts stored in the database.
"""
from __future__ import annotations

from typing import TypedDict, Any


class Game(TypedDict):
	id: str
	title: str
	pieces: list[dict[str, Any]]
	rules: str
	owner_id: str
	created_at: str
	updated_at: str


class User(TypedDict):
	user_id: str
	username: str
	created_at: str


__all__ = ["Game", "User"]
