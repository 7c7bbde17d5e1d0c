"""Validation and sanitization helpers.

This module provides lightweight input validation used by route handlers.
"""
from typing import Any
import regex as re


# Allow: any Unicode letter/mark/number, spaces, plus a small, explicit set of name punctuation
VALID_NAME_RE = re.compile(r"^[\p{L}\p{M}\p{N} .'\-_`’·]+$", flags=re.UNICODE)

MAX_TITLE_LENGTH = 200


def is_valid_name(s: str) -> bool:
	"""Return True if `s` is a reasonable username.

	- Strips and enforces a sensible maximum length.
	- Uses Unicode-aware character class matching.
	"""
	if not s or s.isspace():
		return False
	s = s.strip()
	if len(s) > 64:
		return False
	return bool(VALID_NAME_RE.match(s))


def title_errors(title: str | None) -> list[dict[str, str]]:
	"""Field errors for a game title; empty when the title is acceptable."""
	if title is None or not title.strip():
		return [{"field": "title", "msg": "Title is required"}]
	if len(title) > MAX_TITLE_LENGTH:
		return [{"field": "title", "msg": f"Title must be at most {MAX_TITLE_LENGTH} characters"}]
	return []


def sanitize_json(obj: Any, *, _depth: int = 0, _max_depth: int = 10) -> Any:
	"""Recursively sanitize an input JSON-like structure.

	- Drops keys that start with '$' or contain '..' (basic prototype
	  pollution protection).
	- Raises ValueError past `_max_depth` levels of nesting.
	- Returns a cleaned structure containing only dict/list/primitives.
	"""
	if _depth > _max_depth:
		raise ValueError("Input too deeply nested")

	if isinstance(obj, dict):
		clean = {}
		for k, v in obj.items():
			if not isinstance(k, str):
				continue
			if k.startswith("$") or ".." in k:
				continue
			clean[k] = sanitize_json(v, _depth=_depth + 1, _max_depth=_max_depth)
		return clean
	elif isinstance(obj, list):
		return [sanitize_json(v, _depth=_depth + 1, _max_depth=_max_depth) for v in obj]
	elif isinstance(obj, (str, int, float, bool)) or obj is None:
		return obj
	else:
		raise ValueError("Unsupported JSON value type")
