"""Time utilities: timezone-aware helpers and ISO formatting/parsing.

All persisted timestamps are UTC ISO-8601 strings so that they sort
lexicographically in SQLite and serialize to JSON unchanged.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional


def now_utc() -> datetime:
	"""Return current UTC datetime with tzinfo set."""
	return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
	"""Serialize a datetime to ISO8601 string, normalized to UTC."""
	if dt.tzinfo is None:
		dt = dt.replace(tzinfo=timezone.utc)
	return dt.astimezone(timezone.utc).isoformat()


def parse_iso(s: str) -> Optional[datetime]:
	"""Parse an ISO8601 string into a timezone-aware datetime when possible.

	Returns None on obvious parse failures.
	"""
	if not s:
		return None
	try:
		if s.endswith("Z"):
			s = s[:-1] + "+00:00"
		dt = datetime.fromisoformat(s)
	except ValueError:
		return None
	if dt.tzinfo is None:
		dt = dt.replace(tzinfo=timezone.utc)
	return dt


def expires_in(days: int) -> str:
	"""ISO timestamp `days` from now."""
	return to_iso(now_utc() + timedelta(days=days))
