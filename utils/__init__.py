"""Utility helpers used across the project.

Exports:
- time helpers: `now_utc`, `to_iso`, `parse_iso`, `expires_in`
- validation helpers: `is_valid_name`, `title_errors`, `sanitize_json`, `VALID_NAME_RE`

Bearer-token helpers live in `utils.auth`; import them from there, since
that module depends on `stores` and `stores` depends on `utils.time`.
"""

from .time import now_utc, to_iso, parse_iso, expires_in
from .validation import is_valid_name, title_errors, sanitize_json, VALID_NAME_RE

__all__ = [
	"now_utc",
	"to_iso",
	"parse_iso",
	"expires_in",
	"is_valid_name",
	"title_errors",
	"sanitize_json",
	"VALID_NAME_RE",
]
