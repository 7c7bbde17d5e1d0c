"""Services package: background jobs used by the app."""

from .maintenance import build_scheduler, delete_expired_session_tokens

__all__ = [
	"build_scheduler",
	"delete_expired_session_tokens",
]
