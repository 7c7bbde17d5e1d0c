"""Periodic housekeeping run inside the API process.

`delete_expired_session_tokens` is the job body; `build_scheduler` wires it
into an APScheduler `AsyncIOScheduler` on the app's event loop.
"""
from typing import Any, Dict
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pytz import timezone

import stores
from utils.time import now_utc, to_iso

logger = logging.getLogger(__name__)


async def delete_expired_session_tokens() -> Dict[str, Any]:
	"""
	Delete expired session tokens.

	Returns:
		dict: {
			"status": "success",
			"deleted_count": int,
			"timestamp": str,
		}
	"""
	logger.info("Starting delete_expired_session_tokens job")
	deleted_count = await stores.get_auth_store().delete_expired_sessions()
	result = {
		"status": "success",
		"deleted_count": deleted_count,
		"timestamp": to_iso(now_utc()),
	}
	logger.info(f"delete_expired_session_tokens job completed: {result}")
	return result


def build_scheduler(interval_minutes: int, tz_name: str = "UTC") -> AsyncIOScheduler:
	"""Create (but do not start) the maintenance scheduler."""
	scheduler = AsyncIOScheduler(timezone=timezone(tz_name))
	scheduler.add_job(
		delete_expired_session_tokens,
		trigger="interval",
		minutes=interval_minutes,
		id="delete-expired-session-tokens",
		coalesce=True,
		max_instances=1,
	)
	return scheduler
