"""Debounced autosave on the running asyncio loop.

Each `schedule()` cancels the pending timer and starts a new one; when a
timer expires the save callback runs as a task. Saves that have already
fired are not coordinated with each other, so the last one to finish wins.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import config

logger = logging.getLogger(__name__)

SaveCallback = Callable[[], Awaitable[None]]


class Autosaver:

	def __init__(self, save: SaveCallback, *, delay: Optional[float] = None):
		self._save = save
		self.delay = config.AUTOSAVE_DELAY if delay is None else delay
		self._handle: Optional[asyncio.TimerHandle] = None
		self._tasks: set[asyncio.Task] = set()

	@property
	def pending(self) -> bool:
		"""True while a timer is armed and has not fired yet."""
		return self._handle is not None

	def schedule(self) -> None:
		"""(Re)start the debounce timer. Must be called from within the loop."""
		self.cancel()
		loop = asyncio.get_running_loop()
		self._handle = loop.call_later(self.delay, self._fire)

	def cancel(self) -> None:
		if self._handle is not None:
			self._handle.cancel()
			self._handle = None

	def _fire(self) -> None:
		self._handle = None
		task = asyncio.ensure_future(self._run())
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)

	async def _run(self) -> None:
		try:
			await self._save()
		except Exception as exc:
			# the save callback reports its own status; this only guards the task
			logger.error(f"Autosave failed: {exc}", exc_info=True)

	async def flush(self) -> None:
		"""Fire a pending timer now and wait for every in-flight save."""
		if self._handle is not None:
			self.cancel()
			self._fire()
		await self.wait_idle()

	async def wait_idle(self) -> None:
		"""Wait for saves that have already fired."""
		while self._tasks:
			await asyncio.gather(*list(self._tasks))

	async def close(self) -> None:
		"""Drop the pending timer and wait for in-flight saves."""
		self.cancel()
		await self.wait_idle()
