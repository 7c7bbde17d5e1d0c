"""An editing session: editor state bound to the games API.

Once the game has a server id, every document change marks the session
`saving` and (re)arms the autosave timer. Autosave failures only flip the
status to `error`; an explicit `save()` failure raises `SaveFailed`.

State changes must happen while an asyncio loop is running, since they
arm the autosave timer on it.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from .autosave import Autosaver
from .gateway import GameGateway, GatewayError
from .state import EditorState

logger = logging.getLogger(__name__)


class SaveFailed(Exception):
	"""An explicit save did not reach the server."""


class EditorSession:

	def __init__(
		self,
		gateway: GameGateway,
		*,
		game_id: Optional[str] = None,
		state: Optional[EditorState] = None,
		autosave_delay: Optional[float] = None,
	):
		self.gateway = gateway
		self.game_id = game_id
		self.state = state or EditorState()
		self.saving = False
		self.autosaver = Autosaver(self._autosave, delay=autosave_delay)
		self._unsubscribe = self.state.subscribe(self._on_change)

	@property
	def is_persisted(self) -> bool:
		return self.game_id is not None

	async def open(self, game_id: str) -> None:
		"""Load an existing game into the editor."""
		try:
			game = await self.gateway.load_game(game_id)
		except GatewayError as exc:
			logger.error(f"Error loading game {game_id}: {exc}")
			raise
		self.autosaver.cancel()
		self.game_id = game_id
		self.state.load(game)
		self.state.autosave_status = "saved"

	def _on_change(self, field: str) -> None:
		if not self.is_persisted:
			return
		self.state.autosave_status = "saving"
		self.autosaver.schedule()

	async def _autosave(self) -> None:
		if not self.is_persisted:
			return
		try:
			await self.gateway.update_game(self.game_id, **self.state.to_payload())
		except GatewayError as exc:
			logger.error(f"Error autosaving game {self.game_id}: {exc}")
			self.state.autosave_status = "error"
			return
		self.state.autosave_status = "saved"

	async def save(self) -> dict[str, Any]:
		"""Create or update the game on the server.

		A game without an id is created, after which the session edits that
		game. Raises `SaveFailed` on any gateway error.
		"""
		self.saving = True
		try:
			payload = self.state.to_payload()
			if self.is_persisted:
				game = await self.gateway.update_game(self.game_id, **payload)
			else:
				game = await self.gateway.create_game(**payload)
				self.game_id = game["id"]
		except GatewayError as exc:
			logger.error(f"Error saving game: {exc}")
			raise SaveFailed("Failed to save game") from exc
		finally:
			self.saving = False

		self.autosaver.cancel()
		self.state.autosave_status = "saved"
		return game

	async def delete(self) -> None:
		"""Delete the game on the server and detach the session from it."""
		if not self.is_persisted:
			return
		self.autosaver.cancel()
		try:
			await self.gateway.delete_game(self.game_id)
		except GatewayError as exc:
			logger.error(f"Error deleting game {self.game_id}: {exc}")
			raise
		self.game_id = None

	async def close(self) -> None:
		self._unsubscribe()
		await self.autosaver.close()
