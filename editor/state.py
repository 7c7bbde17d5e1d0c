"""In-memory editor state: the ordered piece list plus selection and tool.

Every change to the title, the pieces or the rules is reported to the
registered listeners with the name of the field that changed. Selection
and tool changes are not reported; they are not part of the saved game.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Callable, Literal, Optional

from pydantic import ValidationError

from models.pieces import (
	PIECE_TYPES,
	PRESET_COLORS,
	Piece,
	dump_pieces,
	new_piece,
	parse_piece,
	roll,
)
from .grid import DEFAULT_DROP, snap_point, snap_to_grid

logger = logging.getLogger(__name__)

AutosaveStatus = Literal["saved", "saving", "error"]
ChangeListener = Callable[[str], None]


class EditorState:

	def __init__(
		self,
		*,
		title: str = "Untitled Game",
		pieces: Optional[list[Piece]] = None,
		rules: str = "",
		rng: Optional[random.Random] = None,
	):
		self.title = title
		self.pieces: list[Piece] = list(pieces or [])
		self.rules = rules
		self.selected_piece_id: Optional[str] = None
		self.selected_tool: str = "tile"
		self.autosave_status: AutosaveStatus = "saved"
		self._rng = rng or random.Random()
		self._listeners: list[ChangeListener] = []

	# -------------------------------------------------
	# Change notification
	# -------------------------------------------------

	def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
		"""Register `listener`; returns a callable that unregisters it."""
		self._listeners.append(listener)

		def unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return unsubscribe

	def _changed(self, field: str) -> None:
		for listener in list(self._listeners):
			listener(field)

	# -------------------------------------------------
	# Document fields
	# -------------------------------------------------

	def set_title(self, title: str) -> None:
		self.title = title
		self._changed("title")

	def set_rules(self, rules: str) -> None:
		self.rules = rules
		self._changed("rules")

	def load(self, game: dict[str, Any]) -> None:
		"""Replace the document with a game fetched from the server.

		Listeners are not notified. Pieces that do not validate as any known
		variant are dropped with a warning.
		"""
		pieces: list[Piece] = []
		for raw in game.get("pieces") or []:
			try:
				pieces.append(parse_piece(raw))
			except ValidationError as exc:
				piece_id = raw.get("id") if isinstance(raw, dict) else None
				logger.warning(f"Skipping unreadable piece {piece_id!r}: {exc}")

		self.title = game.get("title") or self.title
		self.pieces = pieces
		self.rules = game.get("rules") or ""
		self.selected_piece_id = None

	def to_payload(self) -> dict[str, Any]:
		"""The body sent to the server on save."""
		return {
			"title": self.title,
			"pieces": dump_pieces(self.pieces),
			"rules": self.rules,
		}

	# -------------------------------------------------
	# Selection
	# -------------------------------------------------

	def select_tool(self, tool: str) -> None:
		if tool not in PIECE_TYPES:
			raise ValueError(f"Unknown tool: {tool}")
		self.selected_tool = tool

	def select_piece(self, piece_id: Optional[str]) -> None:
		if piece_id is not None and self.find(piece_id) is None:
			return
		self.selected_piece_id = piece_id

	@property
	def selected_piece(self) -> Optional[Piece]:
		if self.selected_piece_id is None:
			return None
		return self.find(self.selected_piece_id)

	# -------------------------------------------------
	# Pieces
	# -------------------------------------------------

	def _index(self, piece_id: str) -> Optional[int]:
		for i, piece in enumerate(self.pieces):
			if piece.id == piece_id:
				return i
		return None

	def find(self, piece_id: str) -> Optional[Piece]:
		i = self._index(piece_id)
		return None if i is None else self.pieces[i]

	def add_piece(self, tool: Optional[str] = None, position: Optional[tuple[float, float]] = None) -> Piece:
		"""Place a new piece of `tool` (default: the selected tool) and select it."""
		x, y = snap_point(*(position or DEFAULT_DROP))
		piece = new_piece(tool or self.selected_tool, x, y, z_index=len(self.pieces), rng=self._rng)
		self.pieces.append(piece)
		self.selected_piece_id = piece.id
		self._changed("pieces")
		return piece

	def update_piece(self, piece_id: str, **updates: Any) -> Optional[Piece]:
		"""Merge `updates` into the piece and re-validate it.

		Returns the new piece, or None when no piece has that id.
		Raises pydantic.ValidationError if the merged piece is invalid.
		"""
		i = self._index(piece_id)
		if i is None:
			return None
		merged = {**self.pieces[i].model_dump(), **updates, "id": piece_id}
		piece = parse_piece(merged)
		self.pieces[i] = piece
		self._changed("pieces")
		return piece

	def delete_piece(self, piece_id: str) -> None:
		i = self._index(piece_id)
		self.selected_piece_id = None
		if i is None:
			return
		del self.pieces[i]
		self._changed("pieces")

	def move_piece(self, piece_id: str, x: float, y: float) -> Optional[Piece]:
		"""Drag end: store the snapped position."""
		return self.update_piece(piece_id, x=snap_to_grid(x), y=snap_to_grid(y))

	# -------------------------------------------------
	# Stacking order
	# -------------------------------------------------

	def render_order(self) -> list[Piece]:
		"""Pieces bottom to top: ascending z_index, ties in list order."""
		return sorted(self.pieces, key=lambda p: p.z_index)

	def bring_forward(self, piece_id: str) -> Optional[Piece]:
		piece = self.find(piece_id)
		if piece is None:
			return None
		return self.update_piece(piece_id, z_index=piece.z_index + 1)

	def send_backward(self, piece_id: str) -> Optional[Piece]:
		piece = self.find(piece_id)
		if piece is None:
			return None
		return self.update_piece(piece_id, z_index=piece.z_index - 1)

	# -------------------------------------------------
	# Piece interactions
	# -------------------------------------------------

	def click_piece(self, piece_id: str) -> Optional[Piece]:
		"""Select a piece; a second click rolls a dice or bumps a counter."""
		piece = self.find(piece_id)
		if piece is None:
			return None
		if self.selected_piece_id != piece_id:
			self.selected_piece_id = piece_id
			return piece
		if piece.type == "dice":
			return self.roll_dice(piece_id)
		if piece.type == "counter":
			return self.adjust_counter(piece_id, 1)
		return piece

	def roll_dice(self, piece_id: str) -> Optional[Piece]:
		piece = self.find(piece_id)
		if piece is None or piece.type != "dice":
			return None
		return self.update_piece(piece_id, value=roll(self._rng))

	def adjust_counter(self, piece_id: str, step: int) -> Optional[Piece]:
		piece = self.find(piece_id)
		if piece is None or piece.type != "counter":
			return None
		return self.update_piece(piece_id, value=piece.value + step)

	def set_shape_sides(self, piece_id: str, sides: int) -> Optional[Piece]:
		piece = self.find(piece_id)
		if piece is None or piece.type != "shape":
			return None
		return self.update_piece(piece_id, sides=sides)

	def set_color(self, piece_id: str, color: str | int) -> Optional[Piece]:
		"""Recolor a piece with a palette swatch (by index) or a custom hex color."""
		if isinstance(color, int):
			color = PRESET_COLORS[color]
		return self.update_piece(piece_id, color=color)

	def set_text(self, piece_id: str, text: str) -> Optional[Piece]:
		piece = self.find(piece_id)
		if piece is None or piece.type not in ("text", "card"):
			return None
		return self.update_piece(piece_id, text=text)
