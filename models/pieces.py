"""Board pieces as a tagged union keyed by `type`.

Each variant declares exactly the attributes it renders with, and all of
them are required. Attributes that belong to another variant are dropped
when a piece is parsed, so a tile never carries a dice `value`.

`new_piece` builds a piece with the defaults a freshly placed tool gets.
"""
from __future__ import annotations

import random
import uuid
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


PIECE_TYPES = ("tile", "token", "card", "dice", "text", "shape", "counter", "path")

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"

# 5 sides renders as a star rather than a pentagon
SHAPE_SIDES = {3: "Triangle", 4: "Square", 5: "Star", 6: "Hexagon", 8: "Octagon"}

MIN_RADIUS, MAX_RADIUS = 10, 100
MIN_FONT_SIZE, MAX_FONT_SIZE = 12, 48
DICE_FACES = 6

# Swatches offered by the color picker, in display order
PRESET_COLORS = (
	"#EF4444",  # red
	"#F97316",  # orange
	"#F59E0B",  # amber
	"#84CC16",  # lime
	"#10B981",  # emerald
	"#06B6D4",  # cyan
	"#3B82F6",  # blue
	"#6366F1",  # indigo
	"#8B5CF6",  # violet
	"#EC4899",  # pink
	"#ffffff",  # white
	"#000000",  # black
)

Radius = Annotated[float, Field(ge=MIN_RADIUS, le=MAX_RADIUS)]
FontSize = Annotated[int, Field(ge=MIN_FONT_SIZE, le=MAX_FONT_SIZE)]
Length = Annotated[float, Field(gt=0)]


class BasePiece(BaseModel):
	model_config = ConfigDict(extra="ignore")

	id: str = Field(min_length=1)
	x: float
	y: float
	color: str = Field(pattern=HEX_COLOR)
	z_index: int = 0


class TilePiece(BasePiece):
	type: Literal["tile"] = "tile"
	width: Length
	height: Length


class TokenPiece(BasePiece):
	type: Literal["token"] = "token"
	radius: Radius


class CardPiece(BasePiece):
	type: Literal["card"] = "card"
	width: Length
	height: Length
	text: str
	font_size: FontSize


class DicePiece(BasePiece):
	type: Literal["dice"] = "dice"
	radius: Radius
	value: int = Field(ge=1, le=DICE_FACES)


class TextPiece(BasePiece):
	type: Literal["text"] = "text"
	text: str
	font_size: FontSize


class ShapePiece(BasePiece):
	type: Literal["shape"] = "shape"
	radius: Radius
	sides: int

	@field_validator("sides")
	@classmethod
	def _known_polygon(cls, v: int) -> int:
		if v not in SHAPE_SIDES:
			raise ValueError(f"sides must be one of {sorted(SHAPE_SIDES)}")
		return v


class CounterPiece(BasePiece):
	type: Literal["counter"] = "counter"
	radius: Radius
	value: int


class PathPiece(BasePiece):
	type: Literal["path"] = "path"
	points: list[float] = Field(min_length=4)

	@field_validator("points")
	@classmethod
	def _paired(cls, v: list[float]) -> list[float]:
		if len(v) % 2:
			raise ValueError("points must hold x, y pairs")
		return v


Piece = Annotated[
	Union[TilePiece, TokenPiece, CardPiece, DicePiece, TextPiece, ShapePiece, CounterPiece, PathPiece],
	Field(discriminator="type"),
]

PIECE_ADAPTER: TypeAdapter[Piece] = TypeAdapter(Piece)
PIECE_LIST_ADAPTER: TypeAdapter[list[Piece]] = TypeAdapter(list[Piece])


def parse_piece(data: dict[str, Any]) -> Piece:
	"""Validate a JSON-like dict into its variant. Raises pydantic.ValidationError."""
	return PIECE_ADAPTER.validate_python(data)


def parse_pieces(data: list[dict[str, Any]]) -> list[Piece]:
	return PIECE_LIST_ADAPTER.validate_python(data)


def dump_pieces(pieces: list[Piece]) -> list[dict[str, Any]]:
	return [p.model_dump(mode="json") for p in pieces]


def random_color(rng: random.Random | None = None) -> str:
	rng = rng or random
	return f"#{rng.randrange(0x1000000):06x}"


def roll(rng: random.Random | None = None) -> int:
	rng = rng or random
	return rng.randint(1, DICE_FACES)


def new_piece(
	tool: str,
	x: float,
	y: float,
	*,
	z_index: int = 0,
	piece_id: str | None = None,
	rng: random.Random | None = None,
) -> Piece:
	"""Build a piece of type `tool` at (x, y) with that tool's defaults."""
	if tool not in PIECE_TYPES:
		raise ValueError(f"Unknown piece type: {tool}")

	base = {
		"id": piece_id or uuid.uuid4().hex,
		"type": tool,
		"x": x,
		"y": y,
		"color": random_color(rng),
		"z_index": z_index,
	}

	if tool == "tile":
		base.update(width=40, height=40)
	elif tool == "token":
		base.update(radius=20)
	elif tool == "card":
		base.update(width=100, height=150, text="New Card", font_size=16)
	elif tool == "dice":
		base.update(radius=25, value=roll(rng), color="#4A5568")
	elif tool == "text":
		base.update(text="Double click to edit", font_size=24, color="#000000")
	elif tool == "shape":
		base.update(sides=3, radius=30)
	elif tool == "counter":
		base.update(radius=25, value=0, color="#3B82F6")
	elif tool == "path":
		base.update(points=[x, y, x + 100, y + 100])

	return parse_piece(base)
