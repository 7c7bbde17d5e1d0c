"""Search and ordering for the "My Games" list."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from utils.time import parse_iso

SortKey = Literal["date", "name", "pieces"]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def filter_games(games: list[dict[str, Any]], search: str = "") -> list[dict[str, Any]]:
	"""Games whose title contains `search`, ignoring case."""
	needle = search.casefold()
	return [g for g in games if needle in (g.get("title") or "").casefold()]


def sort_games(games: list[dict[str, Any]], sort_by: SortKey = "date") -> list[dict[str, Any]]:
	"""Newest first for "date", A to Z for "name", most pieces first for "pieces"."""
	if sort_by == "name":
		return sorted(games, key=lambda g: (g.get("title") or "").casefold())
	if sort_by == "pieces":
		return sorted(games, key=lambda g: len(g.get("pieces") or []), reverse=True)
	return sorted(games, key=lambda g: parse_iso(g.get("created_at") or "") or _EPOCH, reverse=True)


def filter_and_sort(games: list[dict[str, Any]], search: str = "", sort_by: SortKey = "date") -> list[dict[str, Any]]:
	return sort_games(filter_games(games, search), sort_by)


def preview_colors(game: dict[str, Any], fallback: str = "#e5e7eb") -> tuple[str, str | None]:
	"""Colors for a game card thumbnail: the first piece and, if any, the last."""
	pieces = game.get("pieces") or []
	if not pieces:
		return fallback, None
	return pieces[0].get("color") or fallback, pieces[-1].get("color")
