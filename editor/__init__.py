"""Headless board editor: piece placement, autosave and the games API client."""

from .grid import GRID_SIZE, snap_to_grid, snap_point
from .state import EditorState
from .autosave import Autosaver
from .gateway import (
	GameGateway,
	TokenStore,
	GatewayError,
	Unauthorized,
	NotFound,
	ValidationFailed,
)
from .session import EditorSession, SaveFailed
from .dashboard import filter_and_sort, filter_games, sort_games, preview_colors

__all__ = [
	"GRID_SIZE",
	"snap_to_grid",
	"snap_point",
	"EditorState",
	"Autosaver",
	"GameGateway",
	"TokenStore",
	"GatewayError",
	"Unauthorized",
	"NotFound",
	"ValidationFailed",
	"EditorSession",
	"SaveFailed",
	"filter_and_sort",
	"filter_games",
	"sort_games",
	"preview_colors",
]
