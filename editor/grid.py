"""Board grid geometry."""
import math

GRID_SIZE = 20

# Where the "add piece" button drops new pieces
DEFAULT_DROP = (400, 300)


def snap_to_grid(value: float, grid_size: int = GRID_SIZE) -> int:
	"""Round `value` to the nearest multiple of `grid_size`.

	Halves round up (410 -> 420, -10 -> 0). Aligned values come back unchanged.
	"""
	return math.floor(value / grid_size + 0.5) * grid_size


def snap_point(x: float, y: float, grid_size: int = GRID_SIZE) -> tuple[int, int]:
	return snap_to_grid(x, grid_size), snap_to_grid(y, grid_size)
