"""HTTP route modules (FastAPI routers) for the application.

This file explicitly exports the router objects provided by each
submodule so callers can do:

	from routes import games_router
	app.include_router(games_router, prefix="/api/games")

Submodules should expose an `APIRouter` named `router`.
"""

from .games import router as games_router
from .auth import router as auth_router
from .health import router as health_router

__all__ = [
	"games_router",
	"auth_router",
	"health_router",
]
