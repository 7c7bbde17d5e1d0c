from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
import stores
from infrastructure import GameListCache, init_default_redis, close_default_redis, set_game_cache
from routes import games_router, auth_router, health_router
from services import build_scheduler

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    *,
    db_path: Optional[str] = None,
    cache: Optional[GameListCache] = None,
    maintenance_interval_minutes: Optional[int] = None,
) -> FastAPI:
    """Build the API application.

    `cache` replaces the Redis-backed game list cache, `db_path` the
    configured SQLite file. Both default to `config`.
    """
    db_path = db_path or config.DB_PATH
    interval = (
        config.MAINTENANCE_INTERVAL_MINUTES
        if maintenance_interval_minutes is None
        else maintenance_interval_minutes
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await stores.init_stores(db_path)

        owns_redis = cache is None
        if owns_redis:
            client = await init_default_redis(config.REDIS_URL)
            set_game_cache(GameListCache(client.get(), ttl=config.GAMES_CACHE_TTL))
        else:
            set_game_cache(cache)

        scheduler = None
        if interval > 0:
            scheduler = build_scheduler(interval, config.TIMEZONE)
            scheduler.start()

        logger.info(f"Server ready (db={db_path})")
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
            set_game_cache(None)
            if owns_redis:
                await close_default_redis()
            await stores.close_stores()
            logger.info("Server stopped")

    app = FastAPI(title="Board Game Creator", lifespan=lifespan)

    # --- Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # --- Error handling ---
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(p) for p in err["loc"] if p != "body"),
                "msg": err["msg"],
            }
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Server Error"})

    # --- Register routes ---
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(games_router, prefix="/api/games")
    app.include_router(health_router)

    return app


app = create_app()
