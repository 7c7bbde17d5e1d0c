import os
from pathlib import Path

# Path to the SQLite database file used by stores. Can be overridden
# using the BOARDGAME_DB_PATH environment variable.
DB_PATH = os.environ.get("BOARDGAME_DB_PATH", str(Path(__file__).parent / "db.sqlite3"))

REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

# Seconds a user's cached game list lives in Redis
GAMES_CACHE_TTL = int(os.environ.get("GAMES_CACHE_TTL", "300"))

SESSION_TTL_DAYS = int(os.environ.get("SESSION_TTL_DAYS", "2"))
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
TIMEZONE = os.environ.get("TIMEZONE", "UTC")

# 0 disables the expired-session sweep
MAINTENANCE_INTERVAL_MINUTES = int(os.environ.get("MAINTENANCE_INTERVAL_MINUTES", "60"))

# --- editor client ---
API_URL = os.environ.get("BOARDGAME_API_URL", "http://localhost:8000")
TOKEN_PATH = os.environ.get("BOARDGAME_TOKEN_PATH", str(Path.home() / ".boardgame" / "token.json"))
AUTOSAVE_DELAY = float(os.environ.get("AUTOSAVE_DELAY", "2.0"))
