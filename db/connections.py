from pathlib import Path
from typing import Dict, Optional
import logging

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


async def connect(db_path: str, pragmas: Optional[Dict[str, str]] = None) -> aiosqlite.Connection:
    """Open an aiosqlite connection and apply sensible pragmas.

    - Sets `row_factory` to `aiosqlite.Row` for named access.
    - Enables foreign keys by default.
    - Applies any additional PRAGMA settings supplied in `pragmas`.

    Returns an open connection; caller is responsible for closing it.
    """
    conn = await aiosqlite.connect(db_path, timeout=30.0, isolation_level=None)
    conn.row_factory = aiosqlite.Row

    await conn.execute("PRAGMA foreign_keys = ON")
    if pragmas:
        for k, v in pragmas.items():
            await conn.execute(f"PRAGMA {k} = {v}")

    return conn


def _split_statements(sql: str) -> list[str]:
    statements = []
    current = []
    for line in sql.split("\n"):
        if "--" in line:
            line = line[:line.index("--")]
        line = line.strip()
        if not line:
            continue
        current.append(line)
        if line.endswith(";"):
            stmt = " ".join(current).rstrip(";").strip()
            if stmt:
                statements.append(stmt)
            current = []
    return statements


async def init_db(db_path: str, schema_path: Optional[str] = None) -> None:
    """Create all tables described by the SQL schema.

    If `schema_path` is not provided the bundled `db/schema.sql` is used.
    Every statement is `IF NOT EXISTS`, so running this on an existing
    database is harmless.
    """
    schema_file = Path(schema_path) if schema_path else SCHEMA_PATH
    if not schema_file.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_file}")

    conn = await connect(db_path)
    try:
        await conn.execute("BEGIN")
        for statement in _split_statements(schema_file.read_text()):
            await conn.execute(statement)
        await conn.commit()
    finally:
        await conn.close()
    logger.info(f"[DB] Schema applied to {db_path}")


async def ensure_db(db_path: str, schema_path: Optional[str] = None) -> None:
    """Make sure the database file exists and carries the schema."""
    db_file = Path(db_path)
    if db_file.parent and not db_file.parent.exists():
        db_file.parent.mkdir(parents=True, exist_ok=True)

    await init_db(db_path, schema_path)
