#!/usr/bin/env python3
"""Reset a SQLite database to the board game creator schema.

Drops every existing table, then applies db/schema.sql. Used for local
development and container images; the API itself only ever applies the
schema additively.
"""
import sqlite3
import sys
import os
from pathlib import Path

REQUIRED_TABLES = ("users", "session_tokens", "games")


def reset_db(db_path: str, schema_path: str) -> None:
    """Drop all tables in `db_path` and recreate them from `schema_path`."""
    db_path = Path(db_path).resolve()
    schema_path = Path(schema_path).resolve()

    if not schema_path.exists():
        print(f"[INIT] Error: schema file not found at {schema_path}", file=sys.stderr)
        sys.exit(1)

    try:
        conn = sqlite3.connect(str(db_path))
        cursor = conn.cursor()

        # foreign keys would block dropping users before games
        cursor.execute("PRAGMA foreign_keys = OFF")
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'")
        for (table,) in cursor.fetchall():
            cursor.execute(f'DROP TABLE IF EXISTS "{table}"')
        conn.commit()

        conn.executescript(schema_path.read_text())
        conn.commit()

        cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
        created = {t[0] for t in cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in created]
        conn.close()
        if missing:
            print(f"[INIT] Error: missing tables {', '.join(missing)}", file=sys.stderr)
            sys.exit(1)

        # shared volume in the compose setup
        os.chmod(str(db_path), 0o666)
        print(f"[INIT] Database initialized at {db_path}")

    except sqlite3.Error as e:
        print(f"[INIT] Error: failed to initialize database: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    db_path = sys.argv[1] if len(sys.argv) > 1 else "./db.sqlite3"
    schema_path = sys.argv[2] if len(sys.argv) > 2 else "./db/schema.sql"
    reset_db(db_path, schema_path)
