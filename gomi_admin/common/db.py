"""
Shared DB connection helpers.
"""

import sqlite3
from pathlib import Path

import config

DB_PATH = Path(config.DB_PATH)


def get_db_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Get a database connection."""
    path = Path(db_path) if db_path is not None else DB_PATH
    if not path.exists():
        raise FileNotFoundError(
            f"Database not found at {path}. Run `gomi-admin init-db` to apply migrations."
        )
    return sqlite3.connect(str(path), check_same_thread=False)
