"""
Migration runner for the document store tables (yoyo).
"""

import logging
from pathlib import Path

from yoyo import get_backend, read_migrations

from gomi_admin.common.db import DB_PATH

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"

logger = logging.getLogger(__name__)


def apply_migrations(db_path: Path | str, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """Apply pending yoyo migrations to the SQLite database at db_path."""
    backend = get_backend(f"sqlite:///{Path(db_path)}")
    migrations = read_migrations(str(migrations_dir))
    with backend.lock():
        pending = backend.to_apply(migrations)
        if pending:
            logger.info("Applying %s migration(s) to %s", len(pending), db_path)
        backend.apply_migrations(pending)


def init_database(db_path: Path | str | None = None) -> Path:
    """Create the SQLite database if needed and bring its schema up to date."""
    path = Path(db_path) if db_path is not None else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    apply_migrations(path)
    return path
