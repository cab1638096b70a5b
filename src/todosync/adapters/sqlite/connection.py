"""Connection management for the local SQLite store.

Each path gets one shared connection per process, configured with WAL
mode and migrated to the latest schema on first open.
"""

from __future__ import annotations

import atexit
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from todosync.adapters.sqlite.migrations import ALL_MIGRATIONS, MigrationRunner

_connections: dict[Path, sqlite3.Connection] = {}


def default_db_path() -> Path:
    """Location of the local store when a context does not name one."""
    return Path(user_data_dir("todosync")) / "todosync.db"


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Get or create the connection for a database file.

    Args:
        db_path: Path to database file. If None, uses default location.

    Returns:
        sqlite3.Connection with row access by column name
    """
    path = Path(db_path) if db_path is not None else default_db_path()

    connection = _connections.get(path)
    if connection is not None:
        return connection

    path.parent.mkdir(parents=True, exist_ok=True)
    is_new_database = not path.exists()

    connection = sqlite3.connect(str(path), timeout=30.0)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA journal_mode = WAL")

    # Owner read/write only
    if is_new_database:
        os.chmod(path, 0o600)

    MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)

    if not _connections:
        atexit.register(close_connections)
    _connections[path] = connection
    return connection


def close_connections() -> None:
    """Close every open connection."""
    for path, connection in list(_connections.items()):
        try:
            connection.commit()
            connection.close()
        except sqlite3.Error:
            pass
        finally:
            _connections.pop(path, None)
