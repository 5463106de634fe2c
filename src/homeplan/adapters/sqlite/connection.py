"""Database connection management for the local SQLite task database.

A single connection per process is reused; it is reopened when a different
database path is requested.
"""

from __future__ import annotations

import atexit
import os
import sqlite3
from pathlib import Path

from homeplan.adapters.sqlite.schema import ensure_schema
from homeplan.utils.logger import get_logger


class DatabaseConnection:
    """Process-wide connection holder.

    Provides:
    - Connection reuse for the same database path
    - WAL mode and foreign key enforcement
    - Owner-only file permissions on new databases
    - Schema creation on first open
    """

    _connection: sqlite3.Connection | None = None
    _db_path: Path | None = None
    _cleanup_registered = False

    @classmethod
    def get_connection(cls, db_path: str | Path) -> sqlite3.Connection:
        """Get or create the connection for ``db_path``.

        Raises:
            RuntimeError: If the file is not a usable task database
        """
        db_path = Path(db_path).expanduser()
        if cls._connection is not None and cls._db_path == db_path:
            return cls._connection

        cls.close_connection()

        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

        connection = sqlite3.connect(str(db_path), check_same_thread=False, timeout=30.0)
        try:
            connection.row_factory = sqlite3.Row
            connection.execute("PRAGMA foreign_keys = ON")
            connection.execute("PRAGMA journal_mode = WAL")
            ensure_schema(connection)
        except (sqlite3.DatabaseError, RuntimeError) as e:
            connection.close()
            raise RuntimeError(f"Cannot open task database {db_path}: {e}") from e

        if is_new_database:
            os.chmod(db_path, 0o600)
            get_logger("storage").info("created task database %s", db_path)

        cls._connection = connection
        cls._db_path = db_path
        if not cls._cleanup_registered:
            atexit.register(cls.close_connection)
            cls._cleanup_registered = True
        return connection

    @classmethod
    def close_connection(cls) -> None:
        """Commit and close the open connection, if any."""
        if cls._connection is None:
            return
        try:
            cls._connection.commit()
            cls._connection.close()
        finally:
            cls._connection = None
            cls._db_path = None


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Helper function to get the database connection."""
    return DatabaseConnection.get_connection(db_path)
