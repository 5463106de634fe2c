"""Database schema for the local task database."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime

# Schema version tracking
SCHEMA_VERSION = 1

CREATE_SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at DATETIME NOT NULL
)
"""

# Tasks table; ``recurrence`` holds the RecurrenceState as JSON
CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    notes TEXT,
    due_date TEXT,
    status TEXT NOT NULL DEFAULT 'open' CHECK (status IN ('open', 'completed')),
    completed_at DATETIME,
    recurrence TEXT,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
)
"""

# Completed occurrences, append-only
CREATE_TASK_HISTORY_TABLE = """
CREATE TABLE IF NOT EXISTS task_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id TEXT NOT NULL,
    occurrence_date TEXT NOT NULL,
    completed_at DATETIME NOT NULL,
    completed_by TEXT NOT NULL,
    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE
)
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)",
    "CREATE INDEX IF NOT EXISTS idx_task_history_task_id ON task_history(task_id)",
]


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create the tables on first use and record the schema version.

    Raises:
        RuntimeError: If the database was written by a newer schema version
    """
    connection.execute(CREATE_SCHEMA_VERSION_TABLE)
    current = connection.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
    if current is not None and current > SCHEMA_VERSION:
        raise RuntimeError(
            f"Database schema version {current} is newer than supported ({SCHEMA_VERSION})"
        )
    if current == SCHEMA_VERSION:
        return

    connection.execute(CREATE_TASKS_TABLE)
    connection.execute(CREATE_TASK_HISTORY_TABLE)
    for statement in INDEXES:
        connection.execute(statement)
    connection.execute(
        "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
        (SCHEMA_VERSION, datetime.now(UTC).isoformat()),
    )
    connection.commit()
