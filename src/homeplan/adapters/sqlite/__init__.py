"""SQLite adapter - local task storage.

Tasks live in a single SQLite database file; each completed occurrence is
a row in ``task_history``.
"""

from homeplan.adapters.sqlite.connection import DatabaseConnection, get_connection
from homeplan.adapters.sqlite.task_repository import SqliteTaskRepository

__all__ = ["DatabaseConnection", "SqliteTaskRepository", "get_connection"]
