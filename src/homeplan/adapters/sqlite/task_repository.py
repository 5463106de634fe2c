"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from homeplan.adapters.sqlite.connection import get_connection
from homeplan.models import RecurrenceState, Task, TaskHistoryEntry, TaskNotFoundError, TaskStatus
from homeplan.repositories import TaskRepository
from homeplan.utils.logger import get_logger


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, db_path: str | Path):
        """Initialize SQLite task repository.

        Args:
            db_path: Database file path; created with its schema on first use
        """
        self.db_path = Path(db_path)
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    async def list_all(self, status: TaskStatus | None = None) -> list[Task]:
        """List tasks by due date (undated last), then creation time."""
        query = "SELECT * FROM tasks"
        params: list[Any] = []
        if status is not None:
            query += " WHERE status = ?"
            params.append(status)
        query += " ORDER BY due_date IS NULL, due_date ASC, created_at ASC"

        rows = self.connection.execute(query, params).fetchall()
        return [self._row_to_task(row) for row in rows]

    async def get(self, task_id: str) -> Task:
        """Get a task by full ID or unique ID suffix."""
        return self._row_to_task(self._find_row(task_id))

    async def add(self, task: Task) -> Task:
        """Insert a new task with its history."""
        exists = self.connection.execute(
            "SELECT 1 FROM tasks WHERE id = ?", (task.id,)
        ).fetchone()
        if exists:
            raise ValueError(f"Task already exists: {task.id}")

        data = self._task_columns(task)
        try:
            self.connection.execute(
                """INSERT INTO tasks (
                    id, title, notes, due_date, status, completed_at,
                    recurrence, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    task.id,
                    data["title"],
                    data["notes"],
                    data["due_date"],
                    data["status"],
                    data["completed_at"],
                    data["recurrence"],
                    data["created_at"],
                    data["updated_at"],
                ),
            )
            self._append_history(task.id, task.history)
            self.connection.commit()
        except sqlite3.Error:
            self.connection.rollback()
            raise

        get_logger("storage").debug("inserted task %s", task.id)
        return task

    async def save(self, task: Task) -> Task:
        """Update a stored task and append any new history entries.

        Raises:
            TaskNotFoundError: If no task has this ID
            ValueError: If stored history entries are missing from ``task``
        """
        if not self.connection.execute(
            "SELECT 1 FROM tasks WHERE id = ?", (task.id,)
        ).fetchone():
            raise TaskNotFoundError(task.id)
        stored = self.connection.execute(
            "SELECT COUNT(*) FROM task_history WHERE task_id = ?", (task.id,)
        ).fetchone()[0]
        if len(task.history) < stored:
            raise ValueError(f"Task history is append-only: {task.id}")

        data = self._task_columns(task)
        set_parts = [f"{key} = ?" for key in data]
        params = [*data.values(), task.id]
        try:
            self.connection.execute(
                f"UPDATE tasks SET {', '.join(set_parts)} WHERE id = ?", params
            )
            self._append_history(task.id, task.history[stored:])
            self.connection.commit()
        except sqlite3.Error:
            self.connection.rollback()
            raise

        get_logger("storage").debug(
            "saved task %s (%d new history entries)", task.id, len(task.history) - stored
        )
        return task

    async def delete(self, task_id: str) -> bool:
        """Delete a task; its history goes with it."""
        try:
            row = self._find_row(task_id)
        except TaskNotFoundError:
            return False

        self.connection.execute("DELETE FROM tasks WHERE id = ?", (row["id"],))
        self.connection.commit()
        get_logger("storage").debug("deleted task %s", row["id"])
        return True

    def _find_row(self, task_id: str) -> sqlite3.Row:
        """Row of a task, matching a full id or a unique id suffix."""
        row = self.connection.execute(
            "SELECT * FROM tasks WHERE id = ?", (task_id,)
        ).fetchone()
        if row is not None:
            return row

        if task_id:
            rows = self.connection.execute(
                "SELECT * FROM tasks WHERE substr(id, -?) = ?", (len(task_id), task_id)
            ).fetchall()
            if len(rows) == 1:
                return rows[0]
        raise TaskNotFoundError(task_id)

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        task_dict = dict(row)
        if task_dict["recurrence"] is not None:
            task_dict["recurrence"] = RecurrenceState.model_validate_json(
                task_dict["recurrence"]
            )
        task_dict["history"] = self._get_history(task_dict["id"])
        return Task(**task_dict)

    def _get_history(self, task_id: str) -> list[TaskHistoryEntry]:
        cursor = self.connection.execute(
            """SELECT occurrence_date, completed_at, completed_by
               FROM task_history WHERE task_id = ? ORDER BY id""",
            (task_id,),
        )
        return [TaskHistoryEntry(**dict(row)) for row in cursor.fetchall()]

    def _append_history(self, task_id: str, entries: list[TaskHistoryEntry]) -> None:
        for entry in entries:
            self.connection.execute(
                """INSERT INTO task_history (task_id, occurrence_date, completed_at, completed_by)
                   VALUES (?, ?, ?, ?)""",
                (
                    task_id,
                    entry.occurrence_date.isoformat(),
                    entry.completed_at.isoformat(),
                    entry.completed_by,
                ),
            )

    @staticmethod
    def _task_columns(task: Task) -> dict[str, Any]:
        """Column values of ``task`` except id and history."""
        data = task.model_dump(mode="json", exclude={"id", "history", "recurrence"})
        data["recurrence"] = (
            task.recurrence.model_dump_json() if task.recurrence is not None else None
        )
        return data
