"""Repository abstraction layer for Homeplan.

Repositories hide how tasks are persisted so the task service and the
recurrence engine stay independent of the storage mechanism.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from homeplan.models import Task, TaskStatus


class TaskRepository(ABC):
    """Abstract base class for task persistence operations."""

    @abstractmethod
    async def list_all(self, status: TaskStatus | None = None) -> list[Task]:
        """List tasks, optionally only those with the given status."""
        raise NotImplementedError(
            "TaskRepository.list_all() must be implemented by adapter"
        )

    @abstractmethod
    async def get(self, task_id: str) -> Task:
        """Get a specific task by ID.

        Raises:
            TaskNotFoundError: If task does not exist
        """
        raise NotImplementedError("TaskRepository.get() must be implemented by adapter")

    @abstractmethod
    async def add(self, task: Task) -> Task:
        """Store a new task and return it."""
        raise NotImplementedError("TaskRepository.add() must be implemented by adapter")

    @abstractmethod
    async def save(self, task: Task) -> Task:
        """Replace a stored task with ``task`` (matched by id).

        Raises:
            TaskNotFoundError: If task does not exist
        """
        raise NotImplementedError("TaskRepository.save() must be implemented by adapter")

    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        """Delete a task. Returns True if a task was removed."""
        raise NotImplementedError(
            "TaskRepository.delete() must be implemented by adapter"
        )
