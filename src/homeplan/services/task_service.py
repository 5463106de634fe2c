"""Task service - Business logic for task operations.

This service layer sits between commands and repositories. It is the
caller of the recurrence engine: it anchors new rules, applies advancement
decisions to tasks on completion and persists the result.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, date, datetime
from itertools import islice

from homeplan.engine import advance, iter_occurrences, next_occurrence
from homeplan.models import (
    RecurrenceRule,
    RecurrenceState,
    Task,
    TaskCreate,
    TaskHistoryEntry,
    TaskStatus,
)
from homeplan.repositories import TaskRepository
from homeplan.utils.logger import get_logger


class TaskService:
    """Service for task business logic."""

    def __init__(
        self,
        task_repository: TaskRepository,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the task service.

        Args:
            task_repository: TaskRepository implementation for data access
            today: Returns the user's current calendar date
        """
        self.repository = task_repository
        self.today = today

    async def list_tasks(self, status: TaskStatus | None = None) -> list[Task]:
        return await self.repository.list_all(status)

    async def get_task(self, task_id: str) -> Task:
        return await self.repository.get(task_id)

    async def delete_task(self, task_id: str) -> bool:
        return await self.repository.delete(task_id)

    async def add_task(
        self,
        title: str,
        *,
        notes: str | None = None,
        due_date: date | None = None,
        rule: RecurrenceRule | None = None,
    ) -> Task:
        """Create a new task, optionally repeating.

        The recurrence is anchored at ``due_date`` or, without one, at today;
        in that case the task becomes due on the first occurrence on or
        after today.

        Returns:
            Created Task object
        """
        data = TaskCreate(title=title, notes=notes, due_date=due_date, recurrence=rule)
        now = datetime.now(UTC)

        recurrence = None
        due = data.due_date
        if data.recurrence is not None:
            anchor = due or self.today()
            recurrence = RecurrenceState.start(data.recurrence, anchor)
            if due is None:
                due = next_occurrence(recurrence, anchor, inclusive=True)

        task = Task(
            id=str(uuid.uuid4()),
            title=data.title,
            notes=data.notes,
            due_date=due,
            recurrence=recurrence,
            created_at=now,
            updated_at=now,
        )
        get_logger("tasks").info(
            "created task %s (recurring=%s, due=%s)", task.id, task.is_recurring, due
        )
        return await self.repository.add(task)

    async def set_recurrence(self, task_id: str, rule: RecurrenceRule | None) -> Task:
        """Attach, replace or (with ``None``) detach a task's recurrence.

        A new rule gets a fresh state anchored at the task's due date, or
        today when it has none.
        """
        task = await self.repository.get(task_id)
        updates: dict = {"updated_at": datetime.now(UTC)}
        if rule is None:
            updates["recurrence"] = None
        else:
            anchor = task.due_date or self.today()
            state = RecurrenceState.start(rule, anchor)
            updates["recurrence"] = state
            if task.due_date is None:
                updates["due_date"] = next_occurrence(state, anchor, inclusive=True)
        return await self.repository.save(task.model_copy(update=updates))

    async def complete_task(
        self, task_id: str, completed_by: str, now: datetime | None = None
    ) -> Task:
        """Complete the task's current occurrence.

        Recurring tasks roll forward to their next due date, or are closed
        for good once the rule terminates. Non-recurring tasks toggle between
        open and completed.

        Returns:
            The updated task
        """
        task = await self.repository.get(task_id)
        now = now or datetime.now(UTC)
        logger = get_logger("tasks")

        if task.recurrence is not None:
            occurrence = task.due_date or now.date()
            decision = advance(task.recurrence, occurrence, completed_by, now=now)
            history = [*task.history, decision.history_entry]
            if decision.finished:
                logger.info(
                    "task %s: recurrence finished after %d occurrence(s)",
                    task.id,
                    decision.state.occurrence_count,
                )
                updates = {
                    "recurrence": None,
                    "status": "completed",
                    "completed_at": now,
                    "history": history,
                }
            else:
                logger.info(
                    "task %s: occurrence %s done, next due %s",
                    task.id,
                    occurrence,
                    decision.next_due,
                )
                updates = {
                    "recurrence": decision.state,
                    "due_date": decision.next_due,
                    "status": "open",
                    "completed_at": None,
                    "history": history,
                }
        elif task.status == "completed":
            logger.info("task %s reopened", task.id)
            updates = {"status": "open", "completed_at": None}
        else:
            entry = TaskHistoryEntry(
                occurrence_date=task.due_date or now.date(),
                completed_at=now,
                completed_by=completed_by,
            )
            logger.info("task %s completed", task.id)
            updates = {
                "status": "completed",
                "completed_at": now,
                "history": [*task.history, entry],
            }

        updates["updated_at"] = now
        return await self.repository.save(task.model_copy(update=updates))

    async def preview(self, task_id: str, count: int = 5) -> list[date]:
        """Upcoming due dates of a task, starting with its current due date."""
        task = await self.repository.get(task_id)
        if task.recurrence is None:
            return [task.due_date] if task.due_date and task.status == "open" else []
        start = task.due_date or self.today()
        return list(islice(iter_occurrences(task.recurrence, start), count))
