"""Task data models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from .recurrence import RecurrenceRule, RecurrenceState, TaskHistoryEntry

TaskStatus = Literal["open", "completed"]


class Task(BaseModel):
    """Task model representing a complete task entity.

    Attributes:
        id: Unique identifier for the task
        title: Short task description
        notes: Optional free-form notes
        due_date: Calendar date the task (or current occurrence) is due
        status: "open" or "completed"
        completed_at: Completion timestamp, set only while completed
        recurrence: Recurrence state when the task repeats
        history: Append-only log of completed occurrences
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: str
    title: str = Field(min_length=1)
    notes: str | None = None
    due_date: date | None = None
    status: TaskStatus = "open"
    completed_at: datetime | None = None
    recurrence: RecurrenceState | None = None
    history: list[TaskHistoryEntry] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


class TaskCreate(BaseModel):
    """Model for creating a new task.

    Attributes:
        title: Short task description (required)
        notes: Optional free-form notes
        due_date: Optional due date; also the recurrence anchor when given
        recurrence: Optional repetition rule
    """

    title: str = Field(min_length=1)
    notes: str | None = None
    due_date: date | None = None
    recurrence: RecurrenceRule | None = None
