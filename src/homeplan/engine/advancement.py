"""Advancement engine: what happens when an occurrence is completed.

``advance`` never mutates its input. It returns the updated state, the
next due date (None when the rule is finished) and the history entry the
caller must append to the task, so retrying with the same inputs yields
the same decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime

from homeplan.models.recurrence import (
    AfterOccurrences,
    OnDate,
    RecurrenceState,
    TaskHistoryEntry,
)

from .occurrence import next_occurrence


@dataclass(frozen=True)
class Advancement:
    """Decision returned by :func:`advance`."""

    state: RecurrenceState
    next_due: date | None
    history_entry: TaskHistoryEntry

    @property
    def finished(self) -> bool:
        """True when the recurrence terminated and the task should be closed."""
        return self.next_due is None


def advance(
    state: RecurrenceState,
    completed_occurrence: date,
    completed_by: str,
    now: datetime | None = None,
) -> Advancement:
    """Record a completed occurrence and decide continue vs. terminate.

    Args:
        state: Current recurrence state of the task
        completed_occurrence: Due date of the occurrence being completed
        completed_by: Identifier of the acting user
        now: Completion timestamp (defaults to the current UTC time)

    Returns:
        Advancement with the new state, the next due date or None, and the
        history entry for this completion
    """
    entry = TaskHistoryEntry(
        occurrence_date=completed_occurrence,
        completed_at=now or datetime.now(UTC),
        completed_by=completed_by,
    )
    updated = state.model_copy(
        update={
            "occurrence_count": state.occurrence_count + 1,
            "last_occurrence": completed_occurrence,
        }
    )

    match updated.end:
        case AfterOccurrences(count=count) if updated.occurrence_count >= count:
            return Advancement(updated, None, entry)

    candidate = next_occurrence(updated, completed_occurrence)
    match updated.end:
        case OnDate(until=until) if candidate is not None and candidate > until:
            candidate = None
    return Advancement(updated, candidate, entry)
