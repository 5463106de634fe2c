"""Homeplan domain models.

This package contains Pydantic models that represent the core domain entities
of the Homeplan application: tasks, recurrence rules and their state.
"""

from .config_models import AppConfig
from .core import Task, TaskCreate, TaskStatus
from .exceptions import (
    HomeplanError,
    InvalidRule,
    RuleIssue,
    TaskNotFoundError,
    UnsupportedEncoding,
)
from .recurrence import (
    AfterOccurrences,
    DailyPattern,
    DayOfMonth,
    MonthlyPattern,
    NeverEnd,
    NthWeekday,
    NthWeekdayOfMonth,
    OnDate,
    RecurrenceEnd,
    RecurrencePattern,
    RecurrenceRule,
    RecurrenceState,
    SpecificDate,
    TaskHistoryEntry,
    Weekday,
    WeeklyPattern,
    YearlyPattern,
    parse_rule,
)

__all__ = [
    # Task models
    "Task",
    "TaskCreate",
    "TaskStatus",
    # Recurrence models
    "Weekday",
    "DailyPattern",
    "WeeklyPattern",
    "MonthlyPattern",
    "YearlyPattern",
    "DayOfMonth",
    "NthWeekday",
    "SpecificDate",
    "NthWeekdayOfMonth",
    "RecurrencePattern",
    "NeverEnd",
    "AfterOccurrences",
    "OnDate",
    "RecurrenceEnd",
    "RecurrenceRule",
    "RecurrenceState",
    "TaskHistoryEntry",
    "parse_rule",
    # Errors
    "HomeplanError",
    "InvalidRule",
    "RuleIssue",
    "UnsupportedEncoding",
    "TaskNotFoundError",
    # Config models
    "AppConfig",
]
