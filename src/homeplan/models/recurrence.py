"""Recurrence rule data models.

A rule is split into a *pattern* (how occurrences repeat) and an *end*
(when they stop). Both are tagged unions: every variant carries a literal
``type`` (patterns, ends) or ``kind`` (monthly/yearly modes) discriminator,
so consumers can dispatch exhaustively with ``match``.

``RecurrenceState`` is the persisted companion of a task's rule. Its
``anchor_date`` is fixed when the state is created; all occurrences are
projected from it, never from the last completed date.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidRule


class Weekday(str, Enum):
    """Day of the week, ordered Monday first."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def position(self) -> int:
        """Index matching ``date.weekday()`` (Monday=0)."""
        return list(Weekday).index(self)

    @property
    def code(self) -> str:
        """Two-letter iCalendar code (MO, TU, ...)."""
        return self.value[:2].upper()

    @classmethod
    def from_code(cls, code: str) -> Weekday:
        for day in cls:
            if day.code == code.strip().upper():
                return day
        raise ValueError(f"Unknown weekday code: {code!r}")

    @classmethod
    def from_date(cls, value: date) -> Weekday:
        return list(cls)[value.weekday()]


class _RuleModel(BaseModel):
    """Frozen base model that reports validation failures as InvalidRule.

    Only the outermost model converts the error, so a nested failure keeps its
    full field path and every failing field is reported.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidRule.from_validation_error(exc) from exc

    # Nested fields are validated by the core validator, not through __init__.
    __init__.__pydantic_base_init__ = True  # type: ignore[attr-defined]

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> Any:
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as exc:
            raise InvalidRule.from_validation_error(exc) from exc

    @classmethod
    def model_validate_json(cls, json_data: str | bytes, **kwargs: Any) -> Any:
        try:
            return super().model_validate_json(json_data, **kwargs)
        except ValidationError as exc:
            raise InvalidRule.from_validation_error(exc) from exc


def _nonzero_nth(value: int) -> int:
    if value == 0:
        raise ValueError("nth must not be 0; use 1..5 or -1..-5")
    return value


# ---------------------------------------------------------------------------
# Monthly / yearly modes
# ---------------------------------------------------------------------------


class DayOfMonth(_RuleModel):
    """A fixed day of the month. Months without that day are skipped."""

    kind: Literal["day_of_month"] = "day_of_month"
    day: int = Field(ge=1, le=31)


class NthWeekday(_RuleModel):
    """The nth weekday of the month; negative nth counts from month end."""

    kind: Literal["nth_weekday"] = "nth_weekday"
    nth: int = Field(ge=-5, le=5)
    weekday: Weekday

    @field_validator("nth")
    @classmethod
    def check_nth(cls, value: int) -> int:
        return _nonzero_nth(value)


class SpecificDate(_RuleModel):
    """A fixed day within the yearly rule's month."""

    kind: Literal["specific_date"] = "specific_date"
    day: int = Field(ge=1, le=31)


class NthWeekdayOfMonth(_RuleModel):
    """The nth weekday within the yearly rule's month."""

    kind: Literal["nth_weekday_of_month"] = "nth_weekday_of_month"
    nth: int = Field(ge=-5, le=5)
    weekday: Weekday

    @field_validator("nth")
    @classmethod
    def check_nth(cls, value: int) -> int:
        return _nonzero_nth(value)


MonthlyMode = Annotated[DayOfMonth | NthWeekday, Field(discriminator="kind")]
YearlyMode = Annotated[SpecificDate | NthWeekdayOfMonth, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


class DailyPattern(_RuleModel):
    type: Literal["daily"] = "daily"
    interval: int = Field(default=1, ge=1)


class WeeklyPattern(_RuleModel):
    """Selected weekdays, repeating every ``interval`` weeks (weeks start Monday)."""

    type: Literal["weekly"] = "weekly"
    interval: int = Field(default=1, ge=1)
    days: tuple[Weekday, ...] = Field(min_length=1)

    @field_validator("days")
    @classmethod
    def normalize_days(cls, value: tuple[Weekday, ...]) -> tuple[Weekday, ...]:
        """De-duplicate and order Monday to Sunday."""
        return tuple(sorted(set(value), key=lambda day: day.position))


class MonthlyPattern(_RuleModel):
    type: Literal["monthly"] = "monthly"
    interval: int = Field(default=1, ge=1)
    mode: MonthlyMode


class YearlyPattern(_RuleModel):
    type: Literal["yearly"] = "yearly"
    interval: int = Field(default=1, ge=1)
    month: int = Field(ge=1, le=12)
    mode: YearlyMode


RecurrencePattern = Annotated[
    DailyPattern | WeeklyPattern | MonthlyPattern | YearlyPattern,
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Termination conditions
# ---------------------------------------------------------------------------


class NeverEnd(_RuleModel):
    type: Literal["never"] = "never"


class AfterOccurrences(_RuleModel):
    type: Literal["after_occurrences"] = "after_occurrences"
    count: int = Field(ge=1)


class OnDate(_RuleModel):
    """Stop after the given date (inclusive)."""

    type: Literal["on_date"] = "on_date"
    until: date


RecurrenceEnd = Annotated[
    NeverEnd | AfterOccurrences | OnDate, Field(discriminator="type")
]


# ---------------------------------------------------------------------------
# Rule, state and history
# ---------------------------------------------------------------------------


class RecurrenceRule(_RuleModel):
    """What the user declared: a pattern plus a termination condition."""

    pattern: RecurrencePattern
    end: RecurrenceEnd = Field(default_factory=NeverEnd)


class RecurrenceState(_RuleModel):
    """Persisted progress of a rule attached to one task.

    Attributes:
        pattern: The repetition pattern
        end: The termination condition
        anchor_date: Date all occurrences are projected from; never shifted
        occurrence_count: Number of completed occurrences
        last_occurrence: Date of the most recently completed occurrence
    """

    pattern: RecurrencePattern
    end: RecurrenceEnd = Field(default_factory=NeverEnd)
    anchor_date: date
    occurrence_count: int = Field(default=0, ge=0)
    last_occurrence: date | None = None

    @classmethod
    def start(cls, rule: RecurrenceRule, anchor_date: date) -> RecurrenceState:
        """Create a fresh state for ``rule`` anchored at ``anchor_date``."""
        return cls(pattern=rule.pattern, end=rule.end, anchor_date=anchor_date)

    @property
    def rule(self) -> RecurrenceRule:
        return RecurrenceRule(pattern=self.pattern, end=self.end)


class TaskHistoryEntry(BaseModel):
    """One completed occurrence. Entries are append-only."""

    model_config = ConfigDict(frozen=True)

    occurrence_date: date
    completed_at: datetime
    completed_by: str


def parse_rule(data: Any) -> RecurrenceRule:
    """Build a RecurrenceRule from a plain mapping or a JSON document.

    Raises:
        InvalidRule: If the value does not describe a valid rule
    """
    if isinstance(data, (str, bytes)):
        return RecurrenceRule.model_validate_json(data)
    return RecurrenceRule.model_validate(data)
