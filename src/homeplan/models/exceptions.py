"""Custom exceptions for Homeplan."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError


class HomeplanError(Exception):
    """Base exception for all Homeplan errors."""


@dataclass(frozen=True)
class RuleIssue:
    """A single field-level problem found while building a rule."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class InvalidRule(HomeplanError):
    """Raised when a recurrence rule violates the model's invariants.

    Attributes:
        issues: Field-level details (dotted path + message) for each violation
    """

    def __init__(self, issues: list[RuleIssue]):
        self.issues = issues
        detail = "; ".join(str(issue) for issue in issues) or "unknown problem"
        super().__init__(f"Invalid recurrence rule: {detail}")

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> InvalidRule:
        """Build an InvalidRule from a pydantic ValidationError."""
        issues = [
            RuleIssue(
                path=".".join(str(part) for part in error["loc"]),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        return cls(issues)


class UnsupportedEncoding(HomeplanError):
    """Raised when a rule cannot round-trip through the provider RRULE format."""

    def __init__(self, message: str, token: str | None = None):
        self.token = token
        super().__init__(f"{message} ({token})" if token else message)


class TaskNotFoundError(HomeplanError):
    """Raised when a task id does not resolve to a stored task."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")
