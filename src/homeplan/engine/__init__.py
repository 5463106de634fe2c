"""Recurrence engine: occurrence calculation and advancement on completion."""

from .advancement import Advancement, advance
from .occurrence import iter_occurrences, next_occurrence, remaining_occurrences

__all__ = [
    "Advancement",
    "advance",
    "iter_occurrences",
    "next_occurrence",
    "remaining_occurrences",
]
