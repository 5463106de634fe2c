"""Homeplan - household task organizer with a drift-free recurrence engine."""

__version__ = "0.3.0"
