"""Repository interfaces for Homeplan.

Implementations (Adapters) are in:
- homeplan.adapters.sqlite (local SQLite task database)
"""

from .repository import TaskRepository

__all__ = ["TaskRepository"]
