"""Wiring between configuration and the task service."""

from __future__ import annotations

from homeplan.adapters.sqlite import SqliteTaskRepository
from homeplan.services.config_service import get_config_service
from homeplan.services.task_service import TaskService


def get_task_service() -> TaskService:
    """Build a TaskService backed by the configured task database."""
    config_svc = get_config_service()
    repository = SqliteTaskRepository(config_svc.database_path)
    return TaskService(repository, today=config_svc.today)
