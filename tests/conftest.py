"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real config, data and log
directories.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from unittest.mock import patch

import pytest

from homeplan.models import RecurrenceRule, RecurrenceState, Task


def _clear_handlers(logger: logging.Logger) -> None:
    """Detach file handlers left on the app logger by earlier tests."""
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.FileHandler):
            continue
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point every platformdirs lookup at *tmp_path* and reset cached singletons."""
    import homeplan.utils.logger as logger_mod
    from homeplan.adapters.sqlite import DatabaseConnection
    from homeplan.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    logger_mod._logger = None
    _clear_handlers(logging.getLogger("homeplan"))
    with (
        patch("homeplan.services.config_service.user_config_dir", return_value=tmpdir),
        patch("homeplan.services.config_service.user_data_dir", return_value=tmpdir),
        patch("homeplan.utils.logger.user_log_dir", return_value=tmpdir),
    ):
        yield tmp_path
    DatabaseConnection.close_connection()
    get_config_service.cache_clear()
    _clear_handlers(logging.getLogger("homeplan"))
    logger_mod._logger = None


@pytest.fixture()
def tmp_config(isolated_dirs):
    """Provide a real ConfigService backed by the temporary directory."""
    from homeplan.services.config_service import ConfigService

    svc = ConfigService()
    svc.load_config()
    return svc


@pytest.fixture()
def make_state():
    """Factory building a RecurrenceState from plain dicts."""

    def _make(
        pattern: dict, anchor: date, end: dict | None = None, **progress
    ) -> RecurrenceState:
        rule = RecurrenceRule(pattern=pattern, end=end or {"type": "never"})
        state = RecurrenceState.start(rule, anchor)
        if progress:
            state = state.model_copy(update=progress)
        return state

    return _make


@pytest.fixture()
def make_task():
    """Factory building a Task with fixed timestamps."""

    def _make(task_id: str = "aaaa-1111-bbbb-2222", **fields) -> Task:
        now = datetime(2024, 6, 1, 10, 0, tzinfo=UTC)
        data = {"id": task_id, "title": "Water plants", "created_at": now, "updated_at": now}
        data.update(fields)
        return Task(**data)

    return _make
