"""Tests for the 'config' command group."""

from __future__ import annotations

import asyncio
import json

from typer.testing import CliRunner

from homeplan.main import app
from homeplan.services.context_manager import get_task_service

runner = CliRunner()


def test_view_json():
    result = runner.invoke(app, ["config", "view", "-o", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["ui"]["user"] == "me"
    assert data["storage"]["database_path"] is None


def test_set_and_get():
    set_result = runner.invoke(app, ["config", "set", "ui.user", "alice"])
    assert set_result.exit_code == 0, set_result.output

    get_result = runner.invoke(app, ["config", "get", "ui.user"])
    assert get_result.output.strip() == "alice"


def test_set_none_clears_value():
    runner.invoke(app, ["config", "set", "storage.database_path", "/tmp/chores.db"])
    runner.invoke(app, ["config", "set", "storage.database_path", "none"])
    result = runner.invoke(app, ["config", "view", "-o", "json"])
    assert json.loads(result.output)["storage"]["database_path"] is None


def test_completion_uses_configured_user():
    runner.invoke(app, ["config", "set", "ui.user", "alice"])
    runner.invoke(app, ["add", "Fix tap"])
    task_id = json.loads(runner.invoke(app, ["list", "-o", "json"]).output)[0]["id"]

    runner.invoke(app, ["complete", task_id])

    task = asyncio.run(get_task_service().get_task(task_id))
    assert task.history[0].completed_by == "alice"


def test_get_unknown_key():
    result = runner.invoke(app, ["config", "get", "ui.nope"])
    assert result.exit_code == 5


def test_set_unknown_key():
    result = runner.invoke(app, ["config", "set", "ui.nope", "x"])
    assert result.exit_code == 5
    assert "Unknown configuration key" in result.output


def test_set_invalid_value():
    result = runner.invoke(app, ["config", "set", "ui.user", "  "])
    assert result.exit_code == 2


def test_reset():
    runner.invoke(app, ["config", "set", "ui.user", "alice"])

    result = runner.invoke(app, ["config", "reset", "--yes"])

    assert result.exit_code == 0
    assert runner.invoke(app, ["config", "get", "ui.user"]).output.strip() == "me"


def test_configured_output_format_is_default():
    runner.invoke(app, ["config", "set", "output.format", "json"])
    runner.invoke(app, ["add", "Fix tap", "--due", "2024-01-02"])

    result = runner.invoke(app, ["list"])

    assert json.loads(result.output)[0]["title"] == "Fix tap"
