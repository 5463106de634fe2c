"""End-to-end tests for the task commands against a temporary task file."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from homeplan.main import app

runner = CliRunner()


def _invoke(*args: str, input: str | None = None):
    return runner.invoke(app, list(args), input=input)


def _tasks(status: str = "all") -> list[dict]:
    result = _invoke("list", "--status", status, "-o", "json")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


def test_add_plain_task():
    result = _invoke("add", "Fix tap", "--due", "2024-01-02")

    assert result.exit_code == 0
    assert "Added: Fix tap" in result.output
    [task] = _tasks()
    assert task["due_date"] == "2024-01-02"
    assert task["repeat"] is None


def test_add_with_preset():
    result = _invoke("add", "Water plants", "--due", "2024-01-01", "--repeat", "weekly")

    assert result.exit_code == 0
    [task] = _tasks()
    assert task["repeat"] == "Every week on Monday"


def test_add_with_rrule():
    result = _invoke(
        "add", "Bins", "--due", "2024-01-01", "--rrule", "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE"
    )

    assert result.exit_code == 0
    assert _tasks()[0]["repeat"] == "Every 2 weeks on Monday, Wednesday"


def test_add_with_rule_json_outputs_json():
    rule = json.dumps(
        {
            "pattern": {
                "type": "monthly",
                "mode": {"kind": "nth_weekday", "nth": -1, "weekday": "friday"},
            }
        }
    )
    result = _invoke("add", "Pay rent", "--due", "2024-01-26", "--rule-json", rule, "-o", "json")

    assert result.exit_code == 0
    assert '"repeat": "Every month on the last Friday"' in result.output


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (["--repeat", "hourly"], "Unknown preset"),
        (["--repeat", "daily", "--rrule", "FREQ=DAILY"], "only one"),
        (["--rrule", "FREQ=YEARLY"], "Unsupported frequency"),
        (["--rule-json", '{"pattern": {"type": "weekly", "days": []}}'], "Invalid recurrence rule"),
        (["--due", "next week"], "Invalid due date"),
    ],
)
def test_add_rejects_bad_input(args, message):
    result = _invoke("add", "Broken", *args)

    assert result.exit_code == 2
    assert message in result.output
    assert _tasks() == []


def test_add_rejects_empty_title():
    result = _invoke("add", "")

    assert result.exit_code == 2
    assert "Invalid task: title" in result.output
    assert _tasks() == []


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


def test_list_empty_pretty():
    result = _invoke("list")
    assert result.exit_code == 0
    assert "No data to display" in result.output


def test_list_pretty_shows_titles():
    _invoke("add", "Water plants", "--due", "2024-01-01", "--repeat", "weekly")
    _invoke("add", "Fix tap")

    result = _invoke("list")

    assert result.exit_code == 0
    assert "Water plants" in result.output
    assert "Fix tap" in result.output
    assert "2 open" in result.output


def test_list_rejects_unknown_status():
    result = _invoke("list", "--status", "snoozed")
    assert result.exit_code == 2


# ---------------------------------------------------------------------------
# complete
# ---------------------------------------------------------------------------


def test_complete_recurring_until_count_reached():
    _invoke("add", "Feed fish", "--due", "2024-01-01", "--rrule", "FREQ=DAILY;COUNT=2")
    [task] = _tasks()

    first = _invoke("complete", task["id"])
    assert first.exit_code == 0
    assert "next due" in first.output
    assert _tasks()[0]["due_date"] == "2024-01-02"

    second = _invoke("complete", task["id"][-6:], "--by", "alice")
    assert second.exit_code == 0
    assert "Completed: Feed fish" in second.output

    [done] = _tasks("completed")
    assert done["status"] == "completed"
    assert done["repeat"] is None
    assert done["completed_occurrences"] == 2


def test_complete_plain_task_twice_reopens():
    _invoke("add", "Fix tap")
    [task] = _tasks()

    assert "Completed: Fix tap" in _invoke("complete", task["id"]).output
    assert "Reopened: Fix tap" in _invoke("complete", task["id"]).output
    assert _tasks("open")[0]["id"] == task["id"]


def test_complete_json_output():
    _invoke("add", "Fix tap")
    [task] = _tasks()

    result = _invoke("complete", task["id"], "-o", "json")

    assert result.exit_code == 0
    assert '"status": "completed"' in result.output


def test_complete_unknown_task():
    result = _invoke("complete", "does-not-exist")
    assert result.exit_code == 5
    assert "Task not found" in result.output


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


def test_delete_with_yes():
    _invoke("add", "Fix tap")
    [task] = _tasks()

    result = _invoke("delete", task["id"], "--yes")

    assert result.exit_code == 0
    assert "Deleted: Fix tap" in result.output
    assert _tasks() == []


def test_delete_declined_keeps_task():
    _invoke("add", "Fix tap")
    [task] = _tasks()

    result = _invoke("delete", task["id"], input="n\n")

    assert result.exit_code == 0
    assert len(_tasks()) == 1


def test_delete_unknown_task():
    result = _invoke("delete", "nope", "--yes")
    assert result.exit_code == 5


# ---------------------------------------------------------------------------
# repeat
# ---------------------------------------------------------------------------


def test_repeat_attach_and_clear():
    _invoke("add", "Clean gutters", "--due", "2024-03-15")
    [task] = _tasks()

    attached = _invoke("repeat", task["id"], "--preset", "monthly")
    assert attached.exit_code == 0
    assert "now repeats" in attached.output
    assert _tasks()[0]["repeat"] == "Every month on day 15"

    cleared = _invoke("repeat", task["id"], "--clear")
    assert cleared.exit_code == 0
    assert _tasks()[0]["repeat"] is None


def test_repeat_requires_a_rule():
    _invoke("add", "Clean gutters", "--due", "2024-03-15")
    [task] = _tasks()

    result = _invoke("repeat", task["id"])

    assert result.exit_code == 2


def test_repeat_clear_with_rule_is_rejected():
    _invoke("add", "Clean gutters", "--due", "2024-03-15")
    [task] = _tasks()

    result = _invoke("repeat", task["id"], "--clear", "--preset", "daily")

    assert result.exit_code == 2
