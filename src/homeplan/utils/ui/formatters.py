"""Output formatters for different formats."""

import calendar
import json
from datetime import date, datetime
from typing import Any

import yaml
from rich.table import Table
from rich.text import Text

from homeplan.models import (
    AfterOccurrences,
    DailyPattern,
    DayOfMonth,
    MonthlyPattern,
    NeverEnd,
    NthWeekday,
    NthWeekdayOfMonth,
    OnDate,
    RecurrenceRule,
    SpecificDate,
    Task,
    WeeklyPattern,
    YearlyPattern,
)

from .console import get_console

console = get_console()

STATUS_ICONS = {
    "open": "○",
    "completed": "✓",
    "recurring": "↻",
}

_ORDINALS = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth"}
_UNITS = {
    DailyPattern: ("day", "days"),
    WeeklyPattern: ("week", "weeks"),
    MonthlyPattern: ("month", "months"),
    YearlyPattern: ("year", "years"),
}


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif output_format == "table":
        format_table(data)
    else:
        # Default to pretty
        format_pretty(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(item)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in items:
        table.add_row(*(_cell(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))

    console.print(table)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


# ============================================================================
# Pretty Format Implementation
# ============================================================================


def format_pretty(data: Any) -> None:
    """Format data in pretty format with colors and icons."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict) and "title" in data[0]:
            format_tasks_pretty(data)
        else:
            for item in data:
                console.print(f"  • {_cell(item)}")
    elif isinstance(data, dict):
        if "title" in data:
            format_task_item(data)
        else:
            format_single_item(data)
    else:
        console.print(data)


def format_tasks_pretty(tasks: list[dict]) -> None:
    """Format task summaries in pretty format."""
    open_tasks = [t for t in tasks if t.get("status") != "completed"]

    header = Text()
    header.append("📋 Tasks ", style="bold cyan")
    header.append(f"({len(open_tasks)} open, {len(tasks) - len(open_tasks)} completed)", style="dim")
    console.print(header)
    console.print()

    for task in tasks:
        format_task_item(task, indent="  ")


def format_task_item(task: dict, indent: str = "") -> None:
    """Format a single task summary."""
    is_completed = task.get("status") == "completed"
    if task.get("repeat"):
        status_icon = STATUS_ICONS["recurring"]
    elif is_completed:
        status_icon = STATUS_ICONS["completed"]
    else:
        status_icon = STATUS_ICONS["open"]

    title = task.get("title", "Untitled")
    line = Text(f"{indent}{status_icon} ")
    line.append(title, style="dim" if is_completed else "bold")
    console.print(line)

    meta = []
    if task.get("due_date"):
        due = task["due_date"]
        style = "bold red" if not is_completed and is_overdue(due) else "cyan"
        meta.append((format_due_date(due), style))
    if task.get("repeat"):
        meta.append((task["repeat"], "magenta"))
    if task.get("completed_occurrences"):
        meta.append((f"{task['completed_occurrences']} done", "dim green"))
    if task.get("id"):
        meta.append((f"#{task['id'][-6:]}", "dim"))

    if meta:
        meta_line = Text()
        meta_line.append(f"{indent}   └─ ", style="dim")
        for i, (text, style) in enumerate(meta):
            if i > 0:
                meta_line.append(" • ", style="dim")
            meta_line.append(text, style=style)
        console.print(meta_line)


def task_summary(task: Task) -> dict:
    """Flatten a task into the dict shape used by every output format."""
    return {
        "id": task.id,
        "title": task.title,
        "status": task.status,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "repeat": describe_rule(task.recurrence.rule) if task.recurrence else None,
        "completed_occurrences": len(task.history),
    }


# ============================================================================
# Helper Functions
# ============================================================================


def is_overdue(due_date: str | date | None) -> bool:
    """Check if a due date lies before today."""
    if not due_date:
        return False
    try:
        due = date.fromisoformat(due_date) if isinstance(due_date, str) else due_date
    except ValueError:
        return False
    return due < date.today()


def format_due_date(value: str | date) -> str:
    """Format due date in compact format: DD/MM DayOfWeek (year added when not current)."""
    try:
        due = date.fromisoformat(value) if isinstance(value, str) else value
    except ValueError:
        return str(value)

    day_str = due.strftime("%d/%m")
    if due.year != datetime.now().year:
        day_str = due.strftime("%d/%m/%Y")
    return f"{day_str} {due.strftime('%a')}"


def _ordinal(nth: int) -> str:
    if nth == -1:
        return "last"
    if nth < 0:
        return f"{_ORDINALS[-nth]}-to-last"
    return _ORDINALS[nth]


def describe_rule(rule: RecurrenceRule) -> str:
    """Render a rule as English text, e.g. "Every 2 weeks on Monday, Wednesday, 10 times"."""
    pattern = rule.pattern
    singular, plural = _UNITS[type(pattern)]
    if pattern.interval == 1:
        parts = [f"Every {singular}"]
    else:
        parts = [f"Every {pattern.interval} {plural}"]

    match pattern:
        case WeeklyPattern(days=days):
            parts[0] += " on " + ", ".join(day.value.title() for day in days)
        case MonthlyPattern(mode=DayOfMonth(day=day)):
            parts[0] += f" on day {day}"
        case MonthlyPattern(mode=NthWeekday(nth=nth, weekday=weekday)):
            parts[0] += f" on the {_ordinal(nth)} {weekday.value.title()}"
        case YearlyPattern(month=month, mode=SpecificDate(day=day)):
            parts[0] += f" on {calendar.month_name[month]} {day}"
        case YearlyPattern(month=month, mode=NthWeekdayOfMonth(nth=nth, weekday=weekday)):
            parts[0] += (
                f" on the {_ordinal(nth)} {weekday.value.title()}"
                f" of {calendar.month_name[month]}"
            )

    match rule.end:
        case AfterOccurrences(count=count):
            parts.append("once" if count == 1 else f"{count} times")
        case OnDate(until=until):
            parts.append(f"until {until.isoformat()}")
        case NeverEnd():
            pass

    return ", ".join(parts)
