"""Command 'add' of homeplan"""

from typing import Annotated

import typer
from pydantic import ValidationError

from homeplan.services.context_manager import get_task_service
from homeplan.utils.exit_codes import ERROR_INVALID_ARGS
from homeplan.utils.ui.formatters import format_output, format_success, task_summary

from .decorators import AppError, command_wrapper
from .options import date_option, output_format, rule_from_options

app = typer.Typer()


@app.command("add")
@command_wrapper
async def add_command(
    title: Annotated[str, typer.Argument(help="Task title")],
    due: Annotated[
        str | None, typer.Option("--due", "-d", help="Due date (YYYY-MM-DD)")
    ] = None,
    notes: Annotated[str | None, typer.Option("--notes", help="Free-form notes")] = None,
    repeat: Annotated[
        str | None,
        typer.Option("--repeat", "-r", help="Preset: daily, weekdays, weekly, bi-weekly, monthly"),
    ] = None,
    rrule: Annotated[
        str | None, typer.Option("--rrule", help="RRULE text, e.g. FREQ=WEEKLY;BYDAY=MO")
    ] = None,
    rule_json: Annotated[
        str | None, typer.Option("--rule-json", help="Canonical rule as JSON")
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output format (default: output.format)")
    ] = None,
) -> None:
    """Add a task, optionally repeating.

    Examples:
      homeplan add "Water plants" --repeat weekly --due 2024-01-01
      homeplan add "Pay rent" --rrule "FREQ=MONTHLY;BYMONTHDAY=1"
    """
    task_service = get_task_service()
    due_date = date_option(due, "due date")
    rule = rule_from_options(
        preset=repeat,
        rrule=rrule,
        rule_json=rule_json,
        anchor=due_date or task_service.today(),
    )

    try:
        task = await task_service.add_task(title, notes=notes, due_date=due_date, rule=rule)
    except ValidationError as e:
        details = "; ".join(f"{error['loc'][-1]}: {error['msg']}" for error in e.errors())
        raise AppError(f"Invalid task: {details}", ERROR_INVALID_ARGS) from e
    format_success(f"Added: {task.title}")
    format_output(task_summary(task), output_format(output))
