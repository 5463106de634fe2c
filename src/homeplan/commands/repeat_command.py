"""Command 'repeat' of homeplan - attach, replace or remove a task's rule."""

from typing import Annotated

import typer

from homeplan.services.context_manager import get_task_service
from homeplan.utils.exit_codes import ERROR_INVALID_ARGS
from homeplan.utils.ui.formatters import format_output, format_success, task_summary

from .decorators import AppError, command_wrapper
from .options import output_format, rule_from_options

app = typer.Typer()


@app.command("repeat")
@command_wrapper
async def repeat_command(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    preset: Annotated[
        str | None, typer.Option("--preset", "-p", help="Preset name (e.g. weekly)")
    ] = None,
    rrule: Annotated[str | None, typer.Option("--rrule", help="RRULE text")] = None,
    rule_json: Annotated[
        str | None, typer.Option("--rule-json", help="Canonical rule as JSON")
    ] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Stop repeating")] = False,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output format (default: output.format)")
    ] = None,
) -> None:
    """Set how a task repeats, anchored at its current due date."""
    task_service = get_task_service()
    task = await task_service.get_task(task_id)

    if clear:
        if preset or rrule or rule_json:
            raise AppError("--clear cannot be combined with a rule", ERROR_INVALID_ARGS)
        task = await task_service.set_recurrence(task.id, None)
        format_success(f"{task.title} no longer repeats")
    else:
        rule = rule_from_options(
            preset=preset,
            rrule=rrule,
            rule_json=rule_json,
            anchor=task.due_date or task_service.today(),
        )
        if rule is None:
            raise AppError(
                "Give one of --preset, --rrule, --rule-json or --clear", ERROR_INVALID_ARGS
            )
        task = await task_service.set_recurrence(task.id, rule)
        format_success(f"{task.title} now repeats")

    format_output(task_summary(task), output_format(output))
