"""Command 'next' of homeplan - preview upcoming occurrences."""

from itertools import islice
from typing import Annotated

import typer

from homeplan.engine import iter_occurrences
from homeplan.models import RecurrenceState
from homeplan.services.context_manager import get_task_service
from homeplan.utils.exit_codes import ERROR_INVALID_ARGS
from homeplan.utils.ui.console import get_console
from homeplan.utils.ui.formatters import format_due_date, format_output

from .decorators import AppError, command_wrapper
from .options import date_option, output_format, rule_from_options

app = typer.Typer()
console = get_console()


@app.command("next")
@command_wrapper
async def next_command(
    task_id: Annotated[
        str | None, typer.Argument(help="Task ID (omit to preview a rule)")
    ] = None,
    repeat: Annotated[str | None, typer.Option("--repeat", "-r", help="Preset name")] = None,
    rrule: Annotated[str | None, typer.Option("--rrule", help="RRULE text")] = None,
    rule_json: Annotated[
        str | None, typer.Option("--rule-json", help="Canonical rule as JSON")
    ] = None,
    anchor: Annotated[
        str | None, typer.Option("--anchor", "-a", help="Anchor date (default: today)")
    ] = None,
    after: Annotated[
        str | None, typer.Option("--after", help="Only dates strictly after this one")
    ] = None,
    count: Annotated[int, typer.Option("--count", "-n", min=1, help="How many dates")] = 5,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output format (default: output.format)")
    ] = None,
) -> None:
    """Show the next due dates of a task or of an ad-hoc rule."""
    output = output_format(output)
    task_service = get_task_service()

    if task_id is not None:
        if repeat or rrule or rule_json:
            raise AppError("Give either a task ID or a rule, not both", ERROR_INVALID_ARGS)
        dates = await task_service.preview(task_id, count)
    else:
        anchor_date = date_option(anchor, "anchor") or task_service.today()
        rule = rule_from_options(
            preset=repeat, rrule=rrule, rule_json=rule_json, anchor=anchor_date
        )
        if rule is None:
            raise AppError(
                "Give a task ID or one of --repeat, --rrule, --rule-json", ERROR_INVALID_ARGS
            )
        state = RecurrenceState.start(rule, anchor_date)
        after_date = date_option(after, "after date")
        occurrences = iter_occurrences(state, after_date, inclusive=after_date is None)
        dates = list(islice(occurrences, count))

    if output in ("json", "yaml"):
        format_output([d.isoformat() for d in dates], output)
    elif not dates:
        console.print("[yellow]No upcoming occurrences[/yellow]")
    else:
        for d in dates:
            console.print(f"  • {d.isoformat()}  [dim]{format_due_date(d)}[/dim]")
