"""Command 'complete' of homeplan"""

from typing import Annotated

import typer

from homeplan.services.config_service import get_config_service
from homeplan.services.context_manager import get_task_service
from homeplan.utils.ui.console import get_console
from homeplan.utils.ui.formatters import format_due_date, format_output, format_success, task_summary

from .decorators import command_wrapper
from .options import output_format

app = typer.Typer()
console = get_console()


@app.command("complete")
@command_wrapper
async def complete_command(
    task_ids: Annotated[
        list[str], typer.Argument(help="Task ID(s) or unique ID suffixes")
    ],
    by: Annotated[
        str | None, typer.Option("--by", help="Completing user (default: ui.user)")
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output format (default: output.format)")
    ] = None,
) -> None:
    """Complete the current occurrence of one or more tasks.

    Repeating tasks move on to their next due date; once their rule ends
    they are closed for good. Completing a closed one-off task reopens it.
    """
    output = output_format(output)
    completed_by = by or get_config_service().config.ui.user
    task_service = get_task_service()

    for task_id in task_ids:
        task = await task_service.complete_task(task_id, completed_by)
        if task.status == "open" and task.is_recurring:
            format_success(f"✓ {task.title} - next due {format_due_date(task.due_date)}")
        elif task.status == "open":
            format_success(f"Reopened: {task.title}")
        else:
            format_success(f"✓ Completed: {task.title}")

        if output not in ("pretty", "table"):
            format_output(task_summary(task), output)
