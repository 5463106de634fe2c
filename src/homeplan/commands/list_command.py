"""Command 'list' of homeplan"""

from enum import Enum
from typing import Annotated

import typer

from homeplan.services.context_manager import get_task_service
from homeplan.utils.ui.formatters import format_output, task_summary

from .decorators import command_wrapper
from .options import output_format

app = typer.Typer()


class StatusFilter(str, Enum):
    OPEN = "open"
    COMPLETED = "completed"
    ALL = "all"


@app.command("list")
@command_wrapper
async def list_command(
    status: Annotated[
        StatusFilter, typer.Option("--status", "-s", help="open, completed or all")
    ] = StatusFilter.OPEN,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output format (default: output.format)")
    ] = None,
) -> None:
    """List tasks ordered by due date."""
    task_service = get_task_service()
    tasks = await task_service.list_tasks(
        None if status is StatusFilter.ALL else status.value
    )
    format_output([task_summary(task) for task in tasks], output_format(output))
