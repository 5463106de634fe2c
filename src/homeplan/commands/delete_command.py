"""Command 'delete' of homeplan"""

from typing import Annotated

import typer

from homeplan.models import TaskNotFoundError
from homeplan.services.context_manager import get_task_service
from homeplan.utils.ui.formatters import format_success

from .decorators import command_wrapper

app = typer.Typer()


@app.command("delete")
@command_wrapper
async def delete_command(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a task together with its recurrence and history."""
    task_service = get_task_service()
    task = await task_service.get_task(task_id)
    if not yes and not typer.confirm(f"Delete '{task.title}'?"):
        raise typer.Exit(0)
    if not await task_service.delete_task(task.id):
        raise TaskNotFoundError(task_id)
    format_success(f"Deleted: {task.title}")
