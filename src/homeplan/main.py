"""Main entry point for Homeplan CLI."""

import typer

from homeplan import __version__
from homeplan.commands import (
    add_command,
    complete_command,
    config_command,
    delete_command,
    list_command,
    next_command,
    repeat_command,
    rrule_command,
)
from homeplan.utils.typer_helpers import SuggestingGroup
from homeplan.utils.ui.console import get_console

app = typer.Typer(
    name="homeplan",
    cls=SuggestingGroup,
    help="Household task organizer with repeating chores",
    no_args_is_help=True,
)

console = get_console(highlight=False)

# Top-level task commands
app.command("add")(add_command.add_command)
app.command("list")(list_command.list_command)
app.command("complete")(complete_command.complete_command)
app.command("delete")(delete_command.delete_command)
app.command("repeat")(repeat_command.repeat_command)
app.command("next")(next_command.next_command)

# Command groups
app.add_typer(rrule_command.app, name="rrule", help="RRULE conversion commands")
app.add_typer(config_command.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Homeplan[/bold] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
