"""Commands 'rrule encode|decode|describe' of homeplan."""

from typing import Annotated

import typer

from homeplan.models import parse_rule
from homeplan.utils.recurrence import decode_rrule, describe_rrule, encode_rrule
from homeplan.utils.typer_helpers import SuggestingGroup
from homeplan.utils.ui.console import get_console
from homeplan.utils.ui.formatters import describe_rule, format_output

from .decorators import command_wrapper
from .options import date_option

app = typer.Typer(
    cls=SuggestingGroup,
    help="Convert rules to and from the calendar provider's RRULE text",
)
console = get_console(highlight=False)


@app.command("encode")
@command_wrapper
def encode_command(
    rule_json: Annotated[str, typer.Argument(help="Canonical rule as JSON")],
) -> None:
    """Encode a canonical JSON rule as RRULE text."""
    for line in encode_rrule(parse_rule(rule_json)):
        console.print(line)


@app.command("decode")
@command_wrapper
def decode_command(
    text: Annotated[str, typer.Argument(help="RRULE text")],
    anchor: Annotated[
        str | None,
        typer.Option("--anchor", "-a", help="Start date used when BYDAY/BYMONTHDAY is absent"),
    ] = None,
    output: Annotated[str, typer.Option("--output", "-o", help="Output format")] = "json",
) -> None:
    """Decode RRULE text into the canonical rule."""
    rule = decode_rrule(text, anchor=date_option(anchor, "anchor"))
    format_output(rule.model_dump(mode="json"), output)


@app.command("describe")
@command_wrapper
def describe_command(
    text: Annotated[str, typer.Argument(help="RRULE text, preset name or JSON rule")],
    anchor: Annotated[
        str | None,
        typer.Option("--anchor", "-a", help="Start date used when BYDAY/BYMONTHDAY is absent"),
    ] = None,
) -> None:
    """Describe a rule in plain English."""
    if text.lstrip().startswith("{"):
        rule = parse_rule(text)
    else:
        rule = decode_rrule(text, anchor=date_option(anchor, "anchor"))
    preset = describe_rrule(text)
    suffix = f" [dim]({preset})[/dim]" if preset != text else ""
    console.print(describe_rule(rule) + suffix)
