"""Shared option parsing for commands that accept a recurrence rule."""

from __future__ import annotations

from datetime import date

from homeplan.models import RecurrenceRule, parse_rule
from homeplan.services.config_service import get_config_service
from homeplan.utils.dates import parse_date
from homeplan.utils.exit_codes import ERROR_INVALID_ARGS
from homeplan.utils.recurrence import VALID_PATTERNS, decode_rrule, resolve_rrule

from .decorators import AppError


def rule_from_options(
    *,
    preset: str | None = None,
    rrule: str | None = None,
    rule_json: str | None = None,
    anchor: date | None = None,
) -> RecurrenceRule | None:
    """Build a rule from at most one of --repeat/--rrule/--rule-json.

    Raises:
        AppError: If more than one source is given or the preset is unknown
        InvalidRule: If --rule-json does not describe a valid rule
        UnsupportedEncoding: If --rrule is outside the supported subset
    """
    given = [value for value in (preset, rrule, rule_json) if value is not None]
    if len(given) > 1:
        raise AppError(
            "Use only one of --repeat, --rrule and --rule-json", ERROR_INVALID_ARGS
        )
    if preset is not None:
        text = resolve_rrule(preset)
        if text is None:
            raise AppError(
                f"Unknown preset '{preset}'. Choose from: {', '.join(VALID_PATTERNS)}",
                ERROR_INVALID_ARGS,
            )
        return decode_rrule(text, anchor=anchor)
    if rrule is not None:
        return decode_rrule(rrule, anchor=anchor)
    if rule_json is not None:
        return parse_rule(rule_json)
    return None


def date_option(value: str | None, name: str) -> date | None:
    """Parse an ISO date option, reporting bad input as an AppError."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise AppError(f"Invalid {name}: {value!r} (expected YYYY-MM-DD)", ERROR_INVALID_ARGS) from e


def output_format(value: str | None) -> str:
    """Resolve --output, falling back to the configured default format."""
    return value or get_config_service().config.output.format
