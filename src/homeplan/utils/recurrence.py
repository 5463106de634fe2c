"""Recurrence codec for the calendar provider's RRULE encoding.

The provider understands a compact subset of iCalendar RRULE:
``RRULE:FREQ=<DAILY|WEEKLY|MONTHLY>[;INTERVAL=n][;BYDAY=MO,...]
[;BYMONTHDAY=d][;COUNT=n|;UNTIL=YYYYMMDDTHHMMSSZ]``.
Yearly rules and nth-weekday modes are kept in canonical form only.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date

from homeplan.models.exceptions import InvalidRule, UnsupportedEncoding
from homeplan.models.recurrence import (
    AfterOccurrences,
    DailyPattern,
    DayOfMonth,
    MonthlyPattern,
    NeverEnd,
    NthWeekday,
    OnDate,
    RecurrenceRule,
    Weekday,
    WeeklyPattern,
    YearlyPattern,
)

RRULE_PREFIX = "RRULE:"

# UNTIL is emitted at the end of the day so the last date is still included.
_UNTIL_SUFFIX = "T235959Z"
_UNTIL_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})(?:T\d{6}Z?)?$")
_DIGITS_RE = re.compile(r"[0-9]+")
_KNOWN_KEYS = {"FREQ", "INTERVAL", "BYDAY", "BYMONTHDAY", "COUNT", "UNTIL"}

# Maps human-friendly names to RRULE strings.
RECURRENCE_PATTERNS: dict[str, str] = {
    "daily": "FREQ=DAILY",
    "weekdays": "FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR",
    "weekly": "FREQ=WEEKLY",
    "bi-weekly": "FREQ=WEEKLY;INTERVAL=2",
    "monthly": "FREQ=MONTHLY",
}

VALID_PATTERNS = list(RECURRENCE_PATTERNS.keys())


def resolve_rrule(pattern: str) -> str | None:
    """Convert a human-friendly recurrence pattern name to an RRULE string.

    Args:
        pattern: Pattern name (e.g., "daily", "weekly")

    Returns:
        RRULE string, or None if pattern is not recognized
    """
    return RECURRENCE_PATTERNS.get(pattern.lower())


def describe_rrule(rrule: str) -> str:
    """Convert an RRULE string back to its preset name when it has one."""
    body = _strip_prefix(rrule)
    reverse = {v: k for k, v in RECURRENCE_PATTERNS.items()}
    return reverse.get(body, rrule)


def encode_rrule(rule: RecurrenceRule) -> list[str]:
    """Encode a canonical rule as the provider's single-line RRULE list.

    Raises:
        UnsupportedEncoding: For yearly rules and nth-weekday monthly rules
    """
    pattern = rule.pattern
    match pattern:
        case DailyPattern():
            parts = ["FREQ=DAILY"]
        case WeeklyPattern():
            parts = ["FREQ=WEEKLY"]
        case MonthlyPattern(mode=DayOfMonth()):
            parts = ["FREQ=MONTHLY"]
        case MonthlyPattern(mode=NthWeekday()):
            raise UnsupportedEncoding(
                "Monthly nth-weekday rules have no provider encoding", token="BYSETPOS"
            )
        case YearlyPattern():
            raise UnsupportedEncoding(
                "Yearly rules have no provider encoding", token="FREQ=YEARLY"
            )
        case _:
            raise UnsupportedEncoding(f"Unknown pattern: {pattern!r}")

    if pattern.interval > 1:
        parts.append(f"INTERVAL={pattern.interval}")

    match pattern:
        case WeeklyPattern(days=days):
            parts.append("BYDAY=" + ",".join(day.code for day in days))
        case MonthlyPattern(mode=DayOfMonth(day=day)):
            parts.append(f"BYMONTHDAY={day}")

    match rule.end:
        case AfterOccurrences(count=count):
            parts.append(f"COUNT={count}")
        case OnDate(until=until):
            parts.append(f"UNTIL={until.strftime('%Y%m%d')}{_UNTIL_SUFFIX}")

    return [RRULE_PREFIX + ";".join(parts)]


def decode_rrule(encoded: str | Iterable[str], anchor: date | None = None) -> RecurrenceRule:
    """Decode the provider's RRULE text into a canonical rule.

    Args:
        encoded: One RRULE line, or a list holding exactly one line. The
            ``RRULE:`` prefix is optional.
        anchor: Date standing in for DTSTART. A weekly rule without BYDAY
            uses its weekday; a monthly rule without BYMONTHDAY uses its day.

    Raises:
        UnsupportedEncoding: If the text is malformed or outside the subset
    """
    lines = [encoded] if isinstance(encoded, str) else list(encoded)
    lines = [line.strip() for line in lines if line and line.strip()]
    if len(lines) != 1:
        raise UnsupportedEncoding(
            f"Expected exactly one RRULE line, got {len(lines)}"
        )

    tokens = _tokenize(_strip_prefix(lines[0]))
    freq = tokens.pop("FREQ", None)
    if freq is None:
        raise UnsupportedEncoding("Missing FREQ", token=lines[0])

    interval = _positive_int(tokens, "INTERVAL", default=1)
    end = _decode_end(tokens)
    byday = tokens.pop("BYDAY", None)
    bymonthday = tokens.pop("BYMONTHDAY", None)

    if byday is not None and freq != "WEEKLY":
        raise UnsupportedEncoding("BYDAY is only supported for weekly rules", token=byday)
    if bymonthday is not None and freq != "MONTHLY":
        raise UnsupportedEncoding(
            "BYMONTHDAY is only supported for monthly rules", token=bymonthday
        )

    try:
        if freq == "DAILY":
            pattern = DailyPattern(interval=interval)
        elif freq == "WEEKLY":
            pattern = WeeklyPattern(interval=interval, days=_decode_days(byday, anchor))
        elif freq == "MONTHLY":
            pattern = MonthlyPattern(
                interval=interval, mode=DayOfMonth(day=_decode_month_day(bymonthday, anchor))
            )
        else:
            raise UnsupportedEncoding("Unsupported frequency", token=f"FREQ={freq}")
        return RecurrenceRule(pattern=pattern, end=end)
    except InvalidRule as exc:
        raise UnsupportedEncoding(str(exc), token=lines[0]) from exc


def _strip_prefix(text: str) -> str:
    text = text.strip()
    if text.upper().startswith(RRULE_PREFIX):
        return text[len(RRULE_PREFIX):]
    return text


def _tokenize(body: str) -> dict[str, str]:
    tokens: dict[str, str] = {}
    for part in body.split(";"):
        if not part.strip():
            continue
        key, sep, value = part.partition("=")
        key = key.strip().upper()
        value = value.strip().upper()
        if not sep or not value:
            raise UnsupportedEncoding("Malformed RRULE token", token=part)
        if key not in _KNOWN_KEYS:
            raise UnsupportedEncoding("Unsupported RRULE token", token=part)
        if key in tokens:
            raise UnsupportedEncoding("Duplicate RRULE token", token=part)
        tokens[key] = value
    return tokens


def _positive_int(tokens: dict[str, str], key: str, default: int | None = None) -> int | None:
    raw = tokens.pop(key, None)
    if raw is None:
        return default
    if not _DIGITS_RE.fullmatch(raw) or int(raw) < 1:
        raise UnsupportedEncoding(f"{key} must be a positive integer", token=f"{key}={raw}")
    return int(raw)


def _decode_end(tokens: dict[str, str]) -> NeverEnd | AfterOccurrences | OnDate:
    if "COUNT" in tokens and "UNTIL" in tokens:
        raise UnsupportedEncoding("COUNT and UNTIL are mutually exclusive")
    count = _positive_int(tokens, "COUNT")
    if count is not None:
        return AfterOccurrences(count=count)
    until = tokens.pop("UNTIL", None)
    if until is not None:
        match = _UNTIL_RE.match(until)
        if match is None:
            raise UnsupportedEncoding("Malformed UNTIL", token=f"UNTIL={until}")
        try:
            return OnDate(until=date(*(int(group) for group in match.groups())))
        except ValueError as exc:
            raise UnsupportedEncoding("Malformed UNTIL", token=f"UNTIL={until}") from exc
    return NeverEnd()


def _decode_days(byday: str | None, anchor: date | None) -> list[Weekday]:
    if byday is None:
        if anchor is None:
            raise UnsupportedEncoding("Weekly rule without BYDAY needs an anchor date")
        return [Weekday.from_date(anchor)]
    try:
        return [Weekday.from_code(code) for code in byday.split(",")]
    except ValueError as exc:
        raise UnsupportedEncoding("Unsupported BYDAY value", token=f"BYDAY={byday}") from exc


def _decode_month_day(bymonthday: str | None, anchor: date | None) -> int:
    if bymonthday is None:
        if anchor is None:
            raise UnsupportedEncoding("Monthly rule without BYMONTHDAY needs an anchor date")
        return anchor.day
    if not _DIGITS_RE.fullmatch(bymonthday):
        raise UnsupportedEncoding(
            "Unsupported BYMONTHDAY value", token=f"BYMONTHDAY={bymonthday}"
        )
    return int(bymonthday)
