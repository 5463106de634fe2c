"""Occurrence calculator.

Pure functions answering "what is the next due date of this rule after X".
Every occurrence is projected from the state's ``anchor_date``; the search
jumps straight to the period containing the lower bound instead of walking
forward from the anchor.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import MAXYEAR, date, timedelta

from homeplan.models.recurrence import (
    AfterOccurrences,
    DailyPattern,
    DayOfMonth,
    MonthlyPattern,
    NeverEnd,
    NthWeekday,
    NthWeekdayOfMonth,
    OnDate,
    RecurrenceState,
    SpecificDate,
    WeeklyPattern,
    YearlyPattern,
)
from homeplan.utils.dates import (
    days_in_month,
    from_month_index,
    month_index,
    nth_weekday_of_month,
    start_of_week,
)

# The Gregorian calendar repeats every 400 years (4800 months), so a
# month/year sequence that yields nothing within that many steps never will.
_MAX_PERIODS = 4800


def next_occurrence(
    state: RecurrenceState, after: date, inclusive: bool = False
) -> date | None:
    """Return the earliest occurrence after ``after``.

    Args:
        state: Recurrence state (pattern, end condition, anchor, progress)
        after: Lower bound; occurrences must be strictly later unless
            ``inclusive`` is set
        inclusive: Accept an occurrence falling on ``after`` itself

    Returns:
        The next occurrence date, or None when the rule has ended or the
        pattern cannot produce another date
    """
    if remaining_occurrences(state) == 0:
        return None

    if inclusive:
        floor = after
    elif after == date.max:
        return None
    else:
        floor = after + timedelta(days=1)
    floor = max(floor, state.anchor_date)

    candidate = _first_candidate_from(state, floor)
    if candidate is None:
        return None

    match state.end:
        case OnDate(until=until) if candidate > until:
            return None
    return candidate


def iter_occurrences(
    state: RecurrenceState, after: date | None = None, inclusive: bool = True
) -> Iterator[date]:
    """Lazily yield successive occurrences.

    Starts at ``after`` (default: the anchor date). For ``AfterOccurrences``
    rules at most the not-yet-completed occurrences are produced.
    """
    remaining = remaining_occurrences(state)
    current = state.anchor_date if after is None else after
    produced = 0
    while remaining is None or produced < remaining:
        occurrence = next_occurrence(state, current, inclusive=inclusive)
        if occurrence is None:
            return
        yield occurrence
        produced += 1
        current, inclusive = occurrence, False


def remaining_occurrences(state: RecurrenceState) -> int | None:
    """Occurrences left before an AfterOccurrences rule ends (None = unbounded)."""
    match state.end:
        case AfterOccurrences(count=count):
            return max(count - state.occurrence_count, 0)
        case NeverEnd() | OnDate():
            return None


def _first_candidate_from(state: RecurrenceState, floor: date) -> date | None:
    anchor = state.anchor_date
    match state.pattern:
        case DailyPattern(interval=interval):
            return _daily(anchor, interval, floor)
        case WeeklyPattern(interval=interval, days=days):
            return _weekly(anchor, interval, [day.position for day in days], floor)
        case MonthlyPattern(interval=interval, mode=mode):
            return _monthly(anchor, interval, mode, floor)
        case YearlyPattern(interval=interval, month=month, mode=mode):
            return _yearly(anchor, interval, month, mode, floor)
    raise TypeError(f"Unsupported recurrence pattern: {state.pattern!r}")


def _daily(anchor: date, interval: int, floor: date) -> date | None:
    offset = (floor - anchor).days
    steps = -(-offset // interval)  # ceil
    try:
        return anchor + timedelta(days=steps * interval)
    except OverflowError:
        return None


def _weekly(anchor: date, interval: int, weekdays: list[int], floor: date) -> date | None:
    first_week = start_of_week(anchor)
    weeks = (start_of_week(floor) - first_week).days // 7
    block = weeks // interval
    # Only the first week of each block carries occurrences: either the
    # block containing ``floor`` still has one on/after it, or the next does.
    for index in (block, block + 1):
        for weekday in weekdays:
            try:
                candidate = first_week + timedelta(days=index * interval * 7 + weekday)
            except OverflowError:
                return None
            if candidate >= floor:
                return candidate
    return None


def _day_in_month(
    year: int, month: int, mode: DayOfMonth | NthWeekday | SpecificDate | NthWeekdayOfMonth
) -> date | None:
    """The mode's date within one month, or None when that month lacks it."""
    match mode:
        case DayOfMonth(day=day) | SpecificDate(day=day):
            if day > days_in_month(year, month):
                return None
            return date(year, month, day)
        case NthWeekday(nth=nth, weekday=weekday) | NthWeekdayOfMonth(
            nth=nth, weekday=weekday
        ):
            return nth_weekday_of_month(year, month, weekday.position, nth)
    raise TypeError(f"Unsupported month mode: {mode!r}")


def _monthly(
    anchor: date, interval: int, mode: DayOfMonth | NthWeekday, floor: date
) -> date | None:
    start = month_index(anchor)
    first_step = max(0, (month_index(floor) - start) // interval)
    for step in range(first_step, first_step + _MAX_PERIODS):
        year, month = from_month_index(start + step * interval)
        if year > MAXYEAR:
            return None
        candidate = _day_in_month(year, month, mode)
        if candidate is not None and candidate >= floor:
            return candidate
    return None


def _yearly(
    anchor: date,
    interval: int,
    month: int,
    mode: SpecificDate | NthWeekdayOfMonth,
    floor: date,
) -> date | None:
    first_step = max(0, (floor.year - anchor.year) // interval)
    for step in range(first_step, first_step + _MAX_PERIODS):
        year = anchor.year + step * interval
        if year > MAXYEAR:
            return None
        candidate = _day_in_month(year, month, mode)
        if candidate is not None and candidate >= floor:
            return candidate
    return None
