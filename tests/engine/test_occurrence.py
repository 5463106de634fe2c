"""Tests for the occurrence calculator."""

from __future__ import annotations

from datetime import date, timedelta
from itertools import islice

import pytest

from homeplan.engine import iter_occurrences, next_occurrence, remaining_occurrences

MON, WED, FRI = "monday", "wednesday", "friday"


def take(iterator, n):
    return list(islice(iterator, n))


class TestDaily:
    def test_inclusive_returns_anchor(self, make_state):
        state = make_state({"type": "daily", "interval": 3}, date(2024, 1, 1))
        assert next_occurrence(state, date(2024, 1, 1), inclusive=True) == date(2024, 1, 1)

    def test_strictly_after(self, make_state):
        state = make_state({"type": "daily", "interval": 3}, date(2024, 1, 1))
        assert next_occurrence(state, date(2024, 1, 1)) == date(2024, 1, 4)
        assert next_occurrence(state, date(2024, 1, 5)) == date(2024, 1, 7)

    def test_bound_before_anchor_starts_at_anchor(self, make_state):
        state = make_state({"type": "daily", "interval": 3}, date(2024, 1, 1))
        assert next_occurrence(state, date(2023, 6, 1)) == date(2024, 1, 1)

    @pytest.mark.parametrize("interval", [1, 2, 7, 30])
    def test_consecutive_occurrences_are_interval_days_apart(self, make_state, interval):
        state = make_state({"type": "daily", "interval": interval}, date(2024, 2, 27))
        dates = take(iter_occurrences(state), 20)
        assert all((b - a).days == interval for a, b in zip(dates, dates[1:]))

    def test_far_future_bound_jumps_directly(self, make_state):
        state = make_state({"type": "daily", "interval": 10}, date(2024, 1, 1))
        result = next_occurrence(state, date(2124, 1, 1))
        assert result > date(2124, 1, 1)
        assert (result - date(2024, 1, 1)).days % 10 == 0

    def test_calendar_end_returns_none(self, make_state):
        state = make_state({"type": "daily", "interval": 5}, date(9999, 12, 28))
        assert next_occurrence(state, date(9999, 12, 28)) is None
        assert next_occurrence(state, date.max, inclusive=False) is None


class TestWeekly:
    def test_biweekly_monday_wednesday(self, make_state):
        state = make_state(
            {"type": "weekly", "interval": 2, "days": [MON, WED]}, date(2024, 1, 1)
        )
        assert take(iter_occurrences(state), 5) == [
            date(2024, 1, 1),
            date(2024, 1, 3),
            date(2024, 1, 15),
            date(2024, 1, 17),
            date(2024, 1, 29),
        ]

    def test_days_before_anchor_in_first_week_are_skipped(self, make_state):
        # 2024-01-03 is a Wednesday
        state = make_state(
            {"type": "weekly", "interval": 2, "days": [MON, FRI]}, date(2024, 1, 3)
        )
        assert take(iter_occurrences(state), 5) == [
            date(2024, 1, 5),
            date(2024, 1, 15),
            date(2024, 1, 19),
            date(2024, 1, 29),
            date(2024, 2, 2),
        ]

    @pytest.mark.parametrize("interval", [1, 2, 3, 5])
    def test_weekdays_and_week_cadence(self, make_state, interval):
        anchor = date(2024, 3, 14)
        state = make_state(
            {"type": "weekly", "interval": interval, "days": [MON, WED, "sunday"]}, anchor
        )
        first_week = anchor - timedelta(days=anchor.weekday())
        for occurrence in take(iter_occurrences(state), 30):
            assert occurrence.weekday() in (0, 2, 6)
            assert ((occurrence - first_week).days // 7) % interval == 0

    def test_bound_in_off_week_moves_to_next_block(self, make_state):
        state = make_state({"type": "weekly", "interval": 3, "days": [MON]}, date(2024, 1, 1))
        assert next_occurrence(state, date(2024, 1, 9)) == date(2024, 1, 22)

    def test_multiple_days_are_returned_in_order(self, make_state):
        state = make_state({"type": "weekly", "days": [FRI, MON]}, date(2024, 1, 1))
        assert next_occurrence(state, date(2024, 1, 1)) == date(2024, 1, 5)


class TestMonthly:
    def test_day_31_skips_short_months(self, make_state):
        state = make_state(
            {"type": "monthly", "mode": {"kind": "day_of_month", "day": 31}},
            date(2024, 1, 31),
        )
        assert take(iter_occurrences(state, date(2024, 1, 31), inclusive=False), 4) == [
            date(2024, 3, 31),
            date(2024, 5, 31),
            date(2024, 7, 31),
            date(2024, 8, 31),
        ]

    def test_day_31_never_falls_in_short_month(self, make_state):
        state = make_state(
            {"type": "monthly", "mode": {"kind": "day_of_month", "day": 31}},
            date(2024, 1, 31),
        )
        months = {d.month for d in take(iter_occurrences(state), 50)}
        assert months == {1, 3, 5, 7, 8, 10, 12}

    def test_day_30_skips_february(self, make_state):
        state = make_state(
            {"type": "monthly", "mode": {"kind": "day_of_month", "day": 30}},
            date(2024, 1, 30),
        )
        assert next_occurrence(state, date(2024, 1, 30)) == date(2024, 3, 30)

    def test_interval_counts_from_anchor_month(self, make_state):
        state = make_state(
            {"type": "monthly", "interval": 2, "mode": {"kind": "day_of_month", "day": 15}},
            date(2024, 1, 20),
        )
        assert take(iter_occurrences(state), 3) == [
            date(2024, 3, 15),
            date(2024, 5, 15),
            date(2024, 7, 15),
        ]

    def test_last_friday(self, make_state):
        state = make_state(
            {"type": "monthly", "mode": {"kind": "nth_weekday", "nth": -1, "weekday": FRI}},
            date(2024, 1, 10),
        )
        assert next_occurrence(state, date(2024, 1, 10), inclusive=True) == date(2024, 1, 26)
        assert next_occurrence(state, date(2024, 1, 26)) == date(2024, 2, 23)

    def test_fifth_monday_skips_months_without_one(self, make_state):
        state = make_state(
            {"type": "monthly", "mode": {"kind": "nth_weekday", "nth": 5, "weekday": MON}},
            date(2024, 1, 1),
        )
        assert take(iter_occurrences(state), 3) == [
            date(2024, 1, 29),
            date(2024, 4, 29),
            date(2024, 7, 29),
        ]

    def test_second_to_last_sunday(self, make_state):
        state = make_state(
            {"type": "monthly", "mode": {"kind": "nth_weekday", "nth": -2, "weekday": "sunday"}},
            date(2024, 3, 1),
        )
        assert next_occurrence(state, date(2024, 3, 1)) == date(2024, 3, 24)


class TestYearly:
    def test_leap_day_only_in_leap_years(self, make_state):
        state = make_state(
            {"type": "yearly", "month": 2, "mode": {"kind": "specific_date", "day": 29}},
            date(2024, 2, 29),
        )
        assert take(iter_occurrences(state), 3) == [
            date(2024, 2, 29),
            date(2028, 2, 29),
            date(2032, 2, 29),
        ]

    def test_impossible_date_returns_none(self, make_state):
        state = make_state(
            {"type": "yearly", "month": 2, "mode": {"kind": "specific_date", "day": 30}},
            date(2024, 1, 1),
        )
        assert next_occurrence(state, date(2024, 1, 1), inclusive=True) is None

    def test_fourth_thursday_of_november(self, make_state):
        state = make_state(
            {
                "type": "yearly",
                "month": 11,
                "mode": {"kind": "nth_weekday_of_month", "nth": 4, "weekday": "thursday"},
            },
            date(2024, 1, 1),
        )
        assert take(iter_occurrences(state), 2) == [date(2024, 11, 28), date(2025, 11, 27)]

    def test_interval_skips_years(self, make_state):
        state = make_state(
            {
                "type": "yearly",
                "interval": 2,
                "month": 3,
                "mode": {"kind": "specific_date", "day": 15},
            },
            date(2024, 6, 1),
        )
        assert next_occurrence(state, date(2024, 6, 1), inclusive=True) == date(2026, 3, 15)


class TestEndConditions:
    def test_on_date_is_inclusive(self, make_state):
        state = make_state(
            {"type": "daily"}, date(2024, 1, 1), end={"type": "on_date", "until": "2024-01-03"}
        )
        assert list(iter_occurrences(state)) == [
            date(2024, 1, 1),
            date(2024, 1, 2),
            date(2024, 1, 3),
        ]
        assert next_occurrence(state, date(2024, 1, 3)) is None

    def test_exhausted_count_returns_none(self, make_state):
        state = make_state(
            {"type": "daily"},
            date(2024, 1, 1),
            end={"type": "after_occurrences", "count": 3},
            occurrence_count=3,
        )
        assert next_occurrence(state, date(2024, 1, 3)) is None

    def test_iteration_limited_to_remaining_count(self, make_state):
        state = make_state(
            {"type": "daily"},
            date(2024, 1, 1),
            end={"type": "after_occurrences", "count": 3},
            occurrence_count=1,
        )
        assert list(iter_occurrences(state, date(2024, 1, 2))) == [
            date(2024, 1, 2),
            date(2024, 1, 3),
        ]


class TestRemainingOccurrences:
    def test_never_is_unbounded(self, make_state):
        assert remaining_occurrences(make_state({"type": "daily"}, date(2024, 1, 1))) is None

    def test_on_date_is_unbounded(self, make_state):
        state = make_state(
            {"type": "daily"}, date(2024, 1, 1), end={"type": "on_date", "until": "2024-02-01"}
        )
        assert remaining_occurrences(state) is None

    @pytest.mark.parametrize(("done", "expected"), [(0, 3), (2, 1), (3, 0), (5, 0)])
    def test_after_occurrences(self, make_state, done, expected):
        state = make_state(
            {"type": "daily"},
            date(2024, 1, 1),
            end={"type": "after_occurrences", "count": 3},
            occurrence_count=done,
        )
        assert remaining_occurrences(state) == expected
