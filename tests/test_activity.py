"""Tests for pet.activity — weekly step slots."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from pet.activity import WeeklyActivity, day_index, validate_weekly_steps

MONDAY = date(2026, 3, 9)
SUNDAY = date(2026, 3, 15)


class TestDayIndex:
    def test_monday_first(self) -> None:
        assert day_index(MONDAY) == 0
        assert day_index(SUNDAY) == 6

    def test_accepts_datetime(self) -> None:
        assert day_index(datetime(2026, 3, 10, 23, 59)) == 1


class TestWeeklyActivity:
    def test_starts_at_zero(self) -> None:
        assert WeeklyActivity().steps == [0] * 7

    def test_add_accumulates_in_today_slot(self) -> None:
        activity = WeeklyActivity()
        activity.add(500, MONDAY)
        assert activity.add(250, MONDAY) == 750
        activity.add(100, SUNDAY)
        assert activity.steps == [750, 0, 0, 0, 0, 0, 100]
        assert activity.best_day == 750

    def test_from_stored_array(self) -> None:
        activity = WeeklyActivity.from_stored([1, 2, 3, 4, 5, 6, 7])
        assert activity.to_stored() == [1, 2, 3, 4, 5, 6, 7]

    def test_from_stored_legacy_wrapper(self) -> None:
        activity = WeeklyActivity.from_stored({"weeklySteps": [7, 0, 0, 0, 0, 0, 1]})
        assert activity.steps == [7, 0, 0, 0, 0, 0, 1]

    @pytest.mark.parametrize("data", [None, [1, 2, 3], "steps", {"other": 1}, [0, 0, 0, 0, 0, 0, -1]])
    def test_malformed_gives_zeros(self, data) -> None:
        assert WeeklyActivity.from_stored(data).steps == [0] * 7


class TestValidateWeeklySteps:
    def test_accepts_seven_counts(self) -> None:
        assert validate_weekly_steps([0] * 7) == [0] * 7

    @pytest.mark.parametrize("data", [[0] * 6, [0] * 8, [0, 0, 0, 0, 0, 0, -1], "nope"])
    def test_rejects_bad_shapes(self, data) -> None:
        with pytest.raises(ValidationError):
            validate_weekly_steps(data)
