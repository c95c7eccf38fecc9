"""Weekly activity — steps logged per weekday, Monday (0) to Sunday (6)."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Shape accepted on import: exactly seven non-negative integers.
WeeklySteps = Annotated[
    list[Annotated[int, Field(ge=0)]],
    Field(min_length=DAYS_PER_WEEK, max_length=DAYS_PER_WEEK),
]


class LegacyActivity(BaseModel):
    """Older stores wrapped the array as ``{"weeklySteps": [...]}``."""

    weeklySteps: WeeklySteps


class WeeklyActivity(BaseModel):
    steps: list[int] = Field(default_factory=lambda: [0] * DAYS_PER_WEEK)

    def add(self, steps: int, today: date | datetime) -> int:
        """Add *steps* to today's slot and return that slot's new total."""
        index = day_index(today)
        self.steps[index] += steps
        return self.steps[index]

    def to_stored(self) -> list[int]:
        return list(self.steps)

    @property
    def best_day(self) -> int:
        return max(self.steps)

    @classmethod
    def from_stored(cls, data: Any) -> WeeklyActivity:
        """Accept either the bare array or the legacy wrapper; zeros otherwise."""
        if isinstance(data, dict):
            data = data.get("weeklySteps")
        if data is None:
            return cls()
        try:
            return cls(steps=validate_weekly_steps(data))
        except ValidationError:
            logger.warning("Stored weekly activity is malformed; starting from zeros")
            return cls()


class _WeeklyStepsModel(BaseModel):
    steps: WeeklySteps


def validate_weekly_steps(data: Any) -> list[int]:
    """Return *data* as seven non-negative ints or raise ``ValidationError``."""
    return _WeeklyStepsModel(steps=data).steps


def day_index(day: date | datetime) -> int:
    """Monday-based weekday index (0 = Monday ... 6 = Sunday)."""
    return day.weekday()
