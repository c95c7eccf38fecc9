"""Level curve — maps lifetime steps to a pet level and back.

The curve is ``floor(1000 * level ** 1.5)``:

  Level 2   =     2,828 steps
  Level 10  =    31,622 steps
  Level 50  =   353,553 steps
  Level 100 = 1,000,000 steps

``steps_required`` is strictly increasing on 1..100, so ``level_for`` is its
inverse: the highest level whose requirement has been met.
"""

from __future__ import annotations

import math

from pydantic import BaseModel

MIN_LEVEL = 1
MAX_LEVEL = 100

# Evolution stage upper bounds (inclusive); anything above the last is stage 5.
_STAGE_BOUNDS = (20, 40, 60, 80)


def steps_required(level: int) -> int | float:
    """Lifetime steps needed to reach *level*; ``math.inf`` past the cap."""
    if level <= MIN_LEVEL:
        return 0
    if level > MAX_LEVEL:
        return math.inf
    return math.floor(1000 * math.pow(level, 1.5))


def level_for(total_steps: int) -> int:
    """Return the highest level in 1..100 reachable with *total_steps*."""
    for level in range(MAX_LEVEL, MIN_LEVEL - 1, -1):
        if total_steps >= steps_required(level):
            return level
    return MIN_LEVEL


def evolution_stage(level: int) -> int:
    """Evolution stage (1-5) shown by the rendering layer."""
    for stage, bound in enumerate(_STAGE_BOUNDS, start=1):
        if level <= bound:
            return stage
    return len(_STAGE_BOUNDS) + 1


# ── Progress ────────────────────────────────────────────────────────────────


class LevelProgress(BaseModel):
    """How far the pet is through its current level."""

    level: int
    next_level: int | None   # None once MAX_LEVEL is reached
    steps_into_level: int
    steps_needed: int        # size of the current level band (0 at max)

    @property
    def is_max(self) -> bool:
        return self.next_level is None

    @property
    def percent(self) -> float:
        if self.is_max or self.steps_needed <= 0:
            return 100.0
        return min(100.0, self.steps_into_level / self.steps_needed * 100)

    @property
    def steps_remaining(self) -> int:
        return max(0, self.steps_needed - self.steps_into_level)


def level_progress(total_steps: int, level: int) -> LevelProgress:
    """Progress from the start of *level* towards the next one."""
    floor_steps = int(steps_required(level))
    if level >= MAX_LEVEL:
        return LevelProgress(
            level=MAX_LEVEL,
            next_level=None,
            steps_into_level=max(0, total_steps - floor_steps),
            steps_needed=0,
        )
    next_steps = int(steps_required(level + 1))
    return LevelProgress(
        level=level,
        next_level=level + 1,
        steps_into_level=max(0, total_steps - floor_steps),
        steps_needed=next_steps - floor_steps,
    )
