"""Achievement catalog and unlock checks.

The catalog is fixed: three lifetime-step milestones, five level milestones
and one composite "every stat maxed" badge.  Unlocks are sticky — once an id
is in the unlocked set it stays there until a full data reset, even if the
predicate would no longer hold.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pet.state import PetRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    icon: str
    predicate: Callable[[int, PetRecord], bool]

    def is_met(self, record: PetRecord) -> bool:
        return self.predicate(record.total_steps, record)


def _steps_at_least(threshold: int) -> Callable[[int, PetRecord], bool]:
    return lambda total_steps, record: total_steps >= threshold


def _level_at_least(threshold: int) -> Callable[[int, PetRecord], bool]:
    return lambda total_steps, record: record.level >= threshold


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("steps-1k", "1,000 Steps", "👣", _steps_at_least(1_000)),
    Achievement("steps-10k", "10,000 Steps", "🏃", _steps_at_least(10_000)),
    Achievement("steps-100k", "100,000 Steps", "🏆", _steps_at_least(100_000)),
    Achievement("level-10", "Level 10", "⭐", _level_at_least(10)),
    Achievement("level-25", "Level 25", "🌟", _level_at_least(25)),
    Achievement("level-50", "Level 50", "💫", _level_at_least(50)),
    Achievement("level-75", "Level 75", "✨", _level_at_least(75)),
    Achievement("level-100", "Level 100", "🎖", _level_at_least(100)),
    Achievement("all-stats-100", "Peak Condition", "💯", lambda total_steps, record: record.all_stats_maxed),
)

ACHIEVEMENT_IDS: frozenset[str] = frozenset(a.id for a in ACHIEVEMENTS)


def get_achievement(achievement_id: str) -> Achievement | None:
    for achievement in ACHIEVEMENTS:
        if achievement.id == achievement_id:
            return achievement
    return None


def find_new_unlocks(record: PetRecord, unlocked: Iterable[str]) -> list[Achievement]:
    """Catalog entries whose predicate now holds but are not yet unlocked."""
    already = set(unlocked)
    return [a for a in ACHIEVEMENTS if a.id not in already and a.is_met(record)]


def parse_unlocked(data: Any) -> set[str]:
    """Read a stored achievement set.

    Accepts the canonical id list and the legacy ``{id: true}`` mapping.
    Unknown ids are kept so newer exports survive a round trip.
    """
    if isinstance(data, dict):
        unlocked = {str(key) for key, value in data.items() if value}
    elif isinstance(data, list):
        unlocked = {item for item in data if isinstance(item, str)}
    else:
        if data is not None:
            logger.warning("Stored achievements are malformed (%s); treating as empty", type(data).__name__)
        return set()

    unknown = unlocked - ACHIEVEMENT_IDS
    if unknown:
        logger.debug("Keeping unknown achievement ids: %s", ", ".join(sorted(unknown)))
    return unlocked
