"""Pet engine — owns the pet and every rule that changes it.

``PetEngine`` is the single owner of:
- ``record``        — the ``PetRecord`` (stats, level, step counters)
- ``activity``      — the ``WeeklyActivity`` step chart
- ``achievements``  — the set of unlocked achievement ids
- ``saves``         — the ``SaveManager`` writing all three to a store

The UI and CLI only call the public methods of this class; they must not
mutate ``record`` directly.  Every mutating call runs under an internal
lock, and intake and care calls write the pet record exactly once.  If a
write fails the in-memory state is already up to date, so the caller can
simply call ``save()`` again.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from pet.achievements import ACHIEVEMENTS, Achievement, find_new_unlocks
from pet.activity import WeeklyActivity
from pet.intake import IntakeResult, apply_intake
from pet.leveling import LevelProgress, evolution_stage, level_progress
from pet.save import LoadResult, SaveManager
from pet.state import PetRecord, is_new_day, local_now
from pet.store import KeyValueStore

logger = logging.getLogger(__name__)

# ── Constants ───────────────────────────────────────────────────────────────

CARE_BOOST = 10

# action -> (stat, feedback text)
CARE_ACTIONS: dict[str, tuple[str, str]] = {
    "feed": ("health", "Feeding pet..."),
    "play": ("happiness", "Playing with pet..."),
    "rest": ("energy", "Pet is resting..."),
    "train": ("strength", "Training pet..."),
    "exercise": ("agility", "Exercising pet..."),
}


class StatChange(BaseModel):
    """Result of a direct stat increase (care action)."""

    stat: str
    applied: float
    value: float
    new_achievements: list[str] = []


class PetEngine:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.saves = SaveManager(store, clock=clock)
        self._now = clock
        self.record = PetRecord()
        self.activity = WeeklyActivity()
        self.achievements: set[str] = set()
        # moment of the last load or intake; the day rollover compares against it
        self._active_since: datetime | None = None
        self._lock = threading.RLock()

    # ── Lifecycle ───────────────────────────────────────────────────────

    def load(self) -> LoadResult:
        """Load all three records, applying the daily reset.

        The in-memory state is replaced before the pet record is written
        back, so a failed write still leaves a usable engine.
        """
        with self._lock:
            result = self.saves.load(resave=False)
            self.record = result.record
            self.activity = self.saves.load_activity()
            self.achievements = self.saves.load_achievements()
            self._active_since = self._now()
            if result.found:
                self.saves.save_pet(self.record)
            logger.debug(
                "Loaded pet (found=%s, rolled_over=%s, level=%d)",
                result.found, result.rolled_over, self.record.level,
            )
            return result

    def save(self) -> None:
        """Write the current in-memory state; use to retry after a failed write."""
        with self._lock:
            self.saves.save_pet(self.record)
            self.saves.save_activity(self.activity)
            self.saves.save_achievements(self.achievements)

    # ── Intake ──────────────────────────────────────────────────────────

    def add_steps(self, steps: int) -> IntakeResult | None:
        """Log *steps* and return what changed, or ``None`` if ``steps <= 0``.

        Besides the stat and level update this adds the steps to today's
        weekly slot and unlocks any achievements that now hold.
        """
        if steps <= 0:
            logger.debug("Ignoring intake of %d steps", steps)
            return None

        with self._lock:
            now = self._now()
            since = self._active_since or self.record.last_saved
            if since is not None and is_new_day(since, now):
                logger.info("First intake of a new day; resetting steps today")
                self.record.steps_today = 0
            self._active_since = now

            result = apply_intake(self.record, steps)
            self.activity.add(steps, now)
            unlocked = self._unlock_new()
            result.new_achievements = [a.id for a in unlocked]

            if result.leveled_up:
                logger.info("Level up: %d -> %d", result.old_level, result.new_level)

            self.saves.save_pet(self.record)
            self.saves.save_activity(self.activity)
            if unlocked:
                self.saves.save_achievements(self.achievements)
            return result

    def reset_steps_today(self) -> None:
        with self._lock:
            self.record.steps_today = 0
            self.saves.save_pet(self.record)

    # ── Care ────────────────────────────────────────────────────────────

    def increase(self, stat: str, amount: float) -> StatChange:
        """Raise a single stat (capped at 100) and save."""
        with self._lock:
            applied = self.record.increase(stat, amount)
            unlocked = self._unlock_new()
            self.saves.save_pet(self.record)
            if unlocked:
                self.saves.save_achievements(self.achievements)
            return StatChange(
                stat=stat,
                applied=applied,
                value=getattr(self.record, stat),
                new_achievements=[a.id for a in unlocked],
            )

    def care(self, action: str) -> StatChange:
        """Apply one of ``CARE_ACTIONS`` (+10 to its stat)."""
        if action not in CARE_ACTIONS:
            raise ValueError(f"Unknown care action '{action}'")
        stat, _ = CARE_ACTIONS[action]
        return self.increase(stat, CARE_BOOST)

    # ── Export / import / reset ─────────────────────────────────────────

    def export_all(self) -> dict:
        with self._lock:
            return self.saves.export_all()

    def export_to(self, path: str | Path) -> Path:
        with self._lock:
            return self.saves.export_to(path)

    def import_all(self, doc: dict | str | bytes) -> list[str]:
        """Import a document and reload from the store.  Returns keys written."""
        with self._lock:
            keys = self.saves.import_all(doc)
            self.load()
            return keys

    def import_from(self, path: str | Path) -> list[str]:
        with self._lock:
            keys = self.saves.import_from(path)
            self.load()
            return keys

    def reset_all(self) -> None:
        """Delete every stored record and fall back to a fresh pet."""
        with self._lock:
            self.saves.reset_all()
            self.load()
            logger.info("All pet data reset")

    # ── Read-only views ─────────────────────────────────────────────────

    def now(self) -> datetime:
        return self._now()

    @property
    def level_progress(self) -> LevelProgress:
        return level_progress(self.record.total_steps, self.record.level)

    @property
    def evolution_stage(self) -> int:
        return evolution_stage(self.record.level)

    def achievement_status(self) -> list[tuple[Achievement, bool]]:
        """Every catalog entry with its unlocked flag, in catalog order."""
        return [(a, a.id in self.achievements) for a in ACHIEVEMENTS]

    def snapshot(self) -> dict:
        """Plain-dict view of the pet for display (CLI status, UI widgets)."""
        progress = self.level_progress
        return {
            "level": self.record.level,
            "stage": self.evolution_stage,
            "stats": self.record.stats,
            "steps_today": self.record.steps_today,
            "total_steps": self.record.total_steps,
            "next_level": progress.next_level,
            "steps_to_next_level": progress.steps_remaining,
            "weekly_steps": list(self.activity.steps),
            "achievements": sorted(self.achievements),
        }

    # ── Internal ────────────────────────────────────────────────────────

    def _unlock_new(self) -> list[Achievement]:
        unlocked = find_new_unlocks(self.record, self.achievements)
        for achievement in unlocked:
            self.achievements.add(achievement.id)
            logger.info("Achievement unlocked: %s", achievement.name)
        return unlocked
