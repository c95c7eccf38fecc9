"""Step intake — turns a batch of logged steps into stat and counter changes.

Every stat gains a fixed fraction of the raw step count, capped per intake
so a single huge entry cannot max the pet out in one go:

  stat        per step   cap
  health       0.01       20
  happiness    0.005      15
  energy       0.003      12
  strength     0.001      10
  agility      0.001      10

``apply_intake`` only mutates the record; persistence is the engine's job.
"""

from __future__ import annotations

from pydantic import BaseModel

from pet.leveling import level_for
from pet.state import PetRecord

# (coefficient, cap) per stat
INTAKE_RATES: dict[str, tuple[float, float]] = {
    "health": (0.01, 20),
    "happiness": (0.005, 15),
    "energy": (0.003, 12),
    "strength": (0.001, 10),
    "agility": (0.001, 10),
}


# ── Intake Result ───────────────────────────────────────────────────────────


class IntakeResult(BaseModel):
    """Outcome of one ``add_steps`` call, handed to the UI layer."""

    steps: int
    stat_changes: dict[str, float] = {}
    steps_today: int = 0
    total_steps: int = 0
    old_level: int = 1
    new_level: int = 1
    new_achievements: list[str] = []

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level

    @property
    def levels_gained(self) -> int:
        return self.new_level - self.old_level


# ── Algorithm ───────────────────────────────────────────────────────────────


def stat_deltas(steps: int) -> dict[str, float]:
    """Per-stat deltas for *steps*, limited by the per-intake caps but not by the 100 ceiling."""
    return {stat: min(cap, steps * rate) for stat, (rate, cap) in INTAKE_RATES.items()}


def apply_intake(record: PetRecord, steps: int) -> IntakeResult | None:
    """Apply *steps* to *record* in place.

    Returns ``None`` (and leaves the record untouched) when ``steps <= 0``.
    """
    if steps <= 0:
        return None

    record.steps_today += steps
    record.total_steps += steps

    changes = {
        stat: record.increase(stat, delta)
        for stat, delta in stat_deltas(steps).items()
    }

    old_level = record.level
    new_level = level_for(record.total_steps)
    # total_steps only grows, so this never lowers the level
    if new_level > old_level:
        record.level = new_level

    return IntakeResult(
        steps=steps,
        stat_changes=changes,
        steps_today=record.steps_today,
        total_steps=record.total_steps,
        old_level=old_level,
        new_level=record.level,
    )


def parse_steps(text: str) -> int:
    """Parse user-entered steps; anything that is not a whole number gives 0.

    Thousands separators are accepted, so ``"10,000"`` and ``"10_000"`` both
    parse as 10000.
    """
    cleaned = text.strip().replace(",", "").replace("_", "")
    if not cleaned:
        return 0
    try:
        return int(cleaned)
    except ValueError:
        return 0
