"""Pet state — the single durable record behind the pet.

``PetRecord`` is a Pydantic model holding:

- Five bounded stats (health, happiness, energy, strength, agility), 0–100 each
- The pet level (1–100), always derived from lifetime steps
- ``steps_today`` / ``total_steps`` counters
- ``last_saved`` — write timestamp, only used to detect a new calendar day

On the wire the record uses camelCase keys (``stepsToday``, ``totalSteps``,
``lastSaved``) so stored and exported documents stay compatible with files
written by earlier versions of the widget.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pet.leveling import MAX_LEVEL, MIN_LEVEL, level_for

logger = logging.getLogger(__name__)


# ── Stat ────────────────────────────────────────────────────────────────────


class StatDefinition(BaseModel):
    id: str
    name: str
    description: str
    icon: str


STAT_MIN = 0.0
STAT_MAX = 100.0

STAT_DEFS: list[StatDefinition] = [
    StatDefinition(id="health", name="Health", description="Overall fitness", icon="❤"),
    StatDefinition(id="happiness", name="Happiness", description="Mood", icon="☺"),
    StatDefinition(id="energy", name="Energy", description="Get-up-and-go", icon="⚡"),
    StatDefinition(id="strength", name="Strength", description="Raw power", icon="💪"),
    StatDefinition(id="agility", name="Agility", description="Speed and balance", icon="🏃"),
]

STAT_NAMES: tuple[str, ...] = tuple(sd.id for sd in STAT_DEFS)

STAT_DEFAULTS: dict[str, float] = {
    "health": 50.0,
    "happiness": 50.0,
    "energy": 50.0,
    "strength": 10.0,
    "agility": 10.0,
}


# ── Pet Record ──────────────────────────────────────────────────────────────


class PetRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    # Stats
    health: float = Field(STAT_DEFAULTS["health"], ge=STAT_MIN, le=STAT_MAX)
    happiness: float = Field(STAT_DEFAULTS["happiness"], ge=STAT_MIN, le=STAT_MAX)
    energy: float = Field(STAT_DEFAULTS["energy"], ge=STAT_MIN, le=STAT_MAX)
    strength: float = Field(STAT_DEFAULTS["strength"], ge=STAT_MIN, le=STAT_MAX)
    agility: float = Field(STAT_DEFAULTS["agility"], ge=STAT_MIN, le=STAT_MAX)

    # Progression
    level: int = Field(MIN_LEVEL, ge=MIN_LEVEL, le=MAX_LEVEL)
    steps_today: int = Field(0, ge=0, alias="stepsToday")
    total_steps: int = Field(0, ge=0, alias="totalSteps")

    last_saved: datetime | None = Field(None, alias="lastSaved")

    # ── Helpers ─────────────────────────────────────────────────────────

    @property
    def stats(self) -> dict[str, float]:
        """Current stat values keyed by stat id, in display order."""
        return {name: getattr(self, name) for name in STAT_NAMES}

    @property
    def all_stats_maxed(self) -> bool:
        return all(value >= STAT_MAX for value in self.stats.values())

    def increase(self, stat: str, amount: float) -> float:
        """Raise *stat* by *amount*, capped at 100.  Returns the applied delta.

        Stats never go down, so a negative amount is rejected.
        """
        if stat not in STAT_NAMES:
            raise ValueError(f"Unknown stat '{stat}'")
        if amount < 0:
            raise ValueError(f"Stat increase must be >= 0, got {amount}")
        before = getattr(self, stat)
        after = min(STAT_MAX, before + amount)
        setattr(self, stat, after)
        return after - before

    def to_stored(self) -> dict:
        """Return the camelCase JSON document written to the store."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_stored(cls, data: Any) -> PetRecord:
        """Build a record from a stored document, falling back field by field.

        Anything missing, non-numeric or out of range is replaced by its
        default (stats are clamped rather than discarded).  ``level`` is
        always re-derived from ``totalSteps`` so the two can never disagree.
        """
        if not isinstance(data, dict):
            logger.warning("Stored pet record is not an object (%s); using defaults", type(data).__name__)
            return cls()

        stats = {
            name: _clamp(_as_number(data.get(name)), STAT_DEFAULTS[name])
            for name in STAT_NAMES
        }
        total_steps = _as_count(data.get("totalSteps"))
        steps_today = _as_count(data.get("stepsToday"))
        level = level_for(total_steps)

        stored_level = data.get("level")
        if stored_level is not None and stored_level != level:
            logger.debug("Stored level %r does not match %d total steps; using %d", stored_level, total_steps, level)

        return cls(
            **stats,
            level=level,
            steps_today=steps_today,
            total_steps=total_steps,
            last_saved=parse_timestamp(data.get("lastSaved")),
        )


# ── Field parsing ───────────────────────────────────────────────────────────


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _clamp(value: float | None, default: float) -> float:
    if value is None:
        return default
    return max(STAT_MIN, min(STAT_MAX, value))


def _as_count(value: Any) -> int:
    number = _as_number(value)
    if number is None or number < 0:
        return 0
    return int(number)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed); ``None`` if unusable."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def is_new_day(last_saved: datetime | None, now: datetime) -> bool:
    """True when *last_saved* falls on a different local calendar date than *now*.

    A missing timestamp counts as a new day.  Naive timestamps are taken to
    be local time already.
    """
    if last_saved is None:
        return True
    return _local_date(last_saved) != _local_date(now)


def _local_date(moment: datetime):
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone().date()


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now(tz=timezone.utc).astimezone()
