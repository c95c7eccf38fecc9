"""Save/load management for the pet.

``SaveManager`` keeps three independent records in a key-value store:

  sweatPetData       the ``PetRecord`` (stats, level, counters, lastSaved)
  sweatActivityData  weekly step totals, Monday first
  sweatAchievements  sorted list of unlocked achievement ids

Every value is JSON text.  Loading is forgiving (damaged records are repaired
or defaulted field by field); importing is strict (the whole document is
validated before the first write, and a failed write rolls back the ones
before it).

Public API
----------
save_pet(record)                  -> None
load(resave=True)                 -> LoadResult
load_activity() / save_activity() -> WeeklyActivity / None
load_achievements() / save_achievements() -> set[str] / None
export_all()                      -> dict
export_to(path)                   -> Path
import_all(doc)                   -> list[str]   (keys written)
import_from(path)                 -> list[str]
reset_all()                       -> None
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any, NamedTuple, Union

import json_repair
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from pet.activity import LegacyActivity, WeeklyActivity, WeeklySteps
from pet.achievements import parse_unlocked
from pet.errors import ImportDocumentError, PersistenceError
from pet.state import PetRecord, is_new_day, local_now
from pet.store import KeyValueStore

logger = logging.getLogger(__name__)

PET_KEY = "sweatPetData"
ACTIVITY_KEY = "sweatActivityData"
ACHIEVEMENTS_KEY = "sweatAchievements"
ALL_KEYS = (PET_KEY, ACTIVITY_KEY, ACHIEVEMENTS_KEY)

DEFAULT_EXPORT_NAME = "sweat_pets_data.json"


# ── Load Result ─────────────────────────────────────────────────────────────


class LoadResult(NamedTuple):
    record: PetRecord
    found: bool         # False when no saved record existed (defaults returned)
    rolled_over: bool   # True when stepsToday was reset for a new day


# ── Import validation ───────────────────────────────────────────────────────


class _PetSection(BaseModel):
    """Type check for an imported pet record; every field is optional."""

    model_config = ConfigDict(extra="allow")

    health: float | None = None
    happiness: float | None = None
    energy: float | None = None
    strength: float | None = None
    agility: float | None = None
    level: int | None = Field(None, ge=1, le=100)
    stepsToday: int | None = Field(None, ge=0)
    totalSteps: int | None = Field(None, ge=0)
    lastSaved: str | None = None


class _Section(NamedTuple):
    key: str
    names: tuple[str, ...]   # canonical name first, then accepted aliases
    adapter: TypeAdapter


_SECTIONS: tuple[_Section, ...] = (
    _Section(PET_KEY, ("petData", "stats"), TypeAdapter(_PetSection)),
    _Section(ACTIVITY_KEY, ("activityData", "weeklyData"), TypeAdapter(Union[WeeklySteps, LegacyActivity])),
    _Section(ACHIEVEMENTS_KEY, ("achievementsData", "achievements"), TypeAdapter(Union[list[str], dict[str, bool]])),
)


# ── SaveManager ─────────────────────────────────────────────────────────────


class SaveManager:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.store = store
        self._now = clock

    # ── Pet record ───────────────────────────────────────────────────────

    def save_pet(self, record: PetRecord) -> None:
        """Overwrite the stored pet record, then stamp ``record.last_saved``.

        The in-memory timestamp only moves once the write has succeeded.
        """
        stamp = self._now()
        stored = record.model_copy(update={"last_saved": stamp}).to_stored()
        self.store.set(PET_KEY, _encode(stored))
        record.last_saved = stamp

    def load(self, resave: bool = True) -> LoadResult:
        """Load the pet record, applying the daily ``stepsToday`` reset.

        When a record is found it is written straight back (with a fresh
        ``lastSaved``) so the day rollover only ever happens once.  Pass
        ``resave=False`` to let the caller do that write itself.
        """
        data = self._read_json(PET_KEY)
        if data is None:
            return LoadResult(PetRecord(), found=False, rolled_over=False)

        record = PetRecord.from_stored(data)
        rolled_over = is_new_day(record.last_saved, self._now())
        if rolled_over:
            logger.info("New day since %s; resetting steps today (%d)", record.last_saved, record.steps_today)
            record.steps_today = 0

        if resave:
            self.save_pet(record)
        return LoadResult(record, found=True, rolled_over=rolled_over)

    # ── Sibling records ──────────────────────────────────────────────────

    def load_activity(self) -> WeeklyActivity:
        return WeeklyActivity.from_stored(self._read_json(ACTIVITY_KEY))

    def save_activity(self, activity: WeeklyActivity) -> None:
        self.store.set(ACTIVITY_KEY, _encode(activity.to_stored()))

    def load_achievements(self) -> set[str]:
        return parse_unlocked(self._read_json(ACHIEVEMENTS_KEY))

    def save_achievements(self, unlocked: set[str]) -> None:
        self.store.set(ACHIEVEMENTS_KEY, _encode(sorted(unlocked)))

    # ── Export / import ──────────────────────────────────────────────────

    def export_all(self) -> dict:
        """Bundle the three stored records (``None`` where absent) for download."""
        return {
            "petData": self._read_json(PET_KEY),
            "activityData": self._read_json(ACTIVITY_KEY),
            "achievementsData": self._read_json(ACHIEVEMENTS_KEY),
            "exportDate": self._now().isoformat(),
        }

    def export_to(self, path: str | Path) -> Path:
        """Write ``export_all()`` to *path* as indented JSON and return the path."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_encode(self.export_all()), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(str(path), "export to") from exc
        return path

    def import_all(self, doc: dict | str | bytes) -> list[str]:
        """Replace stored records with the sections present in *doc*.

        Accepts a parsed dict or raw JSON text.  All sections are validated
        first; if any is malformed ``ImportDocumentError`` is raised and the
        store is untouched.  Sections missing from *doc* are left alone.
        Returns the keys that were written.
        """
        data = _coerce_document(doc)

        pending: dict[str, Any] = {}
        problems: list[str] = []
        for section in _SECTIONS:
            name, value = _pick(data, section.names)
            if value is None:
                continue
            try:
                section.adapter.validate_python(value)
            except ValidationError as exc:
                problems.append(f"{name}: {_first_error(exc)}")
            else:
                pending[section.key] = value

        if problems:
            raise ImportDocumentError(problems)
        if not pending:
            raise ImportDocumentError(["document contains no pet, activity or achievement data"])

        self._write_all(pending)
        logger.info("Imported %s", ", ".join(pending))
        return list(pending)

    def import_from(self, path: str | Path) -> list[str]:
        path = Path(path)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise PersistenceError(str(path), "read") from exc
        return self.import_all(raw)

    def reset_all(self) -> None:
        """Delete every stored record (no-op for keys already missing)."""
        for key in ALL_KEYS:
            self.store.delete(key)

    # ── Private helpers ──────────────────────────────────────────────────

    def _read_json(self, key: str) -> Any:
        """Parse the stored value for *key*, repairing damaged JSON if possible."""
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored '%s' is not valid JSON; attempting repair", key)
        repaired = json_repair.loads(raw)
        if repaired in ("", None):
            logger.warning("Could not repair stored '%s'; ignoring it", key)
            return None
        return repaired

    def _write_all(self, sections: dict[str, Any]) -> None:
        """Write every section or, on failure, put back what was there before."""
        previous = {key: self.store.get(key) for key in sections}
        written: list[str] = []
        try:
            for key, value in sections.items():
                self.store.set(key, _encode(value))
                written.append(key)
        except PersistenceError:
            logger.error("Import failed after writing %s; rolling back", written or "nothing")
            self._restore(previous, written)
            raise

    def _restore(self, previous: dict[str, str | None], keys: list[str]) -> None:
        for key in keys:
            try:
                if previous[key] is None:
                    self.store.delete(key)
                else:
                    self.store.set(key, previous[key])
            except PersistenceError:
                logger.exception("Rollback of '%s' failed", key)


# ── JSON helpers ────────────────────────────────────────────────────────────


def _encode(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=_json_default)


def _json_default(obj):
    """Fallback serialiser for types that ``json.dumps`` can't handle natively."""
    if isinstance(obj, set):
        return sorted(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serialisable")


def _coerce_document(doc: dict | str | bytes) -> dict:
    if isinstance(doc, bytes):
        try:
            doc = doc.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ImportDocumentError([f"not valid UTF-8 (bad byte at position {exc.start})"]) from exc
    if isinstance(doc, str):
        try:
            doc = json.loads(doc)
        except json.JSONDecodeError as exc:
            raise ImportDocumentError([f"not valid JSON ({exc.msg} at line {exc.lineno})"]) from exc
    if not isinstance(doc, dict):
        raise ImportDocumentError([f"expected a JSON object, got {type(doc).__name__}"])
    return doc


def _pick(data: dict, names: tuple[str, ...]) -> tuple[str, Any]:
    """Return the first of *names* present in *data* with a non-null value."""
    for name in names:
        if data.get(name) is not None:
            return name, data[name]
    return names[0], None


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    where = ".".join(str(part) for part in err.get("loc", ()))
    return f"{where} {err['msg']}".strip() if where else err["msg"]
