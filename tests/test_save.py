"""Tests for pet.save — SaveManager load, rollover, export, import and reset."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pet.activity import WeeklyActivity
from pet.errors import ImportDocumentError, PersistenceError
from pet.save import ACHIEVEMENTS_KEY, ACTIVITY_KEY, PET_KEY, SaveManager
from pet.state import STAT_DEFAULTS, PetRecord
from pet.store import JsonFileStore


@pytest.fixture()
def saves(store, clock) -> SaveManager:
    return SaveManager(store, clock=clock)


def _seed(saves: SaveManager) -> None:
    """Store one of each record, as a player would after a session."""
    saves.save_pet(PetRecord(health=72, steps_today=1500, total_steps=4200, level=2))
    saves.save_activity(WeeklyActivity(steps=[100, 1500, 0, 0, 0, 0, 2600]))
    saves.save_achievements({"steps-1k"})


# ── Load ──────────────────────────────────────────────────────────────────────


class TestLoad:
    def test_nothing_stored(self, saves: SaveManager, store) -> None:
        result = saves.load()
        assert not result.found
        assert result.record == PetRecord()
        assert store.data == {}

    def test_same_day_keeps_steps_today(self, saves: SaveManager, clock) -> None:
        saves.save_pet(PetRecord(steps_today=800, total_steps=800))
        clock.advance(hours=5)

        result = saves.load()
        assert result.found
        assert not result.rolled_over
        assert result.record.steps_today == 800

    def test_new_day_resets_steps_today(self, saves: SaveManager, store, clock) -> None:
        saves.save_pet(PetRecord(steps_today=800, total_steps=800))
        clock.advance(days=1)

        result = saves.load()
        assert result.rolled_over
        assert result.record.steps_today == 0
        assert result.record.total_steps == 800
        assert json.loads(store.data[PET_KEY])["stepsToday"] == 0

    def test_rollover_happens_once(self, saves: SaveManager, clock) -> None:
        saves.save_pet(PetRecord(steps_today=800, total_steps=800))
        clock.advance(days=1)
        saves.load()
        clock.advance(hours=1)

        result = saves.load()
        assert not result.rolled_over

    def test_missing_last_saved_counts_as_new_day(self, saves: SaveManager, store) -> None:
        store.set(PET_KEY, json.dumps({"stepsToday": 300, "totalSteps": 300}))
        assert saves.load().record.steps_today == 0

    def test_load_stamps_last_saved(self, saves: SaveManager, store, clock) -> None:
        store.set(PET_KEY, json.dumps({"totalSteps": 10}))
        saves.load()
        assert json.loads(store.data[PET_KEY])["lastSaved"] == clock().isoformat()

    def test_load_without_resave_writes_nothing(self, saves: SaveManager, store) -> None:
        store.set(PET_KEY, json.dumps({"totalSteps": 10}))
        store.writes.clear()
        saves.load(resave=False)
        assert store.writes == []

    def test_damaged_json_is_repaired(self, saves: SaveManager, store) -> None:
        store.set(PET_KEY, '{"health": 70, "totalSteps": 1200')
        record = saves.load().record
        assert record.health == 70
        assert record.total_steps == 1200

    def test_non_utf8_file_is_loaded(self, tmp_path: Path, clock) -> None:
        store = JsonFileStore(tmp_path)
        store.path_for(PET_KEY).write_bytes(b'{"health": 70, "totalSteps": 1200, "name": "\xff\xfe"}')
        record = SaveManager(store, clock=clock).load().record
        assert record.health == 70
        assert record.total_steps == 1200

    def test_unusable_record_gives_defaults(self, saves: SaveManager, store) -> None:
        store.set(PET_KEY, "[1, 2, 3]")
        assert saves.load().record.stats == STAT_DEFAULTS

    def test_save_failure_propagates(self, saves: SaveManager, store) -> None:
        store.fail_keys.add(PET_KEY)
        with pytest.raises(PersistenceError):
            saves.save_pet(PetRecord())

    def test_failed_save_keeps_previous_timestamp(self, saves: SaveManager, store, clock) -> None:
        record = PetRecord()
        saves.save_pet(record)
        first = record.last_saved
        assert first == clock()

        clock.advance(hours=2)
        store.fail_keys.add(PET_KEY)
        with pytest.raises(PersistenceError):
            saves.save_pet(record)
        assert record.last_saved == first


# ── Sibling records ───────────────────────────────────────────────────────────


class TestSiblingRecords:
    def test_activity_roundtrip(self, saves: SaveManager) -> None:
        saves.save_activity(WeeklyActivity(steps=[1, 2, 3, 4, 5, 6, 7]))
        assert saves.load_activity().steps == [1, 2, 3, 4, 5, 6, 7]

    def test_activity_defaults_to_zeros(self, saves: SaveManager) -> None:
        assert saves.load_activity().steps == [0] * 7

    def test_achievements_stored_sorted(self, saves: SaveManager, store) -> None:
        saves.save_achievements({"steps-10k", "level-10", "steps-1k"})
        assert json.loads(store.data[ACHIEVEMENTS_KEY]) == ["level-10", "steps-10k", "steps-1k"]
        assert saves.load_achievements() == {"level-10", "steps-10k", "steps-1k"}

    def test_legacy_achievement_mapping(self, saves: SaveManager, store) -> None:
        store.set(ACHIEVEMENTS_KEY, json.dumps({"steps-1k": True}))
        assert saves.load_achievements() == {"steps-1k"}


# ── Export ────────────────────────────────────────────────────────────────────


class TestExport:
    def test_sections(self, saves: SaveManager, clock) -> None:
        _seed(saves)
        doc = saves.export_all()
        assert set(doc) == {"petData", "activityData", "achievementsData", "exportDate"}
        assert doc["petData"]["health"] == 72
        assert doc["activityData"] == [100, 1500, 0, 0, 0, 0, 2600]
        assert doc["achievementsData"] == ["steps-1k"]
        assert doc["exportDate"] == clock().isoformat()

    def test_absent_sections_are_null(self, saves: SaveManager) -> None:
        doc = saves.export_all()
        assert doc["petData"] is None
        assert doc["activityData"] is None
        assert doc["achievementsData"] is None

    def test_export_to_file(self, saves: SaveManager, tmp_path: Path) -> None:
        _seed(saves)
        path = saves.export_to(tmp_path / "backup" / "sweat_pets_data.json")
        assert json.loads(path.read_text(encoding="utf-8"))["petData"]["totalSteps"] == 4200

    def test_export_to_unwritable_path(self, saves: SaveManager, tmp_path: Path) -> None:
        target = tmp_path / "taken"
        target.mkdir()
        with pytest.raises(PersistenceError):
            saves.export_to(target)


# ── Import ────────────────────────────────────────────────────────────────────


class TestImport:
    def test_roundtrip_restores_store_exactly(self, saves: SaveManager, store) -> None:
        _seed(saves)
        before = dict(store.data)
        doc = saves.export_all()

        saves.reset_all()
        keys = saves.import_all(doc)

        assert keys == [PET_KEY, ACTIVITY_KEY, ACHIEVEMENTS_KEY]
        assert store.data == before

    def test_accepts_json_text(self, saves: SaveManager) -> None:
        saves.import_all('{"petData": {"health": 90, "totalSteps": 2828}}')
        record = saves.load().record
        assert record.health == 90
        assert record.level == 2

    def test_alias_section_names(self, saves: SaveManager) -> None:
        saves.import_all({
            "stats": {"energy": 80},
            "weeklyData": [0, 0, 0, 0, 0, 0, 9],
            "achievements": {"steps-1k": True},
        })
        assert saves.load().record.energy == 80
        assert saves.load_activity().steps[6] == 9
        assert saves.load_achievements() == {"steps-1k"}

    def test_legacy_activity_wrapper(self, saves: SaveManager) -> None:
        saves.import_all({"activityData": {"weeklySteps": [1, 1, 1, 1, 1, 1, 1]}})
        assert saves.load_activity().steps == [1] * 7

    def test_missing_sections_left_alone(self, saves: SaveManager) -> None:
        _seed(saves)
        saves.import_all({"achievementsData": ["steps-1k", "steps-10k"]})
        assert saves.load().record.health == 72
        assert saves.load_achievements() == {"steps-1k", "steps-10k"}

    @pytest.mark.parametrize("doc", ["not json", "[1, 2]", {}, {"exportDate": "2026-03-10"}])
    def test_unusable_documents_rejected(self, saves: SaveManager, store, doc) -> None:
        with pytest.raises(ImportDocumentError):
            saves.import_all(doc)
        assert store.data == {}

    def test_malformed_section_rejects_everything(self, saves: SaveManager, store) -> None:
        _seed(saves)
        before = dict(store.data)
        with pytest.raises(ImportDocumentError) as excinfo:
            saves.import_all({
                "petData": {"health": "very healthy"},
                "activityData": [1, 2, 3, 4, 5, 6],
                "achievementsData": ["steps-1k"],
            })
        assert len(excinfo.value.problems) == 2
        assert excinfo.value.problems[0].startswith("petData")
        assert excinfo.value.problems[1].startswith("activityData")
        assert store.data == before

    def test_failed_write_rolls_back(self, saves: SaveManager, store) -> None:
        _seed(saves)
        before = dict(store.data)
        store.fail_keys.add(ACHIEVEMENTS_KEY)

        with pytest.raises(PersistenceError):
            saves.import_all({
                "petData": {"health": 99},
                "activityData": [5, 5, 5, 5, 5, 5, 5],
                "achievementsData": ["level-10"],
            })
        assert store.data == before

    def test_rollback_removes_new_keys(self, saves: SaveManager, store) -> None:
        store.fail_keys.add(ACTIVITY_KEY)
        with pytest.raises(PersistenceError):
            saves.import_all({"petData": {"health": 99}, "activityData": [0] * 7})
        assert store.data == {}

    def test_import_from_file(self, saves: SaveManager, tmp_path: Path) -> None:
        path = tmp_path / "in.json"
        path.write_text(json.dumps({"petData": {"strength": 44}}), encoding="utf-8")
        assert saves.import_from(path) == [PET_KEY]
        assert saves.load().record.strength == 44

    def test_non_utf8_document_rejected(self, saves: SaveManager, store) -> None:
        with pytest.raises(ImportDocumentError) as excinfo:
            saves.import_all(b'{"petData": {"health": 90}, "note": "\xff"}')
        assert "UTF-8" in excinfo.value.problems[0]
        assert store.data == {}

    def test_non_utf8_file_rejected(self, saves: SaveManager, store, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_bytes(b"\xff\xfe{}")
        with pytest.raises(ImportDocumentError):
            saves.import_from(path)
        assert store.data == {}

    def test_byte_order_mark_accepted(self, saves: SaveManager, tmp_path: Path) -> None:
        path = tmp_path / "bom.json"
        path.write_bytes(b'\xef\xbb\xbf{"petData": {"agility": 33}}')
        assert saves.import_from(path) == [PET_KEY]
        assert saves.load().record.agility == 33

    def test_import_from_missing_file(self, saves: SaveManager, tmp_path: Path) -> None:
        with pytest.raises(PersistenceError):
            saves.import_from(tmp_path / "nope.json")


# ── Reset ─────────────────────────────────────────────────────────────────────


class TestReset:
    def test_reset_clears_every_key(self, saves: SaveManager, store) -> None:
        _seed(saves)
        saves.reset_all()
        assert store.data == {}
        assert saves.load().record == PetRecord()

    def test_reset_is_idempotent(self, saves: SaveManager, store) -> None:
        saves.reset_all()
        saves.reset_all()
        assert store.data == {}

    def test_file_store_reset(self, tmp_path: Path, clock) -> None:
        saves = SaveManager(JsonFileStore(tmp_path), clock=clock)
        _seed(saves)
        saves.reset_all()
        assert list(tmp_path.iterdir()) == []
