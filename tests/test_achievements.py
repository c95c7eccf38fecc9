"""Tests for pet.achievements — catalog, unlock checks and stored forms."""

from __future__ import annotations

import logging

import pytest

from pet.achievements import ACHIEVEMENT_IDS, find_new_unlocks, get_achievement, parse_unlocked
from pet.state import STAT_NAMES, PetRecord


def _ids(achievements) -> list[str]:
    return [a.id for a in achievements]


class TestCatalog:
    def test_ids(self) -> None:
        assert ACHIEVEMENT_IDS == {
            "steps-1k", "steps-10k", "steps-100k",
            "level-10", "level-25", "level-50", "level-75", "level-100",
            "all-stats-100",
        }

    def test_lookup(self) -> None:
        assert get_achievement("steps-1k").name == "1,000 Steps"
        assert get_achievement("missing") is None


class TestFindNewUnlocks:
    def test_fresh_pet_has_none(self) -> None:
        assert find_new_unlocks(PetRecord(), set()) == []

    def test_step_milestone(self) -> None:
        assert _ids(find_new_unlocks(PetRecord(total_steps=1000), set())) == ["steps-1k"]

    def test_level_milestone(self) -> None:
        record = PetRecord(total_steps=31622, level=10)
        assert _ids(find_new_unlocks(record, set())) == ["steps-1k", "steps-10k", "level-10"]

    def test_already_unlocked_skipped(self) -> None:
        record = PetRecord(total_steps=31622, level=10)
        assert _ids(find_new_unlocks(record, {"steps-1k", "steps-10k"})) == ["level-10"]

    def test_all_stats_maxed(self) -> None:
        record = PetRecord(**{name: 100 for name in STAT_NAMES})
        assert _ids(find_new_unlocks(record, set())) == ["all-stats-100"]


class TestParseUnlocked:
    def test_list(self) -> None:
        assert parse_unlocked(["steps-1k", "level-10", 5]) == {"steps-1k", "level-10"}

    def test_legacy_mapping(self) -> None:
        assert parse_unlocked({"steps-1k": True, "level-10": False}) == {"steps-1k"}

    def test_garbage(self) -> None:
        assert parse_unlocked(None) == set()
        assert parse_unlocked("steps-1k") == set()

    def test_unknown_ids_kept(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="pet.achievements"):
            assert parse_unlocked(["steps-1k", "future-badge"]) == {"steps-1k", "future-badge"}
        assert "future-badge" in caplog.text
        assert "steps-1k" not in caplog.text
