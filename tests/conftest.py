from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from pet.errors import PersistenceError
from pet.store import MemoryStore


class FakeClock:
    """Settable clock; naive datetimes so calendar dates are unambiguous."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FlakyStore(MemoryStore):
    """Memory store whose writes to ``fail_keys`` raise ``PersistenceError``."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_keys: set[str] = set()
        self.writes: list[str] = []

    def set(self, key: str, value: str) -> None:
        if key in self.fail_keys:
            raise PersistenceError(key)
        self.writes.append(key)
        super().set(key, value)


@pytest.fixture()
def clock() -> FakeClock:
    # Tuesday 10 March 2026, mid-morning
    return FakeClock(datetime(2026, 3, 10, 9, 30))


@pytest.fixture()
def store() -> FlakyStore:
    return FlakyStore()
