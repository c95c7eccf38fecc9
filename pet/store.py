"""Durable key-value stores the pet engine persists into.

A store maps a short key (``sweatPetData`` ...) to a JSON text value, much
like browser local storage.  Two implementations:

``JsonFileStore`` — one ``<key>.json`` file per key inside a data directory.
                    Writes go to a temp file that is fsynced and then
                    atomically swapped in, so a crash never leaves a
                    half-written record behind.
``MemoryStore``   — dict-backed, for tests and throwaway sessions.

Every failure surfaces as ``PersistenceError``; stores never swallow I/O
errors.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Protocol

from pet.errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


# ── File store ──────────────────────────────────────────────────────────────


class JsonFileStore:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(key, "read") from exc
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            # undecodable bytes become U+FFFD; the loader treats the value as damaged JSON
            logger.warning("%s is not valid UTF-8; decoding with replacement characters", path)
            return raw.decode("utf-8", errors="replace")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=str(path.parent)) as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
                tmp_path = Path(handle.name)
            try:
                os.replace(tmp_path, path)
            except OSError:
                tmp_path.unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            raise PersistenceError(key, "write") from exc

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(key, "delete") from exc


# ── Memory store ────────────────────────────────────────────────────────────


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
