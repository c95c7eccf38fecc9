"""Exceptions raised by the pet engine.

Only two failures ever reach the caller:

``PersistenceError``   — the durable store could not be read, written or
                         cleared.  In-memory state is left intact so the
                         caller can retry the save.
``ImportDocumentError`` — an import document was rejected before anything
                         was written.

Damaged records already in the store are *not* errors: they are repaired
field by field on load and only logged.
"""

from __future__ import annotations


class PetError(Exception):
    """Base class for all engine errors."""


class PersistenceError(PetError):
    def __init__(self, key: str, action: str = "write") -> None:
        super().__init__(f"Could not {action} '{key}' in the pet store")
        self.key = key
        self.action = action


class ImportDocumentError(PetError):
    """The import document is malformed.  ``problems`` has one entry per bad section."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("Import rejected: " + "; ".join(self.problems))
