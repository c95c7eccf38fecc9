"""Sweat Pets — Textual application entry point.

``SweatPetApp`` owns the one ``PetEngine`` instance for the session.  Screens
reach it through ``self.app.engine``; nothing else holds pet state.

- ``on_mount`` — load the saved pet (applying the daily reset) and push the
  ``PetScreen``.
"""

from __future__ import annotations

from pathlib import Path

from textual.app import App

from pet.config import get_data_dir
from pet.engine import PetEngine
from pet.errors import PersistenceError
from pet.store import JsonFileStore


class SweatPetApp(App):
    """Root Textual application for Sweat Pets."""

    TITLE = "Sweat Pets"
    SUB_TITLE = "Walk. Level up. Evolve."

    def __init__(self, data_dir: str | Path | None = None, engine: PetEngine | None = None) -> None:
        super().__init__()
        self.data_dir = get_data_dir(data_dir)
        self.engine = engine or PetEngine(JsonFileStore(self.data_dir))

    def on_mount(self) -> None:
        """Load the pet and show the main screen."""
        try:
            result = self.engine.load()
        except PersistenceError as exc:
            self.notify(f"{exc}. Starting with unsaved data.", title="Load failed", severity="error")
        else:
            if not result.found:
                self.notify("A new pet has hatched! Log some steps to help it grow.", title="Welcome")

        from ui.screens.pet import PetScreen

        self.push_screen(PetScreen())
