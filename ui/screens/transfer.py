"""Export / import overlay — asks for the JSON file path to write or read.

Dismisses with the entered path, or ``None`` when cancelled.  The actual
export or import is done by the caller so all error reporting stays in
``PetScreen``.
"""

from __future__ import annotations

from pathlib import Path

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class TransferScreen(ModalScreen[Path | None]):
    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    DEFAULT_CSS = """
    TransferScreen {
        align: center middle;
        background: $background 60%;
    }
    #transfer-box {
        width: 70;
        height: auto;
        padding: 1 2;
        border: heavy $accent;
        background: $surface;
    }
    #transfer-title {
        text-align: center;
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    #transfer-hint {
        color: $text-muted;
        margin-bottom: 1;
    }
    #transfer-buttons {
        height: auto;
        align-horizontal: center;
        margin-top: 1;
    }
    #transfer-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(self, mode: str, default_path: Path) -> None:
        super().__init__()
        self._mode = mode  # "export" | "import"
        self._default_path = default_path

    def compose(self) -> ComposeResult:
        is_export = self._mode == "export"
        with Vertical(id="transfer-box"):
            yield Static("◆  Export Pet Data  ◆" if is_export else "◆  Import Pet Data  ◆", id="transfer-title")
            yield Static(
                "Writes your pet, weekly activity and achievements to a JSON file."
                if is_export
                else "Replaces the saved data with the sections found in the file.",
                id="transfer-hint",
            )
            yield Input(value=str(self._default_path), id="transfer-path")
            with Horizontal(id="transfer-buttons"):
                yield Button("Export" if is_export else "Import", id="btn-go", variant="primary")
                yield Button("Cancel", id="btn-cancel", variant="default")

    def on_mount(self) -> None:
        self.query_one("#transfer-path", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._finish()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-go":
            self._finish()
        else:
            self.action_cancel()

    def _finish(self) -> None:
        value = self.query_one("#transfer-path", Input).value.strip()
        self.dismiss(Path(value).expanduser() if value else None)

    def action_cancel(self) -> None:
        self.dismiss(None)
