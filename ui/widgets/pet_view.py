"""PetView widget — ASCII portrait of the robot pet for its evolution stage."""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text
from textual.widget import Widget

_PORTRAITS: dict[int, str] = {
    1: "\n".join([
        "  [o_o]  ",
        "  /| |\\  ",
        "   d b   ",
    ]),
    2: "\n".join([
        "   _|_   ",
        "  [o_o]  ",
        " /|___|\\ ",
        "   d b   ",
    ]),
    3: "\n".join([
        "   _|_   ",
        "  [O_O]  ",
        " <|===|> ",
        "  _| |_  ",
    ]),
    4: "\n".join([
        "  \\_|_/  ",
        "  [◉_◉]  ",
        " <|###|> ",
        " _/| |\\_ ",
    ]),
    5: "\n".join([
        " ★\\_|_/★ ",
        "  [◉‿◉]  ",
        "<=|###|=>",
        " _/| |\\_ ",
    ]),
}

_STAGE_NAMES = {1: "Sprout", 2: "Runner", 3: "Sprinter", 4: "Athlete", 5: "Champion"}
_STAGE_STYLES = {1: "white", 2: "green", 3: "cyan", 4: "yellow", 5: "bold magenta"}


class PetView(Widget):
    DEFAULT_CSS = """
    PetView {
        width: 100%;
        height: auto;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._stage: int = 1
        self._celebrate: bool = False

    def set_stage(self, stage: int, celebrate: bool = False) -> None:
        self._stage = stage if stage in _PORTRAITS else 1
        self._celebrate = celebrate
        self.refresh()

    def render(self) -> Panel:
        art = Text(_PORTRAITS[self._stage], style=_STAGE_STYLES[self._stage], justify="center")
        if self._celebrate:
            art.append("\n✨ Level up! ✨", style="bold yellow")
        title = f"[bold]{_STAGE_NAMES[self._stage]}[/]"
        return Panel(art, title=title, border_style="bright_black", padding=(0, 2))
