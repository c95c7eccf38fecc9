"""LevelProgress widget — level, evolution stage and progress to the next level.

Renders as:  ``Lv 3  Stage 1  ██████░░░░░░░░  2,104 / 2,368 steps to level 4``
plus a second line with today's and lifetime step totals.
"""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget

from pet.leveling import LevelProgress

_BAR_WIDTH = 24


class LevelProgressBar(Widget):
    DEFAULT_CSS = """
    LevelProgressBar {
        height: 3;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._progress: LevelProgress | None = None
        self._stage: int = 1
        self._steps_today: int = 0
        self._total_steps: int = 0

    def set_data(
        self,
        progress: LevelProgress,
        stage: int,
        steps_today: int,
        total_steps: int,
    ) -> None:
        self._progress = progress
        self._stage = stage
        self._steps_today = steps_today
        self._total_steps = total_steps
        self.refresh()

    def render(self) -> Text:
        text = Text()
        progress = self._progress
        if progress is None:
            return Text("—", style="dim")

        text.append(f"Lv {progress.level}", style="bold cyan")
        text.append(f"  Stage {self._stage}", style="dim")
        text.append("  ")

        filled = round(progress.percent / 100 * _BAR_WIDTH)
        text.append("█" * filled, style="cyan")
        text.append("░" * (_BAR_WIDTH - filled), style="bright_black")
        text.append("  ")

        if progress.is_max:
            text.append("Max level reached!", style="bold magenta")
        else:
            text.append(
                f"{progress.steps_into_level:,} / {progress.steps_needed:,} steps to level {progress.next_level}",
                style="",
            )

        text.append("\n")
        text.append(f"Today {self._steps_today:,}", style="bold")
        text.append("  ·  ", style="dim")
        text.append(f"Total {self._total_steps:,}", style="dim")
        return text
