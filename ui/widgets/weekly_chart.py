"""WeeklyChart widget — horizontal bar per weekday, Monday first.

Bars are scaled against the busiest day, with a floor of 1,000 steps so a
quiet week does not render as full bars.  Today's row is highlighted.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text
from textual.widget import Widget

from pet.activity import DAY_LABELS, WeeklyActivity

_BAR_WIDTH = 28
_SCALE_FLOOR = 1000


class WeeklyChart(Widget):
    DEFAULT_CSS = """
    WeeklyChart {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._steps: list[int] = [0] * len(DAY_LABELS)
        self._best = 0
        self._today: int | None = None

    def set_data(self, activity: WeeklyActivity, today: int | None = None) -> None:
        self._steps = activity.to_stored()
        self._best = activity.best_day
        self._today = today
        self.refresh()

    def render(self) -> Panel:
        scale = max(self._best, _SCALE_FLOOR)
        text = Text()
        for i, (label, steps) in enumerate(zip(DAY_LABELS, self._steps)):
            if i > 0:
                text.append("\n")
            is_today = i == self._today
            filled = round(steps / scale * _BAR_WIDTH)
            text.append(f"{label} ", style="bold yellow" if is_today else "bold")
            text.append("█" * filled, style="yellow" if is_today else "green")
            text.append("░" * (_BAR_WIDTH - filled), style="bright_black")
            text.append(f" {steps:>7,}", style="" if steps else "dim")

        return Panel(text, title="[bold]This Week[/]", border_style="bright_black", padding=(0, 1))
