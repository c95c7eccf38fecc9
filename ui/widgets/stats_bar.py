"""StatsBar widget — displays the five pet stats as icon + bar + value columns.

Each stat renders as:  ``<icon> <name> ████░░░░ <value>``

After an intake or care action the applied deltas are shown in green next
to each value until the next refresh.
"""

from __future__ import annotations

from rich.columns import Columns
from rich.text import Text
from textual.widget import Widget

from pet.state import STAT_MAX, StatDefinition

# chars per stat cell: icon(2) + name(10) + space(1) + bar(10) + space(1) + val(3) = 27
_BAR_WIDTH = 10
_NAME_MAX = 10


class StatsBar(Widget):
    DEFAULT_CSS = """
    StatsBar {
        height: auto;
        min-height: 3;
        max-height: 6;
        padding: 1 2;
        border-bottom: solid $primary-darken-2;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._stats: dict[str, float] = {}
        self._stat_defs: list[StatDefinition] = []
        self._deltas: dict[str, float] = {}

    def set_stats(
        self,
        stats: dict[str, float],
        stat_defs: list[StatDefinition],
        deltas: dict[str, float] | None = None,
    ) -> None:
        """Update the stat values (and optional last-change deltas), then refresh."""
        self._stats = dict(stats)
        self._stat_defs = list(stat_defs)
        self._deltas = dict(deltas or {})
        self.refresh()

    def render(self) -> Columns | Text:
        if not self._stats:
            return Text("No pet loaded", style="dim")

        items = [
            self._render_stat(sd.icon, sd.name, self._stats.get(sd.id, 0.0), self._deltas.get(sd.id, 0.0))
            for sd in self._stat_defs
        ]
        return Columns(items, equal=True, expand=True, padding=(0, 2))

    @staticmethod
    def _render_stat(icon: str, name: str, val: float, delta: float = 0.0) -> Text:
        name_display = name[:_NAME_MAX].ljust(_NAME_MAX)

        filled = round(val / STAT_MAX * _BAR_WIDTH)
        filled = max(0, min(_BAR_WIDTH, filled))

        text = Text(no_wrap=True)
        text.append(f"{icon} ", style="bold")
        text.append(f"{name_display} ", style="bold")
        text.append("█" * filled, style=_val_color(val))
        text.append("░" * (_BAR_WIDTH - filled), style="bright_black")
        text.append(f" {val:>3.0f}", style=_val_style(val))

        if delta > 0:
            text.append(f"(+{delta:g})", style="green")

        return text


def _val_color(val: float) -> str:
    if val >= 100:
        return "bold magenta"
    if val < 25:
        return "red"
    if val < 50:
        return "yellow"
    return "green"


def _val_style(val: float) -> str:
    if val >= 100:
        return "bold magenta"
    if val < 25:
        return "bold red"
    return ""
