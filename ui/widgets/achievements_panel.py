"""AchievementsPanel widget — sidebar listing the achievement catalog.

Unlocked entries show their icon in colour; locked ones are dimmed with a
padlock.  Entries are provided as ``(Achievement, unlocked)`` pairs from
``engine.achievement_status()``.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text
from textual.widget import Widget

from pet.achievements import Achievement


class AchievementsPanel(Widget):
    DEFAULT_CSS = """
    AchievementsPanel {
        width: 30;
        min-width: 26;
        max-width: 36;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._entries: list[tuple[Achievement, bool]] = []

    def set_achievements(self, entries: list[tuple[Achievement, bool]]) -> None:
        self._entries = list(entries)
        self.refresh()

    def render(self) -> Panel:
        unlocked = sum(1 for _, done in self._entries if done)
        title = f"[bold]Achievements[/] {unlocked}/{len(self._entries)}"

        if not self._entries:
            content = Text("No achievements", style="dim italic", justify="center")
            return Panel(content, title=title, border_style="bright_black", padding=(1, 1))

        combined = Text()
        for i, (achievement, done) in enumerate(self._entries):
            if i > 0:
                combined.append("\n")
            if done:
                combined.append(f"{achievement.icon} ", style="bold")
                combined.append(achievement.name, style="bold yellow")
            else:
                combined.append("🔒 ", style="dim")
                combined.append(achievement.name, style="dim")

        return Panel(combined, title=title, border_style="bright_black", padding=(1, 1))
