from __future__ import annotations

from pathlib import Path

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Input

from pet.achievements import get_achievement
from pet.activity import day_index
from pet.engine import CARE_ACTIONS
from pet.errors import ImportDocumentError, PersistenceError
from pet.intake import IntakeResult, parse_steps
from pet.save import DEFAULT_EXPORT_NAME
from pet.state import STAT_DEFS
from ui.widgets.achievements_panel import AchievementsPanel
from ui.widgets.level_progress import LevelProgressBar
from ui.widgets.pet_view import PetView
from ui.widgets.stats_bar import StatsBar
from ui.widgets.weekly_chart import WeeklyChart

_CARE_LABELS = {
    "feed": "🍎 Feed",
    "play": "🎾 Play",
    "rest": "💤 Rest",
    "train": "🏋 Train",
    "exercise": "🤸 Exercise",
}


class PetScreen(Screen):
    BINDINGS = [
        Binding("ctrl+e", "export", "Export", show=True),
        Binding("ctrl+o", "import", "Import", show=True),
        Binding("ctrl+s", "retry_save", "Save", show=True),
        Binding("ctrl+r", "reset_today", "Reset Today", show=True),
        Binding("ctrl+x", "reset_all", "Reset All", show=True),
        Binding("ctrl+q", "quit_game", "Quit", show=True),
    ]

    DEFAULT_CSS = """
    PetScreen {
        layout: vertical;
    }
    #pet-body {
        height: 1fr;
        layout: horizontal;
    }
    #pet-body-left {
        width: 1fr;
        padding: 0 1;
    }
    #pet-body-right {
        width: auto;
        border-left: solid $primary;
    }
    #steps-row {
        height: auto;
        margin: 1 0 0 0;
    }
    #steps-input {
        width: 1fr;
    }
    #care-row {
        height: auto;
    }
    #care-row Button {
        min-width: 12;
        margin-right: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield StatsBar(id="stats-bar")
        with Horizontal(id="pet-body"):
            with Vertical(id="pet-body-left"):
                yield PetView(id="pet-view")
                yield LevelProgressBar(id="level-progress")
                with Horizontal(id="steps-row"):
                    yield Input(placeholder="Steps walked...", id="steps-input")
                    yield Button("👣 Add Steps", id="add-steps-btn", variant="primary")
                with Horizontal(id="care-row"):
                    for action in CARE_ACTIONS:
                        yield Button(_CARE_LABELS[action], id=f"care-{action}")
                yield WeeklyChart(id="weekly-chart")
            with Vertical(id="pet-body-right"):
                yield AchievementsPanel(id="achievements-panel")
        yield Footer()

    def on_mount(self) -> None:
        self._update_all_widgets()
        self.query_one("#steps-input", Input).focus()

    # ── Intake ──────────────────────────────────────────────────────────

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "steps-input":
            self._submit_steps()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        btn_id = event.button.id or ""
        if btn_id == "add-steps-btn":
            self._submit_steps()
        elif btn_id.startswith("care-"):
            self._care(btn_id.removeprefix("care-"))

    def _submit_steps(self) -> None:
        steps_input = self.query_one("#steps-input", Input)
        steps = parse_steps(steps_input.value)
        if steps <= 0:
            self.notify("Enter a positive number of steps.", severity="warning")
            return

        engine = self.app.engine
        try:
            result = engine.add_steps(steps)
        except PersistenceError as exc:
            # the steps already count in memory; keep Enter from adding them twice
            steps_input.value = ""
            self._report_save_failure(exc)
            return

        steps_input.value = ""
        if result is not None:
            self._announce(result)

    def _announce(self, result: IntakeResult) -> None:
        if result.leveled_up:
            if result.levels_gained > 1:
                message = f"Wow! Your robot evolved {result.levels_gained} levels to level {result.new_level}!"
            else:
                message = f"Your robot evolved to level {result.new_level}!"
            self.notify(message, title="Level up!")
            self.app.bell()
        self._announce_achievements(result.new_achievements)
        self._update_all_widgets(deltas=result.stat_changes, celebrate=result.leveled_up)

    def _announce_achievements(self, achievement_ids: list[str]) -> None:
        for achievement_id in achievement_ids:
            achievement = get_achievement(achievement_id)
            if achievement is not None:
                self.notify(f"{achievement.icon} {achievement.name}", title="Achievement Unlocked!")

    # ── Care ────────────────────────────────────────────────────────────

    def _care(self, action: str) -> None:
        _, feedback = CARE_ACTIONS[action]
        try:
            change = self.app.engine.care(action)
        except PersistenceError as exc:
            self._report_save_failure(exc)
            return
        self.notify(feedback, timeout=1.5)
        self._announce_achievements(change.new_achievements)
        self._update_all_widgets(deltas={change.stat: change.applied})

    # ── Resets ──────────────────────────────────────────────────────────

    def action_reset_today(self) -> None:
        def _done(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.app.engine.reset_steps_today()
            except PersistenceError as exc:
                self._report_save_failure(exc)
                return
            self._update_all_widgets()

        from ui.screens.confirm import ConfirmScreen
        self.app.push_screen(ConfirmScreen("Are you sure you want to reset today's steps?"), _done)

    def action_reset_all(self) -> None:
        def _done(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.app.engine.reset_all()
            except PersistenceError as exc:
                self.notify(str(exc), title="Reset failed", severity="error")
                return
            self.notify("All pet data has been reset.")
            self._update_all_widgets()

        from ui.screens.confirm import ConfirmScreen
        self.app.push_screen(
            ConfirmScreen("This will reset ALL of your pet's data. Are you sure you want to continue?", "Reset All"),
            _done,
        )

    # ── Export / import ─────────────────────────────────────────────────

    def action_export(self) -> None:
        def _done(path: Path | None) -> None:
            if path is None:
                return
            try:
                written = self.app.engine.export_to(path)
            except PersistenceError as exc:
                self.notify(str(exc), title="Export failed", severity="error")
                return
            self.notify(f"Saved to {written}", title="Exported")

        from ui.screens.transfer import TransferScreen
        self.app.push_screen(TransferScreen("export", self._default_transfer_path()), _done)

    def action_import(self) -> None:
        def _done(path: Path | None) -> None:
            if path is None:
                return
            try:
                self.app.engine.import_from(path)
            except ImportDocumentError as exc:
                self.notify(escape("\n".join(exc.problems)), title="Error importing data", severity="error")
                return
            except PersistenceError as exc:
                self.notify(str(exc), title="Error importing data", severity="error")
                return
            self.notify("Pet data imported.", title="Imported")
            self._update_all_widgets()

        from ui.screens.transfer import TransferScreen
        self.app.push_screen(TransferScreen("import", self._default_transfer_path()), _done)

    def _default_transfer_path(self) -> Path:
        return Path.cwd() / DEFAULT_EXPORT_NAME

    # ── Widget Updates ──────────────────────────────────────────────────

    def _update_all_widgets(self, deltas: dict[str, float] | None = None, celebrate: bool = False) -> None:
        engine = self.app.engine
        record = engine.record

        self.query_one("#stats-bar", StatsBar).set_stats(record.stats, STAT_DEFS, deltas)
        self.query_one("#pet-view", PetView).set_stage(engine.evolution_stage, celebrate=celebrate)
        self.query_one("#level-progress", LevelProgressBar).set_data(
            progress=engine.level_progress,
            stage=engine.evolution_stage,
            steps_today=record.steps_today,
            total_steps=record.total_steps,
        )
        self.query_one("#weekly-chart", WeeklyChart).set_data(
            engine.activity,
            today=day_index(engine.now()),
        )
        self.query_one("#achievements-panel", AchievementsPanel).set_achievements(
            engine.achievement_status()
        )

    def _report_save_failure(self, exc: PersistenceError) -> None:
        # the engine already holds the change in memory
        self.notify(
            f"{exc}. Your progress is kept; press Ctrl+S to retry.",
            title="Save failed",
            severity="error",
        )
        self._update_all_widgets()

    def action_retry_save(self) -> None:
        try:
            self.app.engine.save()
        except PersistenceError as exc:
            self._report_save_failure(exc)
            return
        self.notify("Pet saved.", timeout=1.5)

    def action_quit_game(self) -> None:
        self.app.exit()
