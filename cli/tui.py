#!/usr/bin/env python3
"""Pulse Habits TUI — habit checklist with live reminders, powered by Textual."""

from __future__ import annotations

import re
import sys

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Footer, Header, Input, Label, Static

from pulse import (
    workspace_root,
    ensure_workspace,
    load_settings,
    setup_logging,
    get_logger,
    now_local,
    date_key,
    canonical_reminder_time,
    load_habits,
    save_habits,
    find_habit,
    toggle_completion,
    add_habit,
    add_reminder,
    remove_reminder,
    delete_habit,
    current_streak,
    longest_streak,
    completed_count,
    today_completion_ratio,
    weekly_progress,
    habit_week,
    ReminderEvaluator,
    next_reminder,
    dismiss_alert,
    Habit,
    HabitDraft,
    ReminderAlert,
)

log = get_logger("cli")

_NEW_HABIT_RE = re.compile(r"^(?P<name>.*?)(?:\s*@\s*(?P<time>\d{1,2}:\d{2}))?\s*$")


def parse_new_habit(text: str) -> HabitDraft:
    """'Read 20 pages @21:30' -> draft named 'Read 20 pages' with a 21:30 reminder."""
    m = _NEW_HABIT_RE.match(text)
    name = m.group("name") if m else text
    time = canonical_reminder_time(m.group("time")) if m else None
    return HabitDraft(name=name, reminder_time=time or "")


def _bar(fraction: float, width: int = 10) -> str:
    filled = round(fraction * width)
    return "█" * filled + "░" * (width - filled)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 40;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#habits-table {
    height: 1fr;
}

#new-habit, #reminder-input {
    height: 3;
}

#progress, #habit-week {
    height: auto;
    padding: 0 1;
}

#alerts {
    height: auto;
    padding: 0 1;
    color: $warning;
}
"""


# ── Main app ───────────────────────────────────────────────────


class PulseApp(App):
    """Terminal habit tracker."""

    TITLE = "Pulse Habits"
    CSS = CSS
    AUTO_FOCUS = "#habits-table"

    BINDINGS = [
        Binding("space", "toggle_today", "Done today"),
        Binding("n", "new_habit", "New habit"),
        Binding("r", "edit_reminders", "Reminders"),
        Binding("x", "delete_habit", "Delete"),
        Binding("d", "dismiss_alert", "Dismiss alert"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._root = workspace_root()
        self._settings = load_settings(self._root)
        self._habits: list[Habit] = []
        self._row_ids: list[str] = []
        self._evaluator = ReminderEvaluator()
        self._alerts: list[ReminderAlert] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Habits", classes="section-title"),
                DataTable(id="habits-table", cursor_type="row"),
                Input(placeholder="New habit, e.g. Stretch @07:30", id="new-habit"),
                Input(placeholder="Reminder HH:MM (prefix - to remove)", id="reminder-input"),
                id="left-pane",
            ),
            Vertical(
                Label("Today", classes="section-title"),
                Static(id="progress"),
                Label("Selected habit, last 7 days", classes="section-title"),
                Static(id="habit-week"),
                Label("Alerts", classes="section-title"),
                Static(id="alerts"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#habits-table", DataTable)
        table.add_columns("", "Habit", "Today", "Streak", "Best", "Goal/wk", "Next")
        self._habits = load_habits(self._root)
        self._refresh_view()
        self.set_interval(self._settings.tick_seconds, self._tick)
        self._tick()

    # ── Helpers ────────────────────────────────────────────────

    def _selected_id(self) -> str | None:
        table = self.query_one("#habits-table", DataTable)
        row = table.cursor_row
        if 0 <= row < len(self._row_ids):
            return self._row_ids[row]
        return None

    def _apply(self, op, *args) -> None:
        """Apply one store operation, persist, redraw."""
        updated = op(self._habits, *args)
        if updated is self._habits:
            return
        self._habits = updated
        try:
            save_habits(self._habits, self._root)
        except OSError as e:
            log.exception("Saving habits failed")
            self.notify(f"Could not save: {e}", title="Error", severity="error")
        self._refresh_view()

    def _refresh_view(self) -> None:
        now = now_local()
        today = date_key(now)
        selected = self._selected_id()

        table = self.query_one("#habits-table", DataTable)
        table.clear()
        self._row_ids = []
        for h in self._habits:
            table.add_row(
                h.emoji,
                h.name,
                "✔" if today in h.completions else "·",
                str(current_streak(h, today)),
                str(longest_streak(h)),
                str(h.goal_per_week),
                next_reminder(h, now) or "-",
                key=h.id,
            )
            self._row_ids.append(h.id)
        if selected in self._row_ids:
            table.move_cursor(row=self._row_ids.index(selected))

        ratio = today_completion_ratio(self._habits, today)
        lines = [
            f"{_bar(ratio)} {round(ratio * 100)}%  "
            f"({completed_count(self._habits, today)}/{len(self._habits)} done)",
            "",
        ]
        for p in weekly_progress(self._habits, today):
            lines.append(f"{p.day[5:]}  {_bar(p.percentage)} {p.completed_count}")
        self.query_one("#progress", Static).update("\n".join(lines))

        self._refresh_selected()
        self._refresh_alerts()

    def _refresh_selected(self) -> None:
        habit = find_habit(self._habits, self._selected_id() or "")
        widget = self.query_one("#habit-week", Static)
        if habit is None:
            widget.update("(no habit selected)")
            return
        days = "  ".join(("■" if done else "□") for _day, done in habit_week(habit, now_local()))
        reminders = ", ".join(habit.reminders) or "none"
        widget.update(f"{habit.emoji} {habit.name}\n{days}\nReminders: {reminders}")

    def _refresh_alerts(self) -> None:
        text = "\n".join(f"⏰ {a.habit_name} at {a.time}" for a in self._alerts)
        self.query_one("#alerts", Static).update(text or "(none)")

    def _tick(self) -> None:
        fired = self._evaluator.tick(self._habits, now_local())
        for alert in fired:
            self.notify(f"{alert.habit_name} at {alert.time}", title="Reminder")
        if fired:
            self._alerts.extend(fired)
            self._refresh_alerts()

    # ── Events ─────────────────────────────────────────────────

    @on(DataTable.RowHighlighted, "#habits-table")
    def _on_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._refresh_selected()

    @on(Input.Submitted, "#new-habit")
    def _on_new_habit(self, event: Input.Submitted) -> None:
        draft = parse_new_habit(event.value)
        if not draft.name.strip():
            self.notify("Give the habit a name", severity="warning")
            return
        self._apply(add_habit, draft)
        event.input.value = ""
        table = self.query_one("#habits-table", DataTable)
        table.move_cursor(row=0)
        table.focus()

    @on(Input.Submitted, "#reminder-input")
    def _on_reminder(self, event: Input.Submitted) -> None:
        habit_id = self._selected_id()
        value = event.value.strip()
        if habit_id is None or not value:
            return
        if value.startswith("-"):
            self._apply(remove_reminder, habit_id, value[1:].strip())
        elif canonical_reminder_time(value) is None:
            self.notify(f"Not a time: {value}", severity="warning")
            return
        else:
            self._apply(add_reminder, habit_id, value)
        event.input.value = ""

    # ── Actions ────────────────────────────────────────────────

    def action_toggle_today(self) -> None:
        habit_id = self._selected_id()
        if habit_id is not None:
            self._apply(toggle_completion, habit_id, date_key(now_local()))

    def action_new_habit(self) -> None:
        self.query_one("#new-habit", Input).focus()

    def action_edit_reminders(self) -> None:
        self.query_one("#reminder-input", Input).focus()

    def action_delete_habit(self) -> None:
        habit_id = self._selected_id()
        if habit_id is not None:
            self._apply(delete_habit, habit_id)

    def action_dismiss_alert(self) -> None:
        if self._alerts:
            self._alerts = dismiss_alert(self._alerts, self._alerts[0].id)
            self._refresh_alerts()

    def action_blur_focus(self) -> None:
        self.query_one("#habits-table", DataTable).focus()

    def action_quit_app(self) -> None:
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = ensure_workspace(workspace_root())
    try:
        setup_logging(load_settings(root), root, console=False)
    except OSError as e:
        print(f"Cannot write logs under {root}: {e}")
        sys.exit(1)

    app = PulseApp()
    app.run()


if __name__ == "__main__":
    main()
