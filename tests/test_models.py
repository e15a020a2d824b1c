"""Tests for pulse/models.py dataclass serialization."""

from pulse.models import (
    Habit,
    HabitDraft,
    ReminderAlert,
    Settings,
)


def test_habit_from_dict_camel_case():
    data = {
        "id": "h1",
        "name": "Run",
        "emoji": "🏃",
        "color": "from-sky-500 to-cyan-400",
        "goalPerWeek": 5,
        "reminders": ["06:30"],
        "completions": ["2026-02-10"],
        "createdAt": "2026-02-01T08:00:00",
        "unknown": "ignored",
    }
    h = Habit.from_dict(data)
    assert h.goal_per_week == 5
    assert h.created_at == "2026-02-01T08:00:00"
    d = h.to_dict()
    assert set(d) == {"id", "name", "emoji", "color", "goalPerWeek", "reminders", "completions", "createdAt"}
    assert d["goalPerWeek"] == 5


def test_habit_from_dict_clamps_goal():
    assert Habit.from_dict({"id": "h", "goalPerWeek": 0}).goal_per_week == 1
    assert Habit.from_dict({"id": "h", "goalPerWeek": "lots"}).goal_per_week == 1


def test_habit_copy_is_independent():
    h = Habit(id="h", reminders=["07:00"], completions=["2026-02-10"])
    c = h.copy()
    c.reminders.append("08:00")
    assert h.reminders == ["07:00"]
    assert c == Habit(id="h", reminders=["07:00", "08:00"], completions=["2026-02-10"])


def test_habit_draft_from_dict():
    draft = HabitDraft.from_dict({"name": "Walk", "goalPerWeek": "3", "reminderTime": "18:00"})
    assert draft.name == "Walk"
    assert draft.goal_per_week == 3
    assert draft.reminder_time == "18:00"
    assert HabitDraft.from_dict({}).goal_per_week == 5


def test_reminder_alert_to_dict():
    a = ReminderAlert(id="x", habit_id="h", habit_name="Run", time="06:30", timestamp=123)
    assert a.to_dict() == {
        "id": "x",
        "habitId": "h",
        "habitName": "Run",
        "time": "06:30",
        "timestamp": 123,
    }


def test_settings_defaults_and_clamp():
    assert Settings.from_dict({}) == Settings()
    assert Settings.from_dict({"tick_seconds": 600}).tick_seconds == 60
    assert Settings.from_dict({"tick_seconds": 0}).tick_seconds == 1
    s = Settings.from_dict({"timezone": "Europe/Berlin", "log_level": "debug", "dev_mode": True})
    assert s.timezone == "Europe/Berlin"
    assert s.log_level == "DEBUG"
    assert s.to_dict()["timezone"] == "Europe/Berlin"
