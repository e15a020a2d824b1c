"""Typed dataclasses for the Pulse Habits data model.

All persisted models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pulse.dates import canonical_reminder_time, parse_date_key


DEFAULT_EMOJI = "🔥"
FALLBACK_EMOJI = "✨"
DEFAULT_COLOR = "from-sky-500 to-cyan-400"


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ── Habits ────────────────────────────────────────────────────


@dataclass
class Habit:
    id: str = ""
    name: str = ""
    emoji: str = DEFAULT_EMOJI
    color: str = DEFAULT_COLOR
    goal_per_week: int = 1
    reminders: list[str] = field(default_factory=list)  # sorted, unique HH:MM
    completions: list[str] = field(default_factory=list)  # sorted, unique YYYY-MM-DD
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        reminders = {
            canonical_reminder_time(str(r)) or str(r)
            for r in (d.get("reminders") or [])
            if str(r).strip()
        }
        completions = {c for c in (d.get("completions") or []) if parse_date_key(c) is not None}
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            emoji=str(d.get("emoji", DEFAULT_EMOJI)),
            color=str(d.get("color", DEFAULT_COLOR)),
            goal_per_week=max(1, _to_int(d.get("goalPerWeek", 1), 1)),
            reminders=sorted(reminders),
            completions=sorted(completions),
            created_at=str(d.get("createdAt", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "color": self.color,
            "goalPerWeek": self.goal_per_week,
            "reminders": list(self.reminders),
            "completions": list(self.completions),
            "createdAt": self.created_at,
        }

    def copy(self) -> Habit:
        """Copy with fresh reminder/completion lists."""
        return Habit(
            id=self.id,
            name=self.name,
            emoji=self.emoji,
            color=self.color,
            goal_per_week=self.goal_per_week,
            reminders=list(self.reminders),
            completions=list(self.completions),
            created_at=self.created_at,
        )


@dataclass
class HabitDraft:
    """Values from the add-habit form, before validation."""

    name: str = ""
    emoji: str = DEFAULT_EMOJI
    goal_per_week: int = 5
    reminder_time: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitDraft:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            name=str(d.get("name", "") or ""),
            emoji=str(d.get("emoji", DEFAULT_EMOJI) or ""),
            goal_per_week=_to_int(d.get("goalPerWeek", d.get("goal_per_week", 5)), 5),
            reminder_time=str(d.get("reminderTime", d.get("reminder_time", "")) or ""),
        )


# ── Reminders ─────────────────────────────────────────────────


@dataclass
class ReminderAlert:
    id: str = ""
    habit_id: str = ""
    habit_name: str = ""
    time: str = ""
    timestamp: int = 0  # epoch milliseconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "habitId": self.habit_id,
            "habitName": self.habit_name,
            "time": self.time,
            "timestamp": self.timestamp,
        }


# ── Progress ──────────────────────────────────────────────────


@dataclass
class DayProgress:
    day: str = ""
    completed_count: int = 0
    percentage: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "completed": self.completed_count,
            "percentage": round(self.percentage, 3),
        }


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str | None = None
    tick_seconds: int = 30
    dev_mode: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        # Ticks further apart than a minute would step over the 30 s window.
        tick = max(1, min(60, _to_int(d.get("tick_seconds", 30), 30)))
        return cls(
            timezone=d.get("timezone") or None,
            tick_seconds=tick,
            dev_mode=bool(d.get("dev_mode", False)),
            log_level=str(d.get("log_level", "INFO")).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "tick_seconds": self.tick_seconds,
            "dev_mode": self.dev_mode,
            "log_level": self.log_level,
        }
        if self.timezone:
            d["timezone"] = self.timezone
        return d
