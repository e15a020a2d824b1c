"""Habit store: pure transformations over the habit collection.

Every operation returns a new list in which each habit is a fresh copy, so
callers can keep the previous collection around untouched. When nothing
changes (unknown id, blank name, unparseable time or date) the input list
itself is returned.
Bad input is absorbed silently; callers that want feedback validate first.
"""

from __future__ import annotations

import random
import uuid
from datetime import datetime
from typing import Protocol

from pulse.dates import canonical_reminder_time, parse_date_key
from pulse.logging_config import get_logger
from pulse.models import FALLBACK_EMOJI, Habit, HabitDraft
from pulse.workspace import now_local

log = get_logger(__name__)


GRADIENTS = [
    "from-sky-500 to-cyan-400",
    "from-purple-500 to-indigo-500",
    "from-amber-500 to-orange-500",
    "from-emerald-500 to-teal-400",
    "from-rose-500 to-pink-500",
    "from-lime-500 to-emerald-400",
]


# ── Identity ──────────────────────────────────────────────────


class HabitIdentity(Protocol):
    """Supplies ids and colors for new habits."""

    def new_id(self) -> str: ...

    def pick_color(self) -> str: ...


class RandomIdentity:
    """uuid4 ids and a random gradient from the palette."""

    def __init__(self, palette: list[str] | None = None, rng: random.Random | None = None) -> None:
        self.palette = palette or GRADIENTS
        self.rng = rng or random.Random()

    def new_id(self) -> str:
        return str(uuid.uuid4())

    def pick_color(self) -> str:
        return self.rng.choice(self.palette)


# ── Helpers ───────────────────────────────────────────────────


def find_habit(habits: list[Habit], habit_id: str) -> Habit | None:
    """Find a habit by ID."""
    for h in habits:
        if h.id == habit_id:
            return h
    return None


def _replace(habits: list[Habit], habit_id: str, **changes: list[str]) -> list[Habit]:
    """Copy the collection, swapping in new member lists for one habit."""
    out = []
    for h in habits:
        h = h.copy()
        if h.id == habit_id:
            for attr, value in changes.items():
                setattr(h, attr, value)
        out.append(h)
    return out


# ── Operations ────────────────────────────────────────────────


def toggle_completion(habits: list[Habit], habit_id: str, date_id: str) -> list[Habit]:
    """Mark ``date_id`` done for a habit, or undo it if already done."""
    habit = find_habit(habits, habit_id)
    if habit is None or parse_date_key(date_id) is None:
        return habits
    completions = set(habit.completions) ^ {date_id}
    log.debug("Toggled %s on %s (now %s)", date_id, habit_id, date_id in completions)
    return _replace(habits, habit_id, completions=sorted(completions))


def add_habit(
    habits: list[Habit],
    draft: HabitDraft,
    identity: HabitIdentity | None = None,
    now: datetime | None = None,
) -> list[Habit]:
    """Create a habit from a draft and put it first.

    Empty or whitespace-only names leave the collection unchanged.
    """
    name = draft.name.strip()
    if not name:
        return habits
    if identity is None:
        identity = RandomIdentity()
    if now is None:
        now = now_local()
    reminder = canonical_reminder_time(draft.reminder_time)

    habit = Habit(
        id=identity.new_id(),
        name=name,
        emoji=draft.emoji.strip() or FALLBACK_EMOJI,
        color=identity.pick_color(),
        goal_per_week=max(1, draft.goal_per_week),
        reminders=[reminder] if reminder else [],
        completions=[],
        created_at=now.isoformat(),
    )
    log.info("Added habit %s (%s)", habit.id, habit.name)
    return [habit] + [h.copy() for h in habits]


def add_reminder(habits: list[Habit], habit_id: str, time: str) -> list[Habit]:
    """Add a reminder time to a habit; duplicates collapse.

    Times are stored zero-padded, so "7:00" and "07:00" are the same reminder.
    Times that do not parse leave the collection unchanged.
    """
    time = canonical_reminder_time(time)
    if time is None:
        return habits
    habit = find_habit(habits, habit_id)
    if habit is None:
        return habits
    reminders = set(habit.reminders) | {time}
    return _replace(habits, habit_id, reminders=sorted(reminders))


def remove_reminder(habits: list[Habit], habit_id: str, time: str) -> list[Habit]:
    habit = find_habit(habits, habit_id)
    if habit is None:
        return habits
    if time not in habit.reminders:
        time = canonical_reminder_time(time)
        if time not in habit.reminders:
            return habits
    reminders = set(habit.reminders) - {time}
    return _replace(habits, habit_id, reminders=sorted(reminders))


def delete_habit(habits: list[Habit], habit_id: str) -> list[Habit]:
    """Remove a habit. Callers clear any selection that pointed at it."""
    if find_habit(habits, habit_id) is None:
        return habits
    log.info("Deleted habit %s", habit_id)
    return [h.copy() for h in habits if h.id != habit_id]
