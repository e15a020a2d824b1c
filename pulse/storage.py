"""Load/save the habit list, falling back to a seed dataset."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pulse.dates import date_key
from pulse.fileio import read_json, write_json_atomic
from pulse.logging_config import get_logger
from pulse.models import Habit
from pulse.workspace import now_local, state_path, workspace_root

log = get_logger(__name__)

STORAGE_KEY = "pulse-habits-state-v1"

DEFAULT_HABITS: list[dict[str, Any]] = [
    {
        "id": "habit-1",
        "name": "Morning Run",
        "emoji": "🏃‍♀️",
        "color": "from-violet-500 to-fuchsia-500",
        "goalPerWeek": 5,
        "reminders": ["06:30"],
    },
    {
        "id": "habit-2",
        "name": "Mindful Break",
        "emoji": "🧘",
        "color": "from-emerald-500 to-teal-400",
        "goalPerWeek": 7,
        "reminders": ["12:00", "20:00"],
    },
]


def build_default_habits(today: date | datetime | str | None = None, now: datetime | None = None) -> list[Habit]:
    """Seed habits; the first one is already completed today."""
    if now is None:
        now = now_local()
    today_id = today if isinstance(today, str) else date_key(today if today is not None else now)
    habits = []
    for index, data in enumerate(DEFAULT_HABITS):
        habit = Habit.from_dict(data)
        habit.completions = [today_id] if index == 0 else []
        habit.created_at = now.isoformat()
        habits.append(habit)
    return habits


def _parse_habits(raw: Any) -> list[Habit] | None:
    """Turn the stored value into habits, or None if it is not a habit list."""
    if not isinstance(raw, list):
        return None
    habits = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str) or not item["id"]:
            return None
        for key in ("reminders", "completions"):
            if item.get(key) is not None and not isinstance(item[key], list):
                return None
        habits.append(Habit.from_dict(item))
    return habits


def load_habits(root: Path | None = None) -> list[Habit]:
    """Load the stored habit list; missing or malformed data yields the seed."""
    if root is None:
        root = workspace_root()
    path = state_path(root)
    try:
        data = read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        log.warning("Corrupt habit state in %s, using seed habits: %s", path, e)
        return build_default_habits(now=now_local(root))

    if data is None:
        log.info("No habit state at %s, using seed habits", path)
        return build_default_habits(now=now_local(root))

    habits = _parse_habits(data.get(STORAGE_KEY) if isinstance(data, dict) else None)
    if habits is None:
        log.warning("Unexpected habit state shape in %s, using seed habits", path)
        return build_default_habits(now=now_local(root))
    return habits


def save_habits(habits: list[Habit], root: Path | None = None) -> None:
    """Persist the habit list atomically under the storage key."""
    if root is None:
        root = workspace_root()
    write_json_atomic(state_path(root), {STORAGE_KEY: [h.to_dict() for h in habits]})
    log.debug("Saved %d habit(s)", len(habits))
