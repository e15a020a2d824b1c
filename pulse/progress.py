"""Today's completion ratio and rolling 7-day progress across habits."""

from __future__ import annotations

from datetime import date, datetime

from pulse.dates import date_key, recent_days
from pulse.models import DayProgress, Habit

WEEK_DAYS = 7


def completed_count(habits: list[Habit], day_id: str) -> int:
    """How many habits have ``day_id`` in their completions."""
    return sum(1 for h in habits if day_id in h.completions)


def today_completion_ratio(habits: list[Habit], today_id: str | None = None) -> float:
    """Fraction of habits completed today; 0.0 when there are no habits."""
    if not habits:
        return 0.0
    if today_id is None:
        today_id = date_key()
    return completed_count(habits, today_id) / len(habits)


def weekly_progress(
    habits: list[Habit],
    today: date | datetime | str | None = None,
) -> list[DayProgress]:
    """Per-day completion counts and fractions for the last 7 days, oldest first."""
    out = []
    for day in recent_days(WEEK_DAYS, today):
        count = completed_count(habits, day)
        pct = count / len(habits) if habits else 0.0
        out.append(DayProgress(day=day, completed_count=count, percentage=pct))
    return out


def habit_week(habit: Habit, today: date | datetime | str | None = None) -> list[tuple[str, bool]]:
    """(day, done) pairs for one habit over the last 7 days."""
    done = set(habit.completions)
    return [(day, day in done) for day in recent_days(WEEK_DAYS, today)]
