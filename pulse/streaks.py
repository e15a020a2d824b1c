"""Current and longest completion streaks for a habit."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from pulse.dates import as_date, parse_date_key
from pulse.models import Habit


def current_streak(habit: Habit, as_of: date | datetime | str | None = None) -> int:
    """Count consecutive completed days walking back from ``as_of`` (default today).

    The run must include ``as_of`` itself; a missing reference day gives 0.
    """
    cursor = as_date(as_of)
    if cursor is None:
        return 0
    done = set(habit.completions)
    streak = 0
    while cursor.isoformat() in done:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(habit: Habit) -> int:
    """Longest run of calendar-consecutive completion dates."""
    days = sorted(
        {d for d in (parse_date_key(c) for c in habit.completions) if d is not None},
        reverse=True,
    )
    longest = 0
    run = 0
    previous: date | None = None
    for d in days:
        if previous is not None and previous == d + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = d
    return longest
