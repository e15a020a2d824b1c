"""Reminder evaluation with once-per-day dedup.

The evaluator is driven from outside (a UI timer, a polling endpoint); one
call to ``tick`` is one evaluation pass. Ticks must come at most ~60 s apart
for the +/-30 s window to catch every reminder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pulse.dates import date_key, parse_reminder_time
from pulse.logging_config import get_logger
from pulse.models import Habit, ReminderAlert
from pulse.workspace import now_local

log = get_logger(__name__)

REMINDER_WINDOW_SECONDS = 30


@dataclass
class ReminderCache:
    """Reminders already fired on ``date``, keyed by (habit_id, time, date)."""

    date: str = ""
    fired: set[tuple[str, str, str]] = field(default_factory=set)


class ReminderEvaluator:
    """Matches reminder times against the clock, firing each at most once a day."""

    def __init__(self, window_seconds: int = REMINDER_WINDOW_SECONDS) -> None:
        self.window_seconds = window_seconds
        self.cache = ReminderCache()

    def tick(self, habits: list[Habit], now: datetime | None = None) -> list[ReminderAlert]:
        """Run one evaluation pass and return the alerts that fired on it."""
        if now is None:
            now = now_local()

        today = date_key(now)
        if self.cache.date != today:
            if self.cache.date:
                log.debug("Reminder cache rollover %s -> %s", self.cache.date, today)
            self.cache = ReminderCache(date=today)

        now_seconds = now.hour * 3600 + now.minute * 60 + now.second
        timestamp = int(now.timestamp() * 1000)
        alerts: list[ReminderAlert] = []

        for habit in habits:
            for time in habit.reminders:
                parsed = parse_reminder_time(time)
                if parsed is None:
                    log.debug("Skipping invalid reminder %r on %s", time, habit.id)
                    continue
                hour, minute = parsed
                delta = abs(now_seconds - (hour * 3600 + minute * 60))
                key = (habit.id, time, today)
                if delta > self.window_seconds or key in self.cache.fired:
                    continue

                self.cache.fired.add(key)
                alerts.append(
                    ReminderAlert(
                        id=f"{habit.id}-{time}-{today}-{timestamp}",
                        habit_id=habit.id,
                        habit_name=habit.name,
                        time=time,
                        timestamp=timestamp,
                    )
                )

        if alerts:
            log.info("Fired %d reminder(s)", len(alerts), extra={"times": [a.time for a in alerts]})
        return alerts


def next_reminder(habit: Habit, now: datetime | None = None) -> str | None:
    """Earliest reminder later than the current minute, wrapping to tomorrow's first.

    Uses the same time parser as the evaluator, so invalid entries are ignored
    here too. None when the habit has no valid reminder.
    """
    if now is None:
        now = now_local()
    now_minutes = now.hour * 60 + now.minute

    valid = []
    for time in habit.reminders:
        parsed = parse_reminder_time(time)
        if parsed is not None:
            valid.append((parsed[0] * 60 + parsed[1], time))
    if not valid:
        return None

    valid.sort()
    for minutes, time in valid:
        if minutes > now_minutes:
            return time
    return valid[0][1]


def dismiss_alert(alerts: list[ReminderAlert], alert_id: str) -> list[ReminderAlert]:
    """Drop one alert from the tray."""
    return [a for a in alerts if a.id != alert_id]
