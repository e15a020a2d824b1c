"""Pulse Habits core library — habit store, progress and reminder engines.

Public API re-exports for convenient imports:
    from pulse import load_habits, toggle_completion, current_streak, ...
"""

# Workspace & config
from pulse.workspace import (
    workspace_root,
    get_user_timezone,
    now_local,
    settings_path,
    state_path,
    logs_dir,
)
from pulse.config import load_settings, ensure_workspace
from pulse.logging_config import setup_logging, get_logger

# Dates
from pulse.dates import (
    date_key,
    parse_date_key,
    recent_days,
    parse_reminder_time,
    canonical_reminder_time,
)

# Habit store
from pulse.habits import (
    GRADIENTS,
    HabitIdentity,
    RandomIdentity,
    find_habit,
    toggle_completion,
    add_habit,
    add_reminder,
    remove_reminder,
    delete_habit,
)

# Projections
from pulse.streaks import current_streak, longest_streak
from pulse.progress import (
    completed_count,
    today_completion_ratio,
    weekly_progress,
    habit_week,
)
from pulse.reminders import (
    REMINDER_WINDOW_SECONDS,
    ReminderCache,
    ReminderEvaluator,
    next_reminder,
    dismiss_alert,
)

# Storage
from pulse.storage import (
    STORAGE_KEY,
    build_default_habits,
    load_habits,
    save_habits,
)

# Models
from pulse.models import (
    Habit,
    HabitDraft,
    ReminderAlert,
    DayProgress,
    Settings,
)
