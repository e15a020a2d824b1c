from __future__ import annotations

import os
import secrets
import threading
from contextlib import asynccontextmanager
from typing import Any

from pulse import (
    workspace_root as _workspace_root,
    ensure_workspace,
    load_settings,
    setup_logging,
    now_local,
    date_key,
    parse_date_key,
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
    ReminderEvaluator,
    next_reminder,
    dismiss_alert,
    Habit,
    HabitDraft,
    ReminderAlert,
    get_logger,
)

from fastapi import FastAPI, Depends, HTTPException, status
from fastapi import Body
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

log = get_logger("ui")


# ── Shared state ──────────────────────────────────────────────

# One writer at a time: store operations are not commutative.
_store_lock = threading.Lock()
_evaluator = ReminderEvaluator()
_alerts: list[ReminderAlert] = []


def reset_state() -> None:
    """Forget fired reminders and pending alerts."""
    global _evaluator, _alerts
    with _store_lock:
        _evaluator = ReminderEvaluator()
        _alerts = []


def _mutate(op, *args) -> list[Habit]:
    """Apply one store operation and persist the result."""
    root = _workspace_root()
    with _store_lock:
        habits = load_habits(root)
        updated = op(habits, *args)
        if updated is not habits:
            save_habits(updated, root)
        return updated


def _mutate_habit(op, habit_id: str, *args) -> list[Habit]:
    """Like _mutate, but 404 unless ``habit_id`` exists when the lock is held."""
    root = _workspace_root()
    with _store_lock:
        habits = load_habits(root)
        if find_habit(habits, habit_id) is None:
            raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
        updated = op(habits, habit_id, *args)
        if updated is not habits:
            save_habits(updated, root)
        return updated


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _habit_view(habit: Habit, today: str) -> dict[str, Any]:
    d = habit.to_dict()
    d["doneToday"] = today in habit.completions
    d["streak"] = current_streak(habit, today)
    d["longestStreak"] = longest_streak(habit)
    d["nextReminder"] = next_reminder(habit, now_local())
    return d


# ── App ───────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    root = ensure_workspace(_workspace_root())
    setup_logging(load_settings(root), root)
    log.info("Pulse Habits UI serving %s", root)
    yield


app = FastAPI(title="Pulse Habits", version="0.1.0", lifespan=lifespan)


# ── Auth ──────────────────────────────────────────────────────

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("PULSE_USERNAME", "")
    expected_password = os.environ.get("PULSE_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    habits = load_habits(_workspace_root())
    today = date_key(now_local())
    ratio = today_completion_ratio(habits, today)

    rows = []
    for h in habits:
        v = _habit_view(h, today)
        mark = "✅" if v["doneToday"] else "⬜"
        nxt = f" · next {v['nextReminder']}" if v["nextReminder"] else ""
        rows.append(
            f"<li>{mark} {_escape(h.emoji)} <b>{_escape(h.name)}</b> "
            f"<span class=\"muted\">🔥 {v['streak']} · best {v['longestStreak']} · "
            f"{h.goal_per_week}x/week{_escape(nxt)}</span></li>"
        )

    week = "".join(
        f"<div class=\"day\"><div>{p.day[5:]}</div><div>{round(p.percentage * 100)}%</div></div>"
        for p in weekly_progress(habits, today)
    )
    alerts = "".join(
        f"<li>⏰ {_escape(a.habit_name)} at {_escape(a.time)}</li>" for a in _alerts
    )

    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Pulse Habits</title>
  <style>
    body {{ font-family: system-ui, sans-serif; max-width: 40rem; margin: 2rem auto; }}
    .muted {{ color: #888; font-size: 0.9em; }}
    .week {{ display: flex; gap: 1rem; }}
    .day {{ text-align: center; }}
  </style>
</head>
<body>
  <h1>Pulse Habits</h1>
  <p><b>{round(ratio * 100)}%</b> <span class="muted">{completed_count(habits, today)}/{len(habits)} done today</span></p>
  <div class="week">{week}</div>
  <h2>Habits</h2>
  <ul>{''.join(rows) if rows else '<li class="muted">Add your first habit</li>'}</ul>
  <h2>Alerts</h2>
  <ul>{alerts or '<li class="muted">(none)</li>'}</ul>
</body>
</html>"""
    return HTMLResponse(html)


# ── Habits API ────────────────────────────────────────────────

@app.get("/api/habits")
def api_list_habits(username: str = Depends(get_current_user)) -> dict[str, Any]:
    habits = load_habits(_workspace_root())
    today = date_key(now_local())
    return {"today": today, "habits": [_habit_view(h, today) for h in habits]}


@app.post("/api/habits")
def api_create_habit(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    draft = HabitDraft.from_dict(payload)
    if not draft.name.strip():
        raise HTTPException(status_code=400, detail="Habit name is required")
    if draft.reminder_time and canonical_reminder_time(draft.reminder_time) is None:
        raise HTTPException(status_code=400, detail=f"Invalid time: {draft.reminder_time}")
    habits = _mutate(add_habit, draft)
    return {"ok": True, "habit": habits[0].to_dict()}


@app.delete("/api/habits/{habit_id}")
def api_delete_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    _mutate_habit(delete_habit, habit_id)
    return {"ok": True, "habit_id": habit_id}


@app.post("/api/habits/{habit_id}/toggle")
def api_toggle_completion(
    habit_id: str,
    payload: dict[str, Any] = Body(default={}),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    day = payload.get("date") or date_key(now_local())
    if parse_date_key(day) is None:
        raise HTTPException(status_code=400, detail=f"Invalid date: {day}")
    habit = find_habit(_mutate_habit(toggle_completion, habit_id, day), habit_id)
    return {"ok": True, "date": day, "done": day in habit.completions, "habit": habit.to_dict()}


@app.post("/api/habits/{habit_id}/reminders")
def api_add_reminder(habit_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    time = str(payload.get("time", "") or "")
    if not time:
        raise HTTPException(status_code=400, detail="Missing time")
    if canonical_reminder_time(time) is None:
        raise HTTPException(status_code=400, detail=f"Invalid time: {time}")
    habit = find_habit(_mutate_habit(add_reminder, habit_id, time), habit_id)
    return {"ok": True, "reminders": habit.reminders}


@app.delete("/api/habits/{habit_id}/reminders/{time}")
def api_remove_reminder(habit_id: str, time: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    habit = find_habit(_mutate_habit(remove_reminder, habit_id, time), habit_id)
    return {"ok": True, "reminders": habit.reminders}


# ── Progress & reminders ──────────────────────────────────────

@app.get("/api/progress")
def api_progress(username: str = Depends(get_current_user)) -> dict[str, Any]:
    habits = load_habits(_workspace_root())
    today = date_key(now_local())
    return {
        "today": today,
        "ratio": round(today_completion_ratio(habits, today), 3),
        "done": completed_count(habits, today),
        "total": len(habits),
        "week": [p.to_dict() for p in weekly_progress(habits, today)],
    }


@app.post("/api/reminders/tick")
def api_reminders_tick(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """One evaluator pass; call this at least once a minute."""
    habits = load_habits(_workspace_root())
    with _store_lock:
        fired = _evaluator.tick(habits, now_local())
        _alerts.extend(fired)
    return {"fired": [a.to_dict() for a in fired]}


@app.get("/api/alerts")
def api_list_alerts(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"alerts": [a.to_dict() for a in _alerts]}


@app.delete("/api/alerts/{alert_id}")
def api_dismiss_alert(alert_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    global _alerts
    with _store_lock:
        remaining = dismiss_alert(_alerts, alert_id)
        if len(remaining) == len(_alerts):
            raise HTTPException(status_code=404, detail=f"Alert not found: {alert_id}")
        _alerts = remaining
    return {"ok": True, "alert_id": alert_id}
