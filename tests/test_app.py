"""Tests for ui/app.py — HTTP surface over the habit engine."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

import ui.app as app_module
from pulse.storage import load_habits


@pytest.fixture
def client(workspace):
    app_module.reset_state()
    yield TestClient(app_module.app)
    app_module.reset_state()


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_index_renders(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Morning Run" in r.text


def test_list_habits_seed(client):
    data = client.get("/api/habits").json()
    ids = [h["id"] for h in data["habits"]]
    assert ids == ["habit-1", "habit-2"]
    first = data["habits"][0]
    assert first["doneToday"] is True
    assert first["streak"] == 1
    assert first["longestStreak"] == 1


def test_create_habit(client, workspace):
    r = client.post("/api/habits", json={"name": "Stretch", "goalPerWeek": 0, "reminderTime": "07:30"})
    assert r.status_code == 200
    habit = r.json()["habit"]
    assert habit["name"] == "Stretch"
    assert habit["goalPerWeek"] == 1
    assert habit["reminders"] == ["07:30"]
    assert load_habits(workspace)[0].id == habit["id"]


def test_create_habit_requires_name(client):
    assert client.post("/api/habits", json={"name": "   "}).status_code == 400


def test_toggle_and_progress(client):
    r = client.post("/api/habits/habit-2/toggle", json={})
    assert r.json()["done"] is True
    progress = client.get("/api/progress").json()
    assert progress["ratio"] == 1.0
    assert progress["done"] == 2
    assert len(progress["week"]) == 7

    r = client.post("/api/habits/habit-2/toggle", json={})
    assert r.json()["done"] is False


def test_toggle_explicit_date(client):
    r = client.post("/api/habits/habit-2/toggle", json={"date": "2026-01-15"})
    assert "2026-01-15" in r.json()["habit"]["completions"]
    assert client.post("/api/habits/habit-2/toggle", json={"date": "15/01/2026"}).status_code == 400


def test_unknown_habit_404(client):
    assert client.post("/api/habits/nope/toggle", json={}).status_code == 404
    assert client.delete("/api/habits/nope").status_code == 404
    assert client.post("/api/habits/nope/reminders", json={"time": "08:00"}).status_code == 404
    assert client.delete("/api/habits/nope/reminders/08:00").status_code == 404


def test_reminders_add_remove(client):
    r = client.post("/api/habits/habit-1/reminders", json={"time": "05:45"})
    assert r.json()["reminders"] == ["05:45", "06:30"]
    r = client.delete("/api/habits/habit-1/reminders/06:30")
    assert r.json()["reminders"] == ["05:45"]
    assert client.post("/api/habits/habit-1/reminders", json={"time": ""}).status_code == 400


def test_reminder_times_validated_and_canonical(client):
    assert client.post("/api/habits/habit-1/reminders", json={"time": "banana"}).status_code == 400
    assert client.post("/api/habits/habit-1/reminders", json={"time": "25:00"}).status_code == 400
    r = client.post("/api/habits/habit-1/reminders", json={"time": "6:30"})
    assert r.json()["reminders"] == ["06:30"]
    r = client.delete("/api/habits/habit-1/reminders/6:30")
    assert r.json()["reminders"] == []


def test_create_habit_rejects_bad_time(client):
    r = client.post("/api/habits", json={"name": "Nap", "reminderTime": "noonish"})
    assert r.status_code == 400
    r = client.post("/api/habits", json={"name": "Nap", "reminderTime": "7:15"})
    assert r.json()["habit"]["reminders"] == ["07:15"]


def test_delete_habit(client, workspace):
    assert client.delete("/api/habits/habit-1").status_code == 200
    assert [h.id for h in load_habits(workspace)] == ["habit-2"]


def test_tick_and_dismiss(client, monkeypatch):
    monkeypatch.setattr(app_module, "now_local", lambda: datetime(2026, 2, 11, 12, 0, 10))
    fired = client.post("/api/reminders/tick").json()["fired"]
    assert [(a["habitId"], a["time"]) for a in fired] == [("habit-2", "12:00")]
    assert client.post("/api/reminders/tick").json()["fired"] == []

    alerts = client.get("/api/alerts").json()["alerts"]
    assert len(alerts) == 1
    alert_id = alerts[0]["id"]
    assert client.delete(f"/api/alerts/{alert_id}").status_code == 200
    assert client.get("/api/alerts").json()["alerts"] == []
    assert client.delete(f"/api/alerts/{alert_id}").status_code == 404


def test_basic_auth(client, monkeypatch):
    monkeypatch.setenv("PULSE_USERNAME", "me")
    monkeypatch.setenv("PULSE_PASSWORD", "secret")
    assert client.get("/api/habits").status_code == 401
    assert client.get("/api/habits", auth=("me", "wrong")).status_code == 401
    assert client.get("/api/habits", auth=("me", "secret")).status_code == 200
