"""Shared test fixtures for Pulse Habits tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from pulse.models import Habit


class FixedIdentity:
    """Deterministic ids/colors for add_habit."""

    def __init__(self, color: str = "from-rose-500 to-pink-500") -> None:
        self.color = color
        self.count = 0

    def new_id(self) -> str:
        self.count += 1
        return f"fixed-{self.count}"

    def pick_color(self) -> str:
        return self.color


@pytest.fixture
def identity() -> FixedIdentity:
    return FixedIdentity()


@pytest.fixture
def habits() -> list[Habit]:
    return [
        Habit(
            id="run",
            name="Morning Run",
            emoji="🏃",
            goal_per_week=5,
            reminders=["06:30"],
            completions=["2026-02-08", "2026-02-09", "2026-02-10"],
        ),
        Habit(
            id="read",
            name="Read",
            emoji="📚",
            goal_per_week=7,
            reminders=["12:00", "21:30"],
            completions=["2026-02-10"],
        ),
    ]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a settings file."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {
        "timezone": "UTC",
        "tick_seconds": 30,
        "dev_mode": False,
        "log_level": "INFO",
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    # Set env var
    os.environ["PULSE_ROOT"] = str(root)
    yield root
    # Cleanup
    if "PULSE_ROOT" in os.environ:
        del os.environ["PULSE_ROOT"]
