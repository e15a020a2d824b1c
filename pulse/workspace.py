"""Workspace root, timezone, path helpers for Pulse Habits."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pulse.fileio import read_yaml


def workspace_root() -> Path:
    """Get the workspace root directory (holds settings.yaml, state.json, logs/)."""
    return Path(
        os.environ.get("PULSE_ROOT", str(Path.home() / "pulse"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo | None:
    """Get the timezone named in settings.yaml, or None for the system local time."""
    if root is None:
        root = workspace_root()
    try:
        settings = read_yaml(settings_path(root))
    except Exception:
        return None
    name = settings.get("timezone")
    if not name:
        return None
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        return None


def now_local(root: Path | None = None) -> datetime:
    """Get the current wall-clock datetime for the user."""
    tz = get_user_timezone(root)
    if tz is None:
        return datetime.now()
    return datetime.now(tz)


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def state_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "state.json"


def logs_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "logs"
