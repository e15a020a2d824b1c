"""Tests for pulse/config.py and pulse/workspace.py."""

from zoneinfo import ZoneInfo

from pulse.config import ensure_workspace, load_settings
from pulse.fileio import read_yaml
from pulse.workspace import get_user_timezone, now_local, workspace_root


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_load_settings(workspace):
    s = load_settings(workspace)
    assert s.timezone == "UTC"
    assert s.tick_seconds == 30
    assert get_user_timezone(workspace) == ZoneInfo("UTC")
    assert now_local(workspace).tzinfo == ZoneInfo("UTC")


def test_load_settings_bad_yaml(workspace):
    (workspace / "settings.yaml").write_text("timezone: [unclosed\n", encoding="utf-8")
    s = load_settings(workspace)
    assert s.timezone is None
    assert s.tick_seconds == 30
    assert get_user_timezone(workspace) is None


def test_load_settings_unknown_timezone(workspace):
    (workspace / "settings.yaml").write_text("timezone: Mars/Olympus_Mons\n", encoding="utf-8")
    assert load_settings(workspace).timezone is None
    assert now_local(workspace).tzinfo is None


def test_ensure_workspace_creates_settings(tmp_path):
    root = tmp_path / "fresh"
    assert ensure_workspace(root) == root
    data = read_yaml(root / "settings.yaml")
    assert data["tick_seconds"] == 30
    assert "timezone" not in data


def test_ensure_workspace_keeps_existing(workspace):
    ensure_workspace(workspace)
    assert read_yaml(workspace / "settings.yaml")["timezone"] == "UTC"
