"""Settings loading and workspace bootstrap."""

from __future__ import annotations

from pathlib import Path

import yaml

from pulse.fileio import read_yaml, write_yaml_atomic
from pulse.logging_config import get_logger
from pulse.models import Settings
from pulse.workspace import get_user_timezone, settings_path, workspace_root

log = get_logger(__name__)


def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml; unreadable files and unknown timezones fall back to defaults."""
    if root is None:
        root = workspace_root()
    path = settings_path(root)
    try:
        data = read_yaml(path)
    except yaml.YAMLError as e:
        log.warning("Ignoring unreadable settings file %s: %s", path, e)
        return Settings()

    settings = Settings.from_dict(data)
    if settings.timezone and get_user_timezone(root) is None:
        log.warning("Unknown timezone %r, using system local time", settings.timezone)
        settings.timezone = None
    return settings


def ensure_workspace(root: Path | None = None) -> Path:
    """Create the workspace directory and a default settings.yaml if missing."""
    if root is None:
        root = workspace_root()
    root.mkdir(parents=True, exist_ok=True)
    path = settings_path(root)
    if not path.exists():
        write_yaml_atomic(path, Settings().to_dict())
        log.info("Created default settings at %s", path)
    return root
