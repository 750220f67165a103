"""Configuration loader for todokit."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

_DEF_FILE = "todokit.yaml"

_ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "TODOKIT_ROOT": ("root",),
    "TODOKIT_TODO_FILE": ("todo_file",),
    "TODOKIT_CHANGELOG_FILE": ("changelog_file",),
    "TODOKIT_SCHEMA_PATH": ("schema_path",),
    "TODOKIT_LOG_LEVEL": ("logging", "level"),
}


class LoggingSettings(BaseModel):
    level: str = "WARNING"
    log_dir: Optional[str] = None


class TodoKitSettings(BaseModel):
    root: Path = Field(default_factory=Path.cwd)
    todo_file: str = "TODO.md"
    changelog_file: str = "CHANGELOG.md"
    schema_path: Optional[str] = None
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def todo_path(self) -> Path:
        return self.root / self.todo_file

    @property
    def changelog_path(self) -> Path:
        return self.root / self.changelog_file


def _apply_env(data: dict) -> dict:
    for env_name, keys in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if not value:
            continue
        target = data
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value
    return data


def load_settings(path: Optional[str] = None) -> TodoKitSettings:
    """Load settings from YAML (when present) and apply ``TODOKIT_*`` overrides.

    An explicitly given path must exist; the implicit ``todokit.yaml`` in the
    working directory is optional.
    """
    explicit = path or os.getenv("TODOKIT_CONFIG")
    cfg_path = Path(explicit) if explicit else Path.cwd() / _DEF_FILE
    data: dict = {}
    if explicit or cfg_path.exists():
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    return TodoKitSettings.model_validate(_apply_env(data))
