from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_path

APP_NAME = "focustree"
APP_AUTHOR = "focustree"
SETTINGS_FILENAME = "settings.json"


def default_settings_path() -> Path:
    return Path(user_config_path(APP_NAME, APP_AUTHOR)) / SETTINGS_FILENAME


def resolve_settings_path(override: Path | str | None = None) -> Path:
    if override:
        return Path(override).expanduser()
    return default_settings_path()
