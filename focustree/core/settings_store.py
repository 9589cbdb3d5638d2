from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from focustree.core.logging import get_logger, log_event
from focustree.core.settings_model import SCHEMA_VERSION, SettingsModel
from focustree.core.sort_policy import SortOrder

logger = get_logger(__name__)


class SettingsStore:
    """Load and persist focustree user settings."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """Read settings from disk, migrating legacy keys."""
        if self._path.exists():
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                raw = {}
        else:
            raw = {}
        migrated = self._migrate(raw)
        normalized = self._normalize(migrated)
        if self._path.exists() and self._should_persist_upgrade(raw, normalized):
            self._backup_raw_settings()
            self.save(normalized)
        return normalized

    def save(self, settings: dict[str, Any]) -> None:
        """Persist settings to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(settings, indent=4), encoding="utf-8")

    def update_focus_paths(
        self,
        settings: dict[str, Any],
        paths: Sequence[Path | str],
    ) -> None:
        """Store the ordered focused folders."""
        settings["focusPaths"] = [str(path) for path in paths]
        self.save(settings)

    def update_sort_order(self, settings: dict[str, Any], order: SortOrder) -> None:
        """Store the active listing sort order."""
        settings["sortOrder"] = order.value
        self.save(settings)

    def _normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            model = SettingsModel.model_validate(data or {})
        except ValidationError:
            model = SettingsModel()
        return model.model_dump()

    def _migrate(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        version = data.get("schemaVersion")
        if not isinstance(version, int):
            version = 0
        if version >= SCHEMA_VERSION:
            return data
        data = dict(data)
        legacy = data.pop("currentPath", None)
        focus_paths = data.get("focusPaths")
        if not isinstance(focus_paths, list):
            focus_paths = []
        if isinstance(legacy, str) and legacy and legacy not in focus_paths:
            focus_paths = [*focus_paths, legacy]
            log_event(logger, "settings.migrated", legacy_path=legacy)
        data["focusPaths"] = focus_paths
        data["schemaVersion"] = SCHEMA_VERSION
        return data

    def _should_persist_upgrade(
        self, raw: Any, normalized: dict[str, Any]
    ) -> bool:
        if not isinstance(raw, dict):
            return True
        if raw.get("schemaVersion") != normalized.get("schemaVersion"):
            return True
        return raw != normalized

    def _backup_raw_settings(self) -> None:
        if not self._path.exists():
            return
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        backup_path = self._path.with_name(f"{self._path.stem}.bak-{timestamp}.json")
        try:
            backup_path.write_text(self._path.read_text(encoding="utf-8"), encoding="utf-8")
        except OSError:
            pass
