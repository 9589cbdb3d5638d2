from __future__ import annotations

import json
from pathlib import Path

from focustree.core.settings_model import SCHEMA_VERSION
from focustree.core.settings_store import SettingsStore
from focustree.core.sort_policy import SortOrder


def _write(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_defaults_when_file_is_missing(settings_store: SettingsStore) -> None:
    settings = settings_store.load()

    assert settings["focusPaths"] == []
    assert settings["sortOrder"] == "MANUAL"
    assert settings["useTrash"] is True
    assert settings["schemaVersion"] == SCHEMA_VERSION
    assert not settings_store.path.exists()


def test_legacy_current_path_is_migrated(settings_store: SettingsStore) -> None:
    _write(settings_store.path, {"focusPaths": ["/a"], "currentPath": "/b"})

    settings = settings_store.load()

    assert settings["focusPaths"] == ["/a", "/b"]
    assert "currentPath" not in settings
    stored = json.loads(settings_store.path.read_text(encoding="utf-8"))
    assert stored["focusPaths"] == ["/a", "/b"]
    assert stored["schemaVersion"] == SCHEMA_VERSION
    backups = list(settings_store.path.parent.glob("settings.bak-*.json"))
    assert len(backups) == 1
    assert "currentPath" in json.loads(backups[0].read_text(encoding="utf-8"))


def test_legacy_path_already_focused_is_not_duplicated(settings_store: SettingsStore) -> None:
    _write(settings_store.path, {"focusPaths": ["/a"], "currentPath": "/a"})

    assert settings_store.load()["focusPaths"] == ["/a"]


def test_current_settings_are_left_alone(settings_store: SettingsStore) -> None:
    payload = {
        "schemaVersion": SCHEMA_VERSION,
        "focusPaths": ["/x"],
        "sortOrder": "DESC",
        "useTrash": False,
        "workspaceRoot": "",
    }
    _write(settings_store.path, payload)

    assert settings_store.load() == payload
    assert list(settings_store.path.parent.glob("settings.bak-*.json")) == []


def test_unknown_sort_order_and_bad_paths_are_normalized(settings_store: SettingsStore) -> None:
    _write(
        settings_store.path,
        {
            "schemaVersion": SCHEMA_VERSION,
            "focusPaths": ["/a", "", 3, "/a", "/b"],
            "sortOrder": "sideways",
        },
    )

    settings = settings_store.load()

    assert settings["focusPaths"] == ["/a", "/b"]
    assert settings["sortOrder"] == "MANUAL"


def test_invalid_json_falls_back_to_defaults(settings_store: SettingsStore) -> None:
    settings_store.path.parent.mkdir(parents=True)
    settings_store.path.write_text("{not json", encoding="utf-8")

    settings = settings_store.load()

    assert settings["focusPaths"] == []


def test_updates_are_persisted(settings_store: SettingsStore) -> None:
    settings = settings_store.load()

    settings_store.update_focus_paths(settings, [Path("/one"), "/two"])
    settings_store.update_sort_order(settings, SortOrder.BY_MODIFIED_DESC)

    stored = json.loads(settings_store.path.read_text(encoding="utf-8"))
    assert stored["focusPaths"] == ["/one", "/two"]
    assert stored["sortOrder"] == "MODIFIED"
