from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from focustree.core.fs_controller import FileSystemController
from focustree.core.session import FocusSession
from focustree.core.settings_store import SettingsStore
from tests.mocks import FakeObserver


@pytest.fixture
def observer() -> FakeObserver:
    return FakeObserver()


@pytest.fixture
def settings_store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "config" / "settings.json")


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def session_factory(
    settings_store: SettingsStore,
    observer: FakeObserver,
) -> Callable[..., FocusSession]:
    def factory(**kwargs) -> FocusSession:
        kwargs.setdefault("fs_controller", FileSystemController(use_trash=False))
        return FocusSession(
            settings_store,
            observer_factory=lambda: observer,
            **kwargs,
        )

    return factory
