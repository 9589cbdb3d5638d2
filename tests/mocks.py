from __future__ import annotations

from pathlib import Path

from focustree.core.tree_model import TreeChange


class FakeWatch:
    def __init__(self, path: str, recursive: bool) -> None:
        self.path = path
        self.is_recursive = recursive


class FakeObserver:
    """Stands in for the watchdog observer; nothing touches inotify."""

    def __init__(self) -> None:
        self.daemon = False
        self.started = False
        self.stopped = False
        self.scheduled: dict[FakeWatch, object] = {}

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def join(self, timeout: float | None = None) -> None:
        return None

    def schedule(self, handler: object, path: str, recursive: bool = False) -> FakeWatch:
        watch = FakeWatch(path, recursive)
        self.scheduled[watch] = handler
        return watch

    def unschedule(self, watch: FakeWatch) -> None:
        del self.scheduled[watch]

    def watched_paths(self) -> list[str]:
        return [watch.path for watch in self.scheduled if watch.is_recursive]

    def parent_paths(self) -> list[str]:
        return [watch.path for watch in self.scheduled if not watch.is_recursive]

    def handler_for(self, path: str, recursive: bool) -> object:
        for watch, handler in self.scheduled.items():
            if watch.path == path and watch.is_recursive == recursive:
                return handler
        raise KeyError(path)


class ChangeRecorder:
    def __init__(self) -> None:
        self.changes: list[TreeChange] = []

    def __call__(self, change: TreeChange) -> None:
        self.changes.append(change)

    @property
    def paths(self) -> list[Path | None]:
        return [change.path for change in self.changes]


def make_tree(base: Path, layout: dict[str, str | None]) -> None:
    """Create files (str content) and folders (None) below ``base``."""
    for relative, content in layout.items():
        target = base / relative
        if content is None:
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
