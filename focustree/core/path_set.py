from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence

FocusListener = Callable[[tuple[Path, ...]], None]


@dataclass(frozen=True, slots=True)
class FocusedRoot:
    path: Path
    added_order: int


def normalize_path(value: Path | str) -> Path:
    return Path(os.path.abspath(os.path.expanduser(os.fspath(value))))


def is_within(path: Path, ancestor: Path) -> bool:
    """True when ``path`` is ``ancestor`` or lies below it."""
    return path == ancestor or ancestor in path.parents


class PathSet:
    """Ordered, de-duplicated set of focused root folders."""

    def __init__(self, exists: Callable[[Path], bool] | None = None) -> None:
        self._roots: list[FocusedRoot] = []
        self._next_order = 0
        self._exists = exists or (lambda path: path.is_dir())
        self._listeners: list[FocusListener] = []

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(root.path for root in self._roots)

    @property
    def roots(self) -> tuple[FocusedRoot, ...]:
        return tuple(self._roots)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return normalize_path(path) in self.paths

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self):
        return iter(self.paths)

    def index(self, path: Path | str) -> int:
        target = normalize_path(path)
        for position, root in enumerate(self._roots):
            if root.path == target:
                return position
        return -1

    def subscribe(self, callback: FocusListener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)
        callback(self.paths)

    def unsubscribe(self, callback: FocusListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def add(self, path: Path | str) -> bool:
        target = normalize_path(path)
        if target in self.paths:
            return False
        self._roots.append(FocusedRoot(target, self._take_order()))
        self._notify()
        return True

    def remove(self, path: Path | str) -> bool:
        position = self.index(path)
        if position < 0:
            return False
        del self._roots[position]
        self._notify()
        return True

    def clear(self) -> None:
        if not self._roots:
            return
        self._roots = []
        self._notify()

    def reorder(self, ordered: Sequence[Path | str]) -> None:
        """Replace the order in one step, dropping folders gone from disk."""
        known = {root.path: root for root in self._roots}
        roots: list[FocusedRoot] = []
        for target in self._dedupe(ordered):
            if not self._exists(target):
                continue
            root = known.get(target) or FocusedRoot(target, self._take_order())
            roots.append(root)
        self._replace(roots)

    def set_all(self, paths: Iterable[Path | str]) -> None:
        """Restore from configuration, silently skipping missing folders."""
        self._next_order = 0
        roots = [
            FocusedRoot(target, self._take_order())
            for target in self._dedupe(paths)
            if self._exists(target)
        ]
        self._replace(roots)

    def move_up(self, path: Path | str) -> bool:
        position = self.index(path)
        if position <= 0:
            return False
        self._swap(position, position - 1)
        return True

    def move_down(self, path: Path | str) -> bool:
        position = self.index(path)
        if position < 0 or position >= len(self._roots) - 1:
            return False
        self._swap(position, position + 1)
        return True

    def _swap(self, first: int, second: int) -> None:
        roots = list(self._roots)
        roots[first], roots[second] = roots[second], roots[first]
        self._roots = roots
        self._notify()

    def _replace(self, roots: list[FocusedRoot]) -> None:
        if roots == self._roots:
            return
        self._roots = roots
        self._notify()

    def _take_order(self) -> int:
        order = self._next_order
        self._next_order += 1
        return order

    @staticmethod
    def _dedupe(paths: Iterable[Path | str]) -> list[Path]:
        seen: list[Path] = []
        for value in paths:
            target = normalize_path(value)
            if target not in seen:
                seen.append(target)
        return seen

    def _notify(self) -> None:
        snapshot = self.paths
        for callback in list(self._listeners):
            callback(snapshot)
