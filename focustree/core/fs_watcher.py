from __future__ import annotations

import os
import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers.api import ObservedWatch

from focustree.core.logging import get_logger, log_event, log_warning
from focustree.core.path_set import PathSet
from focustree.core.tree_model import TreeModel

if TYPE_CHECKING:
    from watchdog.observers import Observer as WatchdogObserver
else:
    from watchdog.observers import Observer as WatchdogObserver

logger = get_logger(__name__)


class WatchEventKind(str, Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"


_EVENT_KINDS = {kind.value: kind for kind in WatchEventKind}


@dataclass(frozen=True, slots=True)
class WatchEvent:
    root: Path
    kind: WatchEventKind
    path: Path
    dest_path: Path | None = None

    def loses_root(self) -> bool:
        if self.kind in {WatchEventKind.DELETED, WatchEventKind.MOVED}:
            return self.path == self.root
        return False


def _event_path(value: str | bytes) -> Path:
    return Path(os.path.abspath(os.fsdecode(value)))


class RootChangeHandler(FileSystemEventHandler):
    """Watchdog handler that turns raw events for one root into WatchEvents."""

    def __init__(self, root: Path, post: Callable[[WatchEvent], None]) -> None:
        self._root = root
        self._post = post

    @property
    def root(self) -> Path:
        return self._root

    def on_any_event(self, event: FileSystemEvent) -> None:  # type: ignore[override]
        kind = _EVENT_KINDS.get(event.event_type)
        if kind is None:
            return
        dest = getattr(event, "dest_path", "") or None
        self._post(
            WatchEvent(
                root=self._root,
                kind=kind,
                path=_event_path(event.src_path),
                dest_path=_event_path(dest) if dest else None,
            )
        )


class RootParentHandler(FileSystemEventHandler):
    """Watches the folder holding focused roots for a root being moved or deleted.

    A recursive watch on the root itself reports nothing when the root is
    renamed away, so the parent is watched (non-recursively) as well.
    """

    def __init__(self, roots: set[Path], post: Callable[[WatchEvent], None]) -> None:
        self._roots = roots
        self._post = post

    def on_any_event(self, event: FileSystemEvent) -> None:  # type: ignore[override]
        kind = _EVENT_KINDS.get(event.event_type)
        if kind not in {WatchEventKind.DELETED, WatchEventKind.MOVED}:
            return
        path = _event_path(event.src_path)
        if path not in self._roots:
            return
        dest = getattr(event, "dest_path", "") or None
        self._post(
            WatchEvent(
                root=path,
                kind=kind,
                path=path,
                dest_path=_event_path(dest) if dest else None,
            )
        )


class WatchCoordinator:
    """Keeps exactly one recursive watch per focused root.

    Each distinct parent folder of a root also gets one non-recursive watch so
    that renaming or trashing a root from outside is noticed.

    Events arrive on the observer thread and are queued; ``process_pending``
    applies them in order on the owner's thread. ``wake`` is called (at most
    once per batch) to ask the owner to run ``process_pending``; without it,
    events are applied as soon as they are queued.
    """

    def __init__(
        self,
        path_set: PathSet,
        tree_model: TreeModel,
        *,
        wake: Callable[[], None] | None = None,
        on_root_lost: Callable[[Path], None] | None = None,
        observer_factory: Callable[[], object] = WatchdogObserver,
    ) -> None:
        self._path_set = path_set
        self._tree_model = tree_model
        self._wake = wake
        self._on_root_lost = on_root_lost
        self._observer_factory = observer_factory

        self._observer: WatchdogObserver | None = None  # type: ignore
        self._watches: dict[Path, ObservedWatch] = {}
        self._parent_watches: dict[Path, ObservedWatch] = {}
        self._inbox: deque[WatchEvent] = deque()
        self._inbox_lock = threading.Lock()
        self._wake_pending = False

    @property
    def watched_roots(self) -> tuple[Path, ...]:
        return tuple(self._watches)

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        observer = self._observer_factory()
        observer.daemon = True  # type: ignore[attr-defined]
        observer.start()  # type: ignore[attr-defined]
        self._observer = observer  # type: ignore[assignment]
        self._path_set.subscribe(self._handle_focus_change)

    def stop(self) -> None:
        self._path_set.unsubscribe(self._handle_focus_change)
        self._dispose_watches()
        observer = self._observer
        self._observer = None
        if observer is not None:
            observer.stop()
            observer.join(timeout=1)
        with self._inbox_lock:
            self._inbox.clear()
            self._wake_pending = False

    def enqueue(self, event: WatchEvent) -> None:
        with self._inbox_lock:
            self._inbox.append(event)
            if self._wake_pending:
                return
            self._wake_pending = True
        if self._wake is None:
            self.process_pending()
            return
        try:
            self._wake()
        except Exception:
            with self._inbox_lock:
                self._wake_pending = False
            raise

    def process_pending(self) -> int:
        """Apply queued events in arrival order; returns how many were handled."""
        with self._inbox_lock:
            events = list(self._inbox)
            self._inbox.clear()
            self._wake_pending = False
        for event in events:
            self._apply(event)
        return len(events)

    def _apply(self, event: WatchEvent) -> None:
        root = event.root
        if root not in self._path_set.paths:
            return
        if event.loses_root() or not root.is_dir():
            log_event(logger, "watch.root_lost", root=root, kind=event.kind.value)
            self._path_set.remove(root)
            if self._on_root_lost is not None:
                self._on_root_lost(root)
            return
        self._tree_model.invalidate(root)

    def _handle_focus_change(self, paths: tuple[Path, ...]) -> None:
        self._resubscribe(paths)

    def _resubscribe(self, paths: tuple[Path, ...]) -> None:
        self._dispose_watches()
        observer = self._observer
        if observer is None:
            return
        for root in paths:
            if not root.is_dir():
                continue
            handler = RootChangeHandler(root, self.enqueue)
            try:
                self._watches[root] = observer.schedule(handler, str(root), recursive=True)
            except OSError as exc:
                log_warning(logger, "watch.schedule_failed", root=root, error=str(exc))
        self._watch_parents(tuple(self._watches))
        log_event(logger, "watch.resubscribed", roots=[str(root) for root in self._watches])

    def _watch_parents(self, roots: tuple[Path, ...]) -> None:
        observer = self._observer
        if observer is None:
            return
        by_parent: dict[Path, set[Path]] = {}
        for root in roots:
            if root.parent != root:
                by_parent.setdefault(root.parent, set()).add(root)
        for parent, children in by_parent.items():
            handler = RootParentHandler(children, self.enqueue)
            try:
                self._parent_watches[parent] = observer.schedule(
                    handler, str(parent), recursive=False
                )
            except OSError as exc:
                log_warning(logger, "watch.schedule_failed", root=parent, error=str(exc))

    def _dispose_watches(self) -> None:
        observer = self._observer
        watches = list(self._watches.items()) + list(self._parent_watches.items())
        self._watches = {}
        self._parent_watches = {}
        if observer is None:
            return
        for root, watch in watches:
            try:
                observer.unschedule(watch)
            except (KeyError, OSError) as exc:
                # A watch on a deleted folder may already be gone.
                log_warning(logger, "watch.unschedule_failed", root=root, error=str(exc))
