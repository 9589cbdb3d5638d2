from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Sequence

from focustree.core.bridges import ExternalCommandBus
from focustree.core.drag_drop import DragDropController
from focustree.core.errors import FocusTreeError
from focustree.core.file_ops import FileOps
from focustree.core.fs_controller import FileSystemController
from focustree.core.fs_watcher import WatchCoordinator, WatchdogObserver
from focustree.core.logging import get_logger, log_event
from focustree.core.path_set import PathSet, is_within, normalize_path
from focustree.core.settings_store import SettingsStore
from focustree.core.sort_policy import SortOrder, normalize_sort_order
from focustree.core.tree_model import TreeModel
from focustree.services.directory_listing import DirectoryLister

logger = get_logger(__name__)


class FocusSession:
    """Everything one activation of the panel owns.

    The focused roots, the tree model, the live watches and the clipboard
    buffer are created with the session and torn down by ``deactivate``.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        *,
        fs_controller: FileSystemController | None = None,
        lister: DirectoryLister | None = None,
        wake: Callable[[], None] | None = None,
        on_root_lost: Callable[[Path], None] | None = None,
        observer_factory: Callable[[], object] = WatchdogObserver,
    ) -> None:
        self.settings_store = settings_store
        self.settings: dict[str, Any] = {}
        self.path_set = PathSet()
        self.tree_model = TreeModel(self.path_set, lister=lister)
        self.watchers = WatchCoordinator(
            self.path_set,
            self.tree_model,
            wake=wake,
            on_root_lost=on_root_lost,
            observer_factory=observer_factory,
        )
        self.fs_controller = fs_controller or FileSystemController()
        self.file_ops = FileOps(
            self.fs_controller,
            invalidate=self.tree_model.invalidate,
            on_paths_removed=self._forget_roots,
        )
        self.drag_drop = DragDropController(
            self.file_ops,
            invalidate=self.tree_model.invalidate,
        )
        self.bus = ExternalCommandBus()
        self._on_root_lost = on_root_lost
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def workspace_root(self) -> Path:
        configured = str(self.settings.get("workspaceRoot") or "")
        return normalize_path(configured) if configured else Path.cwd()

    def restore(self) -> None:
        """Load settings and rebuild the focused roots from them."""
        self.settings = self.settings_store.load()
        self.fs_controller.use_trash = bool(self.settings.get("useTrash", True))
        self.tree_model.set_sort_order(normalize_sort_order(self.settings.get("sortOrder")))
        self.path_set.set_all(self.settings.get("focusPaths", []))
        log_event(
            logger,
            "session.restored",
            focus_paths=[str(path) for path in self.path_set.paths],
            sort_order=self.tree_model.sort_order.value,
        )

    def activate(self, *, watch: bool = True) -> None:
        if self._active:
            return
        self.restore()
        # Subscribing persists the restored set, minus folders that vanished.
        self.path_set.subscribe(self._persist_focus)
        if watch:
            self.watchers.start()
        self._active = True

    def deactivate(self) -> None:
        self.watchers.stop()
        self.path_set.unsubscribe(self._persist_focus)
        self.file_ops.clipboard.clear()
        self._active = False

    def focus(self, path: Path | str) -> bool:
        target = normalize_path(path)
        if not target.is_dir():
            raise FocusTreeError(
                code="not_a_directory",
                message=f"'{target}' is not a folder",
            )
        return self.path_set.add(target)

    def unfocus(self, path: Path | str) -> bool:
        return self.path_set.remove(path)

    def clear_focus(self) -> None:
        self.path_set.clear()

    def move_root_up(self, path: Path | str) -> bool:
        return self.path_set.move_up(path)

    def move_root_down(self, path: Path | str) -> bool:
        return self.path_set.move_down(path)

    def set_sort_order(self, order: SortOrder | str) -> SortOrder:
        normalized = normalize_sort_order(order)
        self.tree_model.set_sort_order(normalized)
        self.settings_store.update_sort_order(self.settings, normalized)
        return normalized

    def _persist_focus(self, paths: tuple[Path, ...]) -> None:
        values = [str(path) for path in paths]
        if self.settings.get("focusPaths") == values:
            return
        self.settings_store.update_focus_paths(self.settings, values)

    def _forget_roots(self, removed: Sequence[Path]) -> None:
        """Unfocus roots that an operation here deleted or moved away."""
        for root in self.path_set.paths:
            if not any(is_within(root, path) for path in removed):
                continue
            log_event(logger, "session.root_removed", root=root)
            self.path_set.remove(root)
            if self._on_root_lost is not None:
                self._on_root_lost(root)
