from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from focustree.core.errors import ListError
from focustree.core.logging import get_logger, log_warning
from focustree.core.path_set import PathSet, is_within, normalize_path
from focustree.core.resources import Resource, ResourceKind
from focustree.core.sort_policy import SortOrder
from focustree.services.directory_listing import DirectoryEntry, DirectoryLister

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TreeNode:
    path: Path
    is_root: bool
    is_directory: bool
    modified_at_millis: int = 0

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    @property
    def kind(self) -> ResourceKind:
        if self.is_root:
            return ResourceKind.ROOT
        return ResourceKind.DIRECTORY if self.is_directory else ResourceKind.FILE

    def to_resource(self) -> Resource:
        return Resource(self.kind, self.path)

    @classmethod
    def from_entry(cls, entry: DirectoryEntry) -> TreeNode:
        return cls(
            path=entry.full_path,
            is_root=False,
            is_directory=entry.is_directory,
            modified_at_millis=entry.modified_at_millis,
        )


@dataclass(frozen=True, slots=True)
class TreeChange:
    """Invalidation of one subtree, or of the whole tree when ``path`` is None."""

    path: Path | None = None

    @property
    def is_full(self) -> bool:
        return self.path is None


TreeListener = Callable[[TreeChange], None]


def _modified_millis(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns // 1_000_000
    except OSError:
        return 0


class TreeModel:
    """Two-level lazy tree over the focused roots.

    Roots come from the PathSet in its order; children are read from disk on
    every request, so there is no cache to go stale between refreshes.
    """

    def __init__(
        self,
        path_set: PathSet,
        *,
        lister: DirectoryLister | None = None,
        sort_order: SortOrder = SortOrder.MANUAL,
    ) -> None:
        self._path_set = path_set
        self._lister = lister or DirectoryLister()
        self._sort_order = sort_order
        self._listeners: list[TreeListener] = []
        self._path_set.subscribe(self._handle_focus_change)

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    def subscribe(self, callback: TreeListener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback: TreeListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def close(self) -> None:
        self._path_set.unsubscribe(self._handle_focus_change)
        self._listeners.clear()

    def get_roots(self) -> list[TreeNode]:
        return [
            TreeNode(path, True, True, _modified_millis(path))
            for path in self._path_set.paths
        ]

    def get_children(self, node: TreeNode) -> list[TreeNode]:
        if not node.is_directory:
            return []
        try:
            entries = self._lister.list(node.path, self._sort_order)
        except ListError as exc:
            log_warning(logger, "tree.list_failed", path=node.path, error=exc.detail)
            return []
        return [TreeNode.from_entry(entry) for entry in entries]

    def set_sort_order(self, order: SortOrder) -> None:
        self._sort_order = order
        self.invalidate()

    def invalidate(self, path: Path | None = None) -> None:
        change = TreeChange(path)
        for callback in list(self._listeners):
            callback(change)

    def root_for(self, path: Path | str) -> Path | None:
        target = normalize_path(path)
        for root in self._path_set.paths:
            if is_within(target, root):
                return root
        return None

    def locate(self, path: Path | str) -> list[TreeNode] | None:
        """Node chain from the containing focused root down to ``path``."""
        target = normalize_path(path)
        root = self.root_for(target)
        if root is None:
            return None
        chain = [TreeNode(root, True, True, _modified_millis(root))]
        current = root
        for part in target.relative_to(root).parts:
            current = current / part
            is_dir = os.path.isdir(current)
            if current != target and not is_dir:
                return None
            chain.append(TreeNode(current, False, is_dir, _modified_millis(current)))
        if not os.path.lexists(target):
            return None
        return chain

    def _handle_focus_change(self, _paths: tuple[Path, ...]) -> None:
        self.invalidate()
