from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from focustree.core.errors import FocusTreeError, InvalidDropTarget
from focustree.core.file_ops import BatchReport, FileOps
from focustree.core.logging import get_logger, log_warning
from focustree.core.path_set import normalize_path
from focustree.core.tree_model import TreeNode

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DragPayload:
    paths: tuple[Path, ...]


class DragDropController:
    """Maps a multi-item drag onto the same move used by move-to-folder."""

    def __init__(
        self,
        file_ops: FileOps,
        *,
        invalidate: Callable[[Path | None], None],
    ) -> None:
        self._file_ops = file_ops
        self._invalidate = invalidate

    def handle_drag(self, nodes: Sequence[TreeNode]) -> DragPayload | None:
        # Roots are reordered with move up/down, never dragged.
        paths = tuple(node.path for node in nodes if not node.is_root)
        if not paths:
            return None
        return DragPayload(paths)

    def resolve_drop_directory(self, target: TreeNode | None) -> Path:
        if target is None:
            raise InvalidDropTarget("Cannot drop here - select a folder as drop target")
        path = normalize_path(target.path)
        if path.is_dir():
            return path
        if path.exists():
            return path.parent
        raise InvalidDropTarget("Invalid drop target", detail=f"{path} does not exist")

    def handle_drop(
        self,
        payload: DragPayload | None,
        target: TreeNode | None,
    ) -> BatchReport:
        report = BatchReport()
        if payload is None or not payload.paths:
            return report
        destination_dir = self.resolve_drop_directory(target)
        touched: list[Path] = []
        for value in payload.paths:
            source = normalize_path(value)
            try:
                moved = self._file_ops.move_into(source, destination_dir, invalidate=False)
            except FocusTreeError as exc:
                log_warning(
                    logger,
                    "dragdrop.rejected",
                    source=source,
                    destination=destination_dir,
                    code=exc.code,
                )
                report.failures.append(exc)
                continue
            if moved is None:
                report.skipped.append(source)
                continue
            report.succeeded.append(moved)
            if source.parent not in touched:
                touched.append(source.parent)
        if report.succeeded:
            touched.append(destination_dir)
        for directory in touched:
            self._invalidate(directory)
        return report
