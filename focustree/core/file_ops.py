from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Sequence

from focustree.core.clipboard import ClipboardBuffer, ClipboardOperation
from focustree.core.errors import (
    CopyConflict,
    FocusTreeError,
    InvalidName,
    MoveError,
    NameConflict,
    SelfContainmentError,
    SourceMissing,
    wrap_error,
)
from focustree.core.fs_controller import FileSystemController
from focustree.core.logging import get_logger, log_event, log_warning
from focustree.core.path_set import is_within, normalize_path

logger = get_logger(__name__)

Confirmation = bool | Callable[[Sequence[Path]], bool]


@dataclass
class BatchReport:
    """Aggregate outcome of an operation applied to several paths."""

    succeeded: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failures: list[FocusTreeError] = field(default_factory=list)
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled


def _exists(path: Path) -> bool:
    return os.path.lexists(path)


def validate_name(name: str) -> str:
    if not name or name in {".", ".."}:
        raise InvalidName(name)
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(separator in name for separator in separators):
        raise InvalidName(name)
    return name


class FileOps:
    """File operations for the focused tree.

    Every mutation invalidates the affected folders through ``invalidate``.
    Batch operations never raise for a single bad item; they collect the
    failure in a BatchReport and carry on.
    Paths that leave their place (deleted, moved or renamed) are reported
    through ``on_paths_removed``.
    """

    def __init__(
        self,
        fs_controller: FileSystemController,
        *,
        invalidate: Callable[[Path | None], None],
        clipboard: ClipboardBuffer | None = None,
        on_paths_removed: Callable[[Sequence[Path]], None] | None = None,
    ) -> None:
        self._fs = fs_controller
        self._invalidate = invalidate
        self._on_paths_removed = on_paths_removed
        self.clipboard = clipboard if clipboard is not None else ClipboardBuffer()

    def new_file(self, directory: Path, name: str) -> Path:
        return self._create(directory, name, is_directory=False)

    def new_folder(self, directory: Path, name: str) -> Path:
        return self._create(directory, name, is_directory=True)

    def _create(self, directory: Path, name: str, *, is_directory: bool) -> Path:
        target = normalize_path(directory) / validate_name(name)
        if _exists(target):
            raise NameConflict(target)
        try:
            self._fs.create_path(target, is_directory=is_directory)
        except FileExistsError as exc:
            raise NameConflict(target) from exc
        except OSError as exc:
            raise wrap_error(
                exc,
                code="create_failed",
                message=f"Unable to create '{target.name}'",
            ) from exc
        log_event(logger, "fileops.created", path=target, is_directory=is_directory)
        self._invalidate(target.parent)
        return target

    def rename(self, path: Path, new_name: str) -> Path:
        source = normalize_path(path)
        if new_name == source.name:
            return source
        if not _exists(source):
            raise SourceMissing(source)
        destination = source.with_name(validate_name(new_name))
        if _exists(destination) and not self._same_entry(source, destination):
            raise NameConflict(destination)
        try:
            self._fs.rename_path(source, destination)
        except OSError as exc:
            raise wrap_error(
                exc,
                code="rename_failed",
                message=f"Unable to rename '{source.name}'",
            ) from exc
        log_event(logger, "fileops.renamed", source=source, destination=destination)
        self._invalidate(source.parent)
        self._removed([source])
        return destination

    def delete(self, paths: Iterable[Path], confirm: Confirmation) -> BatchReport:
        targets = self._unique(paths)
        report = BatchReport()
        if not targets:
            return report
        confirmed = confirm(targets) if callable(confirm) else bool(confirm)
        if not confirmed:
            report.cancelled = True
            return report
        touched: list[Path] = []
        for target in targets:
            if not _exists(target):
                report.skipped.append(target)
                continue
            try:
                trashed = self._fs.delete_path(target)
            except OSError as exc:
                error = wrap_error(
                    exc,
                    code="delete_failed",
                    message=f"Unable to delete '{target.name}'",
                )
                log_warning(logger, "fileops.delete_failed", path=target, error=str(exc))
                report.failures.append(error)
                continue
            log_event(logger, "fileops.deleted", path=target, trashed=trashed)
            report.succeeded.append(target)
            if target.parent not in touched:
                touched.append(target.parent)
        self._removed(report.succeeded)
        for directory in touched:
            self._invalidate(directory)
        return report

    def cut(self, paths: Iterable[Path]) -> None:
        self.clipboard.replace(self._unique(paths), ClipboardOperation.CUT)

    def copy(self, paths: Iterable[Path]) -> None:
        self.clipboard.replace(self._unique(paths), ClipboardOperation.COPY)

    def paste(self, target_dir: Path) -> BatchReport:
        report = BatchReport()
        if self.clipboard.is_empty:
            return report
        destination_dir = normalize_path(target_dir)
        operation = self.clipboard.operation
        touched: list[Path] = [destination_dir]
        for source in self.clipboard.paths:
            if not _exists(source):
                report.skipped.append(source)
                continue
            try:
                if operation is ClipboardOperation.CUT:
                    moved = self.move_into(source, destination_dir, invalidate=False)
                    if moved is None:
                        report.skipped.append(source)
                        continue
                    if source.parent not in touched:
                        touched.append(source.parent)
                    report.succeeded.append(moved)
                else:
                    report.succeeded.append(self.copy_into(source, destination_dir))
            except FocusTreeError as exc:
                log_warning(logger, "fileops.paste_failed", source=source, error=str(exc))
                report.failures.append(exc)
        if operation is ClipboardOperation.CUT:
            self.clipboard.clear()
        for directory in touched:
            self._invalidate(directory)
        return report

    def move_to_folder(self, path: Path, destination_dir: Path) -> Path | None:
        return self.move_into(normalize_path(path), normalize_path(destination_dir))

    def move_into(
        self,
        source: Path,
        destination_dir: Path,
        *,
        invalidate: bool = True,
    ) -> Path | None:
        """Move ``source`` into ``destination_dir``; None when it is already there."""
        destination = destination_dir / source.name
        if destination == source:
            return None
        if not _exists(source):
            raise SourceMissing(source)
        if is_within(destination_dir, source):
            raise SelfContainmentError(source, destination)
        if _exists(destination):
            raise MoveError(source, destination, detail="destination exists")
        try:
            self._fs.move_path(source, destination)
        except OSError as exc:
            raise MoveError(source, destination, detail=str(exc)) from exc
        log_event(logger, "fileops.moved", source=source, destination=destination)
        self._removed([source])
        if invalidate:
            self._invalidate(source.parent)
            self._invalidate(destination_dir)
        return destination

    def copy_into(self, source: Path, destination_dir: Path) -> Path:
        if not _exists(source):
            raise SourceMissing(source)
        destination = destination_dir / source.name
        if _exists(destination):
            raise CopyConflict(source, destination, detail="destination exists")
        if is_within(destination_dir, source):
            raise SelfContainmentError(source, destination)
        try:
            self._fs.copy_path(source, destination)
        except FileExistsError as exc:
            raise CopyConflict(source, destination, detail="destination exists") from exc
        except OSError as exc:
            raise wrap_error(
                exc,
                code="copy_failed",
                message=f"Unable to copy '{source.name}'",
            ) from exc
        log_event(logger, "fileops.copied", source=source, destination=destination)
        return destination

    def _removed(self, paths: Sequence[Path]) -> None:
        if paths and self._on_paths_removed is not None:
            self._on_paths_removed(list(paths))

    @staticmethod
    def _unique(paths: Iterable[Path]) -> list[Path]:
        unique: list[Path] = []
        for path in paths:
            target = normalize_path(path)
            if target not in unique:
                unique.append(target)
        return unique

    @staticmethod
    def _same_entry(first: Path, second: Path) -> bool:
        try:
            return os.path.samefile(first, second)
        except OSError:
            return False
