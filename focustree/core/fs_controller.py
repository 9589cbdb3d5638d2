from __future__ import annotations

import errno
import shutil
from pathlib import Path
from typing import Callable

from send2trash import send2trash
from send2trash.exceptions import TrashPermissionError


class FileSystemController:
    """Encapsulates file-system mutations so the tree stays lean.

    Nothing here overwrites: every target is expected to be free, and the
    callers decide what an existing target means.
    """

    def __init__(
        self,
        *,
        use_trash: bool = True,
        trash: Callable[[str], None] = send2trash,
    ) -> None:
        self.use_trash = use_trash
        self._trash = trash

    def create_path(self, target: Path, *, is_directory: bool) -> Path:
        if is_directory:
            target.mkdir()
        else:
            # "x" mode fails instead of truncating an entry created meanwhile.
            with target.open("x", encoding="utf-8"):
                pass
        return target

    def delete_path(self, target: Path) -> bool:
        """Remove ``target``; returns True when it went to the trash."""
        if self.use_trash:
            try:
                self._trash(str(target))
                return True
            except TrashPermissionError:
                # No trash on this volume; fall through to a permanent delete.
                pass
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        return False

    def rename_path(self, source: Path, destination: Path) -> Path:
        if not source.exists() and not source.is_symlink():
            raise FileNotFoundError(f"{source} does not exist")
        if source == destination:
            return destination
        source.rename(destination)
        return destination

    def move_path(self, source: Path, destination: Path) -> Path:
        try:
            source.rename(destination)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
            shutil.move(str(source), str(destination))
        return destination

    def copy_path(self, source: Path, destination: Path) -> Path:
        if source.is_dir() and not source.is_symlink():
            shutil.copytree(source, destination, symlinks=True)
        else:
            shutil.copy2(source, destination, follow_symlinks=False)
        return destination
