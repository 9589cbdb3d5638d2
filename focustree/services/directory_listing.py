from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path

from focustree.core.errors import ListError
from focustree.core.sort_policy import SortOrder, sort_entries


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    full_path: Path
    is_directory: bool
    modified_at_millis: int


def is_entry_visible(name: str) -> bool:
    return not name.startswith(".")


def _read_entry(entry: os.DirEntry[str]) -> DirectoryEntry:
    path = Path(entry.path)
    try:
        stat_result = entry.stat()
    except OSError:
        # Dangling symlinks and entries that vanished mid-scan stay listed.
        return DirectoryEntry(entry.name, path, False, 0)
    return DirectoryEntry(
        name=entry.name,
        full_path=path,
        is_directory=stat.S_ISDIR(stat_result.st_mode),
        modified_at_millis=stat_result.st_mtime_ns // 1_000_000,
    )


class DirectoryLister:
    """Reads one directory level and orders it by the active sort order."""

    def list(self, directory: Path, sort_order: SortOrder) -> list[DirectoryEntry]:
        try:
            with os.scandir(directory) as scan:
                entries = [
                    _read_entry(entry)
                    for entry in scan
                    if is_entry_visible(entry.name)
                ]
        except OSError as exc:
            raise ListError(directory, detail=exc.strerror or str(exc)) from exc
        return sort_entries(entries, sort_order)
