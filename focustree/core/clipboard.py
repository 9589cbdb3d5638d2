from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence


class ClipboardOperation(str, Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass
class ClipboardBuffer:
    paths: tuple[Path, ...] = field(default_factory=tuple)
    operation: ClipboardOperation | None = None

    @property
    def is_empty(self) -> bool:
        return not self.paths or self.operation is None

    def replace(self, paths: Iterable[Path], operation: ClipboardOperation) -> None:
        unique: list[Path] = []
        for path in paths:
            if path not in unique:
                unique.append(path)
        self.paths = tuple(unique)
        self.operation = operation if unique else None

    def clear(self) -> None:
        self.paths = ()
        self.operation = None


def clipboard_text(paths: Sequence[Path | str]) -> str:
    """One path per line, without a trailing newline."""
    return "\n".join(os.fspath(path) for path in paths)


def relative_clipboard_text(paths: Sequence[Path | str], root: Path | None) -> str:
    lines: list[str] = []
    for value in paths:
        path = Path(value)
        if root is not None and root in path.parents:
            lines.append(os.fspath(path.relative_to(root)))
        else:
            lines.append(os.fspath(path))
    return "\n".join(lines)


def copied_status(count: int, *, relative: bool = False) -> str:
    noun = "relative path" if relative else "path"
    if count == 1:
        return f"{noun.capitalize()} copied"
    return f"{count} {noun}s copied"
