from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ResourceKind(str, Enum):
    ROOT = "root"
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class Resource:
    """A tree item handed to commands: a focused root, a folder or a file."""

    kind: ResourceKind
    path: Path

    @property
    def is_root(self) -> bool:
        return self.kind is ResourceKind.ROOT

    @property
    def is_directory(self) -> bool:
        return self.kind is not ResourceKind.FILE

    @property
    def uri(self) -> str:
        return self.path.absolute().as_uri()

    @classmethod
    def from_path(cls, path: Path | str, *, is_root: bool = False) -> Resource:
        target = Path(path)
        if is_root:
            return cls(ResourceKind.ROOT, target)
        kind = ResourceKind.DIRECTORY if target.is_dir() else ResourceKind.FILE
        return cls(kind, target)


def directory_of(resource: Resource) -> Path:
    """Folder a create or paste lands in: the resource itself or its parent."""
    if resource.is_directory:
        return resource.path
    return resource.path.parent
