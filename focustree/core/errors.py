from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

Severity = Literal["error", "warning", "information"]

DEFAULT_SEVERITY_BY_CODE: dict[str, Severity] = {
    "paste_nothing": "information",
    "invalid_drop_target": "warning",
    "self_containment": "warning",
}


@dataclass
class FocusTreeError(Exception):
    code: str
    message: str
    detail: str | None = None
    severity: Severity = "error"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class ListError(FocusTreeError):
    """Directory could not be opened for listing."""

    def __init__(self, path: Path, detail: str | None = None) -> None:
        super().__init__(
            code="list_failed",
            message=f"Unable to read '{path}'",
            detail=detail,
        )
        self.path = path


class NameConflict(FocusTreeError):
    def __init__(self, target: Path) -> None:
        super().__init__(
            code="name_conflict",
            message=f"'{target.name}' already exists in {target.parent}",
        )
        self.target = target


class InvalidName(FocusTreeError):
    def __init__(self, name: str) -> None:
        super().__init__(code="invalid_name", message=f"Invalid name '{name}'")
        self.name = name


class MoveError(FocusTreeError):
    def __init__(
        self,
        source: Path,
        destination: Path,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            code="move_failed",
            message=f"Cannot move '{source.name}' to {destination.parent}",
            detail=detail,
        )
        self.source = source
        self.destination = destination


class CopyConflict(FocusTreeError):
    def __init__(
        self,
        source: Path,
        destination: Path,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            code="copy_conflict",
            message=f"Cannot copy '{source.name}' to {destination.parent}",
            detail=detail,
        )
        self.source = source
        self.destination = destination


class InvalidDropTarget(FocusTreeError):
    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(
            code="invalid_drop_target",
            message=message,
            detail=detail,
            severity="warning",
        )


class SelfContainmentError(FocusTreeError):
    def __init__(self, source: Path, destination: Path) -> None:
        super().__init__(
            code="self_containment",
            message=f"Cannot move '{source.name}' into itself",
            severity="warning",
        )
        self.source = source
        self.destination = destination


class SourceMissing(FocusTreeError):
    def __init__(self, source: Path) -> None:
        super().__init__(
            code="source_missing",
            message=f"'{source}' no longer exists",
        )
        self.source = source


class CommandUnavailable(FocusTreeError):
    def __init__(self, command: str) -> None:
        super().__init__(
            code="command_unavailable",
            message=f"Command '{command}' is not available",
            severity="warning",
        )
        self.command = command


def format_error(error: BaseException) -> tuple[str, Severity]:
    if isinstance(error, FocusTreeError):
        prefix = f"[{error.code}] " if error.code else ""
        severity = DEFAULT_SEVERITY_BY_CODE.get(error.code, error.severity)
        return f"{prefix}{error}", severity
    return f"{error}", "error"


def wrap_error(
    error: BaseException,
    *,
    code: str,
    message: str,
    severity: Severity = "error",
) -> FocusTreeError:
    if isinstance(error, FocusTreeError):
        return error
    detail = str(error)
    return FocusTreeError(code=code, message=message, detail=detail, severity=severity)
