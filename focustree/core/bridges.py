from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from focustree.core.errors import CommandUnavailable
from focustree.core.logging import get_logger, log_event
from focustree.core.resources import Resource

logger = get_logger(__name__)

ExternalHandler = Callable[..., object]

OPEN_FILE_COMMAND = "focustree.openFile"


class ExternalCommandBus:
    """Registry of commands owned by other tools, invoked by name."""

    def __init__(self) -> None:
        self._handlers: dict[str, ExternalHandler] = {}

    def register(self, name: str, handler: ExternalHandler) -> None:
        self._handlers[name] = handler

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def is_registered(self, name: str) -> bool:
        return name in self._handlers

    def execute(self, name: str, *args: object) -> object:
        handler = self._handlers.get(name)
        if handler is None:
            raise CommandUnavailable(name)
        log_event(logger, "bridge.executed", command=name)
        return handler(*args)


class BridgeShape(str, Enum):
    URI = "uri"
    URI_LIST = "uri_list"


@dataclass(frozen=True, slots=True)
class Bridge:
    external_command: str
    shape: BridgeShape

    def arguments(self, resource: Resource) -> tuple[object, ...]:
        if self.shape is BridgeShape.URI_LIST:
            return ([resource.uri],)
        return (resource.uri,)

    def forward(self, bus: ExternalCommandBus, resource: Resource) -> object:
        return bus.execute(self.external_command, *self.arguments(resource))


def reveal_in_file_manager(path: Path) -> None:
    target = str(path)
    if sys.platform == "darwin":
        subprocess.run(["open", "-R", target], check=False)
    elif sys.platform == "win32":
        subprocess.run(["explorer", f"/select,{target}"], check=False)
    else:
        folder = target if path.is_dir() else str(path.parent)
        subprocess.run(["xdg-open", folder], check=False)
