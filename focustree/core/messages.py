from __future__ import annotations

from typing import Sequence

from textual.message import Message

from focustree.core.commands import CommandId
from focustree.core.resources import Resource
from focustree.core.tree_model import TreeNode


class CommandRequest(Message):
    def __init__(
        self,
        command: CommandId,
        resource: Resource | None = None,
        selection: Sequence[Resource] = (),
    ) -> None:
        super().__init__()
        self.command = command
        self.resource = resource
        self.selection = tuple(selection)


class ContextMenuRequest(Message):
    def __init__(self, resource: Resource, selection: Sequence[Resource] = ()) -> None:
        super().__init__()
        self.resource = resource
        self.selection = tuple(selection)


class DragStartRequest(Message):
    def __init__(self, nodes: Sequence[TreeNode]) -> None:
        super().__init__()
        self.nodes = tuple(nodes)


class DropRequest(Message):
    def __init__(self, target: TreeNode | None) -> None:
        super().__init__()
        self.target = target


class WatchEventsPending(Message):
    """Posted from the watchdog thread; handled on the app's event loop."""
