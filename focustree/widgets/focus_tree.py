from __future__ import annotations

from pathlib import Path

from rich.text import Text
from textual import on
from textual.binding import Binding
from textual.widgets import Tree
from textual.widgets.tree import TreeNode as UITreeNode

from focustree.core.commands import CommandId
from focustree.core.messages import (
    CommandRequest,
    ContextMenuRequest,
    DragStartRequest,
    DropRequest,
)
from focustree.core.path_set import is_within
from focustree.core.resources import Resource
from focustree.core.tree_model import TreeChange, TreeModel, TreeNode

SELECTION_MARKER = "● "

NodeKey = tuple[Path, Path]


class FocusTree(Tree[TreeNode]):
    """Sidebar tree of focused folders, children loaded on expansion."""

    BINDINGS = [
        Binding("k", "cursor_up", "Cursor up", show=False),
        Binding("j", "cursor_down", "Cursor down", show=False),
        Binding("space", "toggle_select", "Select", show=False),
        Binding("f", "command('focusOnFolder')", "Focus", show=True),
        Binding("X", "command('removeFocusedFolder')", "Unfocus", show=False),
        Binding("ctrl+up", "command('moveUp')", "Root up", show=False),
        Binding("ctrl+down", "command('moveDown')", "Root down", show=False),
        Binding("R", "command('refresh')", "Refresh", show=False),
        Binding("s", "command('sort')", "Sort", show=True),
        Binding("a", "command('newFile')", "New file", show=True),
        Binding("A", "command('newFolder')", "New folder", show=False),
        Binding("r", "command('rename')", "Rename", show=False),
        Binding("delete", "command('delete')", "Delete", show=True),
        Binding("x", "command('cut')", "Cut", show=False),
        Binding("c", "command('copy')", "Copy", show=False),
        Binding("v", "command('paste')", "Paste", show=True),
        Binding("M", "command('moveToFolder')", "Move to", show=False),
        Binding("y", "command('copyPath')", "Copy path", show=False),
        Binding("Y", "command('copyRelativePath')", "Copy relative", show=False),
        Binding("o", "command('revealInFinder')", "Reveal", show=False),
        Binding("m", "pick_up", "Drag", show=False),
        Binding("p", "drop", "Drop", show=False),
        Binding("full_stop", "context_menu", "Menu", show=True),
    ]

    def __init__(self, model: TreeModel, *, id: str | None = None) -> None:
        super().__init__("Focused", id=id)
        self.show_root = False
        self.guide_depth = 2
        self._tree_model = model
        # Keyed by (focused root, path): a folder inside two roots has two nodes.
        self._ui_nodes: dict[NodeKey, UITreeNode[TreeNode]] = {}
        self._expanded_keys: set[NodeKey] = set()
        self._seen_roots: set[Path] = set()
        self._selected_paths: set[Path] = set()
        self._populated_now: set[NodeKey] = set()

    def on_mount(self) -> None:
        self.border_title = "Focused Folders"
        self._tree_model.subscribe(self._handle_tree_change)
        self.reload_roots()

    def on_unmount(self) -> None:
        self._tree_model.unsubscribe(self._handle_tree_change)

    def reload_roots(self) -> None:
        cursor = self._key_of(self.cursor_node) if self.cursor_node is not None else None
        self.clear()
        self._ui_nodes = {}
        self._populated_now.clear()
        roots = self._tree_model.get_roots()
        root_paths = {node.path for node in roots}
        self._selected_paths &= self._live_paths(root_paths)
        self._expanded_keys = {
            key
            for key in self._expanded_keys
            if key[0] in root_paths and key[1].is_dir()
        }
        for node in roots:
            key = (node.path, node.path)
            ui_node = self.root.add(self._label(node), data=node, allow_expand=True)
            self._ui_nodes[key] = ui_node
            if node.path not in self._seen_roots:
                # New roots open expanded, like a freshly pinned folder.
                self._seen_roots.add(node.path)
                self._expanded_keys.add(key)
            if key in self._expanded_keys:
                ui_node.expand()
        self._seen_roots &= root_paths
        if cursor is not None and cursor in self._ui_nodes:
            self.move_cursor(self._ui_nodes[cursor])

    def refresh_subtree(self, path: Path) -> None:
        for key, ui_node in list(self._ui_nodes.items()):
            if key[1] != path or self._ui_nodes.get(key) is not ui_node:
                continue
            if ui_node.is_expanded:
                self._populate(ui_node, key[0])

    def reveal(self, chain: list[TreeNode]) -> None:
        root = chain[0].path
        for node in chain[:-1]:
            key = (root, node.path)
            self._expanded_keys.add(key)
            ui_node = self._ui_nodes.get(key)
            if ui_node is None:
                return
            if not ui_node.is_expanded:
                # Populated right here; the queued expansion event must not redo it.
                self._populated_now.add(key)
                ui_node.expand()
            self._populate(ui_node, root)
        target = self._ui_nodes.get((root, chain[-1].path))
        if target is not None:
            self.move_cursor(target)
            self.scroll_to_node(target)

    def selected_resources(self) -> list[Resource]:
        resources = [node.to_resource() for node in self._selected_nodes()]
        if resources:
            return resources
        current = self._cursor_data()
        return [current.to_resource()] if current is not None else []

    def _selected_nodes(self) -> list[TreeNode]:
        nodes: list[TreeNode] = []
        seen: set[Path] = set()
        for (_, path), ui_node in self._ui_nodes.items():
            if path in self._selected_paths and path not in seen and ui_node.data is not None:
                seen.add(path)
                nodes.append(ui_node.data)
        return nodes

    def _key_of(self, ui_node: UITreeNode[TreeNode]) -> NodeKey | None:
        """Key of a live node; None for the hidden root or a node dropped by a reload."""
        top = ui_node
        while top.parent is not None and top.parent is not self.root:
            top = top.parent
        if top.parent is not self.root or top.data is None or ui_node.data is None:
            return None
        return (top.data.path, ui_node.data.path)

    def _populate(self, ui_node: UITreeNode[TreeNode], root: Path) -> None:
        node = ui_node.data
        if node is None:
            return
        below = [
            key
            for key in self._ui_nodes
            if key[0] == root and key[1] != node.path and is_within(key[1], node.path)
        ]
        for key in below:
            del self._ui_nodes[key]
        ui_node.remove_children()
        children = self._tree_model.get_children(node)
        self._expanded_keys = {
            key
            for key in self._expanded_keys
            if not (
                key[0] == root
                and key[1] != node.path
                and is_within(key[1], node.path)
                and not key[1].is_dir()
            )
        }
        for child in children:
            child_key = (root, child.path)
            child_ui = ui_node.add(
                self._label(child),
                data=child,
                allow_expand=child.is_directory,
            )
            self._ui_nodes[child_key] = child_ui
            if child.is_directory and child_key in self._expanded_keys:
                child_ui.expand()

    def _handle_tree_change(self, change: TreeChange) -> None:
        if change.path is None:
            self.reload_roots()
        else:
            self.refresh_subtree(change.path)

    @on(Tree.NodeExpanded)
    def _handle_expanded(self, event: Tree.NodeExpanded[TreeNode]) -> None:
        event.stop()
        key = self._key_of(event.node)
        if key is None or self._ui_nodes.get(key) is not event.node:
            # Node was replaced by a reload after the event was queued.
            return
        self._expanded_keys.add(key)
        if key in self._populated_now:
            self._populated_now.discard(key)
            return
        self._populate(event.node, key[0])

    @on(Tree.NodeCollapsed)
    def _handle_collapsed(self, event: Tree.NodeCollapsed[TreeNode]) -> None:
        event.stop()
        key = self._key_of(event.node)
        if key is not None:
            self._expanded_keys.discard(key)

    def _label(self, node: TreeNode) -> Text:
        name = f"{node.name}/" if node.is_directory else node.name
        if node.path in self._selected_paths:
            name = SELECTION_MARKER + name
        style = "bold" if node.is_root else ("" if not node.is_directory else "cyan")
        return Text(name, style=style)

    def _cursor_data(self) -> TreeNode | None:
        cursor = self.cursor_node
        if cursor is None:
            return None
        return cursor.data

    def _live_paths(self, root_paths: set[Path]) -> set[Path]:
        return {
            path
            for path in self._selected_paths
            if any(is_within(path, root) for root in root_paths)
        }

    def action_toggle_select(self) -> None:
        cursor = self.cursor_node
        if cursor is None or cursor.data is None:
            return
        path = cursor.data.path
        if path in self._selected_paths:
            self._selected_paths.discard(path)
        else:
            self._selected_paths.add(path)
        cursor.set_label(self._label(cursor.data))

    def action_command(self, command: str) -> None:
        current = self._cursor_data()
        resource = current.to_resource() if current is not None else None
        selection = [node.to_resource() for node in self._selected_nodes()]
        self.post_message(CommandRequest(CommandId(command), resource, selection))

    def action_context_menu(self) -> None:
        current = self._cursor_data()
        if current is None:
            return
        selection = [node.to_resource() for node in self._selected_nodes()]
        self.post_message(ContextMenuRequest(current.to_resource(), selection))

    def action_pick_up(self) -> None:
        nodes = self._selected_nodes()
        if not nodes:
            current = self._cursor_data()
            nodes = [current] if current is not None else []
        self.post_message(DragStartRequest(nodes))

    def action_drop(self) -> None:
        self.post_message(DropRequest(self._cursor_data()))
        self._selected_paths.clear()
