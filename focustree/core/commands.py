from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

from focustree.core.bridges import (
    OPEN_FILE_COMMAND,
    Bridge,
    BridgeShape,
    reveal_in_file_manager,
)
from focustree.core.clipboard import (
    clipboard_text,
    copied_status,
    relative_clipboard_text,
)
from focustree.core.drag_drop import DragPayload
from focustree.core.errors import FocusTreeError, Severity, format_error, wrap_error
from focustree.core.file_ops import BatchReport
from focustree.core.resources import Resource, ResourceKind, directory_of
from focustree.core.session import FocusSession
from focustree.core.sort_policy import SORT_ORDER_LABELS, SortOrder
from focustree.core.tree_model import TreeNode


class CommandId(str, Enum):
    FOCUS_FOLDER = "focusOnFolder"
    REMOVE_FOCUSED_FOLDER = "removeFocusedFolder"
    CLEAR_FOCUS = "clearFocus"
    REFRESH = "refresh"
    SORT = "sort"
    MOVE_UP = "moveUp"
    MOVE_DOWN = "moveDown"
    REVEAL_IN_TREE = "revealInSidebar"
    REVEAL_IN_OS = "revealInFinder"
    COPY_PATH = "copyPath"
    COPY_RELATIVE_PATH = "copyRelativePath"
    NEW_FILE = "newFile"
    NEW_FOLDER = "newFolder"
    RENAME = "rename"
    DELETE = "delete"
    CUT = "cut"
    COPY = "copy"
    PASTE = "paste"
    MOVE_TO_FOLDER = "moveToFolder"
    CREATE_TEMPLATED_FOLDER = "createTemplatedFolder"
    FC_APPLY_COLOR = "fcApplyColor"
    FC_APPLY_ICON = "fcApplyIcon"
    FC_RESET = "fcReset"
    ADD_TO_FAVORITES = "addToFavorites"


COMMAND_LABELS: dict[CommandId, str] = {
    CommandId.FOCUS_FOLDER: "Focus on Folder",
    CommandId.REMOVE_FOCUSED_FOLDER: "Remove Focused Folder",
    CommandId.CLEAR_FOCUS: "Clear Focus",
    CommandId.REFRESH: "Refresh",
    CommandId.SORT: "Sort Order",
    CommandId.MOVE_UP: "Move Up",
    CommandId.MOVE_DOWN: "Move Down",
    CommandId.REVEAL_IN_TREE: "Reveal in Tree",
    CommandId.REVEAL_IN_OS: "Reveal in File Manager",
    CommandId.COPY_PATH: "Copy Path",
    CommandId.COPY_RELATIVE_PATH: "Copy Relative Path",
    CommandId.NEW_FILE: "New File",
    CommandId.NEW_FOLDER: "New Folder",
    CommandId.RENAME: "Rename",
    CommandId.DELETE: "Delete",
    CommandId.CUT: "Cut",
    CommandId.COPY: "Copy",
    CommandId.PASTE: "Paste",
    CommandId.MOVE_TO_FOLDER: "Move to Folder",
    CommandId.CREATE_TEMPLATED_FOLDER: "Create Templated Folder",
    CommandId.FC_APPLY_COLOR: "Apply Folder Color",
    CommandId.FC_APPLY_ICON: "Apply Folder Icon",
    CommandId.FC_RESET: "Reset Folder Customization",
    CommandId.ADD_TO_FAVORITES: "Add to Favorites",
}

_BRIDGE_COMMANDS = (
    CommandId.CREATE_TEMPLATED_FOLDER,
    CommandId.FC_APPLY_COLOR,
    CommandId.FC_APPLY_ICON,
    CommandId.FC_RESET,
)

MENU_BY_KIND: dict[ResourceKind, tuple[CommandId, ...]] = {
    ResourceKind.ROOT: (
        CommandId.REMOVE_FOCUSED_FOLDER,
        CommandId.MOVE_UP,
        CommandId.MOVE_DOWN,
        CommandId.NEW_FILE,
        CommandId.NEW_FOLDER,
        CommandId.PASTE,
        CommandId.REVEAL_IN_OS,
        CommandId.COPY_PATH,
        CommandId.COPY_RELATIVE_PATH,
        *_BRIDGE_COMMANDS,
        CommandId.ADD_TO_FAVORITES,
    ),
    ResourceKind.DIRECTORY: (
        CommandId.FOCUS_FOLDER,
        CommandId.NEW_FILE,
        CommandId.NEW_FOLDER,
        CommandId.RENAME,
        CommandId.DELETE,
        CommandId.CUT,
        CommandId.COPY,
        CommandId.PASTE,
        CommandId.MOVE_TO_FOLDER,
        CommandId.REVEAL_IN_TREE,
        CommandId.REVEAL_IN_OS,
        CommandId.COPY_PATH,
        CommandId.COPY_RELATIVE_PATH,
        *_BRIDGE_COMMANDS,
        CommandId.ADD_TO_FAVORITES,
    ),
    ResourceKind.FILE: (
        CommandId.RENAME,
        CommandId.DELETE,
        CommandId.CUT,
        CommandId.COPY,
        CommandId.MOVE_TO_FOLDER,
        CommandId.REVEAL_IN_TREE,
        CommandId.REVEAL_IN_OS,
        CommandId.COPY_PATH,
        CommandId.COPY_RELATIVE_PATH,
        CommandId.ADD_TO_FAVORITES,
    ),
}

BRIDGES: dict[CommandId, Bridge] = {
    CommandId.CREATE_TEMPLATED_FOLDER: Bridge("FT.createFolderStructure", BridgeShape.URI),
    CommandId.FC_APPLY_COLOR: Bridge("folder-customization.applyColor", BridgeShape.URI_LIST),
    CommandId.FC_APPLY_ICON: Bridge("folder-customization.applyIcon", BridgeShape.URI_LIST),
    CommandId.FC_RESET: Bridge("folder-customization.reset", BridgeShape.URI_LIST),
    CommandId.ADD_TO_FAVORITES: Bridge("yasinFavorites.addToFavorites", BridgeShape.URI),
}


def menu_for(kind: ResourceKind) -> tuple[CommandId, ...]:
    return MENU_BY_KIND[kind]


InputPresenter = Callable[[str, str, Callable[[str | None], None]], None]
ConfirmPresenter = Callable[[str, str, Callable[[bool | None], None]], None]
ChoicePresenter = Callable[
    [str, Sequence[tuple[str, str]], Callable[[str | None], None]], None
]
FolderPresenter = Callable[
    [str, Path, Path | None, Callable[[Path | None], None]], None
]
Notifier = Callable[[str, Severity], None]
Handler = Callable[[Resource | None, tuple[Resource, ...]], None]


class FocusCommandController:
    """Routes host commands to the session, prompting through the host."""

    def __init__(
        self,
        session: FocusSession,
        *,
        present_input: InputPresenter,
        present_confirm: ConfirmPresenter,
        present_choice: ChoicePresenter,
        present_folder: FolderPresenter,
        notify: Notifier,
        write_clipboard: Callable[[str], None],
        current_selection: Callable[[], Sequence[Resource]] = lambda: (),
        reveal_nodes: Callable[[list[TreeNode]], None] | None = None,
        reveal_in_os: Callable[[Path], None] = reveal_in_file_manager,
    ) -> None:
        self._session = session
        self._present_input = present_input
        self._present_confirm = present_confirm
        self._present_choice = present_choice
        self._present_folder = present_folder
        self._notify = notify
        self._write_clipboard = write_clipboard
        self._current_selection = current_selection
        self._reveal_nodes = reveal_nodes
        self._reveal_in_os = reveal_in_os
        self._handlers: dict[CommandId, Handler] = {
            CommandId.FOCUS_FOLDER: self._focus_folder,
            CommandId.REMOVE_FOCUSED_FOLDER: self._remove_focused_folder,
            CommandId.CLEAR_FOCUS: self._clear_focus,
            CommandId.REFRESH: self._refresh,
            CommandId.SORT: self._choose_sort_order,
            CommandId.MOVE_UP: self._move_up,
            CommandId.MOVE_DOWN: self._move_down,
            CommandId.REVEAL_IN_TREE: self._reveal_in_tree,
            CommandId.REVEAL_IN_OS: self._reveal_in_file_manager,
            CommandId.COPY_PATH: self._copy_path,
            CommandId.COPY_RELATIVE_PATH: self._copy_relative_path,
            CommandId.NEW_FILE: self._new_file,
            CommandId.NEW_FOLDER: self._new_folder,
            CommandId.RENAME: self._rename,
            CommandId.DELETE: self._delete,
            CommandId.CUT: self._cut,
            CommandId.COPY: self._copy,
            CommandId.PASTE: self._paste,
            CommandId.MOVE_TO_FOLDER: self._move_to_folder,
        }
        for command in BRIDGES:
            self._handlers[command] = self._forward_bridge(command)

    def execute(
        self,
        command: CommandId | str,
        resource: Resource | None = None,
        selection: Sequence[Resource] = (),
    ) -> None:
        handler = self._handlers[CommandId(command)]
        try:
            handler(resource, tuple(selection))
        except FocusTreeError as exc:
            self.show_error(exc)

    def show_error(self, error: BaseException) -> None:
        message, severity = format_error(error)
        self._notify(message, severity)

    def drop(self, payload: DragPayload | None, target: TreeNode | None) -> BatchReport:
        try:
            report = self._session.drag_drop.handle_drop(payload, target)
        except FocusTreeError as exc:
            self.show_error(exc)
            return BatchReport(cancelled=True)
        self._report(report, "Moved")
        return report

    def _items(
        self,
        resource: Resource | None,
        selection: tuple[Resource, ...],
    ) -> list[Resource]:
        if selection:
            return list(selection)
        if resource is not None:
            return [resource]
        return list(self._current_selection())

    def _report(self, report: BatchReport, verb: str) -> None:
        for failure in report.failures:
            self.show_error(failure)
        if report.succeeded:
            count = len(report.succeeded)
            self._notify(f"{verb} {count} item(s)", "information")

    def _focus_folder(self, resource: Resource | None, selection: tuple[Resource, ...]) -> None:
        targets = [item for item in self._items(resource, selection) if item.is_directory]
        if targets:
            for item in targets:
                self._session.focus(item.path)
            return

        def after(value: str | None) -> None:
            if not value:
                return
            try:
                self._session.focus(Path(value).expanduser())
            except FocusTreeError as exc:
                self.show_error(exc)

        self._present_input("Folder to focus", str(Path.cwd()), after)

    def _remove_focused_folder(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is not None and resource.is_root:
            self._session.unfocus(resource.path)

    def _clear_focus(self, _resource: Resource | None, _: tuple[Resource, ...]) -> None:
        self._session.clear_focus()

    def _refresh(self, _resource: Resource | None, _: tuple[Resource, ...]) -> None:
        self._session.tree_model.invalidate()

    def _choose_sort_order(self, _resource: Resource | None, _: tuple[Resource, ...]) -> None:
        current = self._session.tree_model.sort_order
        options = [
            (f"{label} ✓" if order is current else label, order.value)
            for order, label in SORT_ORDER_LABELS.items()
        ]

        def after(value: str | None) -> None:
            if not value:
                return
            order = self._session.set_sort_order(value)
            self._notify(f"Sort: {SORT_ORDER_LABELS[order]}", "information")

        self._present_choice(f"Current: {current.value} - Select sort order", options, after)

    def _move_up(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is not None and resource.is_root:
            self._session.move_root_up(resource.path)

    def _move_down(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is not None and resource.is_root:
            self._session.move_root_down(resource.path)

    def _reveal_in_tree(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is None:
            return
        chain = self._session.tree_model.locate(resource.path)
        if chain is None:
            self._notify(f"'{resource.path.name}' is not inside a focused folder", "warning")
            return
        if self._reveal_nodes is not None:
            self._reveal_nodes(chain)

    def _reveal_in_file_manager(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is None:
            return
        try:
            self._reveal_in_os(resource.path)
        except OSError as exc:
            self.show_error(exc)

    def _copy_path(self, resource: Resource | None, selection: tuple[Resource, ...]) -> None:
        paths = [item.path for item in self._items(resource, selection)]
        if not paths:
            return
        self._write_clipboard(clipboard_text(paths))
        self._notify(copied_status(len(paths)), "information")

    def _copy_relative_path(self, resource: Resource | None, selection: tuple[Resource, ...]) -> None:
        paths = [item.path for item in self._items(resource, selection)]
        if not paths:
            return
        root = self._session.workspace_root
        self._write_clipboard(relative_clipboard_text(paths, root))
        self._notify(copied_status(len(paths), relative=True), "information")

    def _new_file(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is None:
            return
        directory = directory_of(resource)

        def after(name: str | None) -> None:
            if not name:
                return
            try:
                created = self._session.file_ops.new_file(directory, name)
            except FocusTreeError as exc:
                self.show_error(exc)
                return
            if not self._session.bus.is_registered(OPEN_FILE_COMMAND):
                return
            try:
                self._session.bus.execute(OPEN_FILE_COMMAND, created)
            except OSError as exc:
                self.show_error(
                    wrap_error(
                        exc,
                        code="open_failed",
                        message=f"Created '{created.name}' but could not open it",
                        severity="warning",
                    )
                )

        self._present_input("New file name", "", after)

    def _new_folder(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is None:
            return
        directory = directory_of(resource)

        def after(name: str | None) -> None:
            if not name:
                return
            try:
                self._session.file_ops.new_folder(directory, name)
            except FocusTreeError as exc:
                self.show_error(exc)

        self._present_input("New folder name", "", after)

    def _rename(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is None:
            return
        target = resource.path

        def after(name: str | None) -> None:
            if not name or name == target.name:
                return
            try:
                self._session.file_ops.rename(target, name)
            except FocusTreeError as exc:
                self.show_error(exc)

        self._present_input("New name", target.name, after)

    def _delete(self, resource: Resource | None, selection: tuple[Resource, ...]) -> None:
        paths = [item.path for item in self._items(resource, selection)]
        if not paths:
            return
        names = ", ".join(path.name for path in paths)

        def after(confirmed: bool | None) -> None:
            if not confirmed:
                return
            report = self._session.file_ops.delete(paths, confirm=True)
            self._report(report, "Deleted")

        if self._session.fs_controller.use_trash:
            prompt, label = f"Move {len(paths)} item(s) to Trash?", "Move to Trash"
        else:
            prompt, label = f"Permanently delete {len(paths)} item(s)?", "Delete"
        self._present_confirm(f"{prompt}\n{names}", label, after)

    def _cut(self, resource: Resource | None, selection: tuple[Resource, ...]) -> None:
        paths = [item.path for item in self._items(resource, selection)]
        if not paths:
            return
        self._session.file_ops.cut(paths)
        self._notify("Cut: " + ", ".join(path.name for path in paths), "information")

    def _copy(self, resource: Resource | None, selection: tuple[Resource, ...]) -> None:
        paths = [item.path for item in self._items(resource, selection)]
        if not paths:
            return
        self._session.file_ops.copy(paths)
        self._notify("Copied: " + ", ".join(path.name for path in paths), "information")

    def _paste(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        target = resource
        if target is None:
            selected = list(self._current_selection())
            target = selected[0] if selected else None
        if target is None:
            return
        file_ops = self._session.file_ops
        if file_ops.clipboard.is_empty:
            self.show_error(FocusTreeError(code="paste_nothing", message="Nothing to paste."))
            return
        report = file_ops.paste(directory_of(target))
        self._report(report, "Pasted")

    def _move_to_folder(self, resource: Resource | None, _: tuple[Resource, ...]) -> None:
        if resource is None:
            return
        source = resource.path

        def after(destination: Path | None) -> None:
            if destination is None:
                return
            try:
                self._session.file_ops.move_to_folder(source, destination)
            except FocusTreeError as exc:
                self.show_error(exc)

        root = self._session.tree_model.root_for(source)
        self._present_folder("Move to folder", source.parent, root, after)

    def _forward_bridge(self, command: CommandId) -> Handler:
        bridge = BRIDGES[command]

        def forward(resource: Resource | None, _: tuple[Resource, ...]) -> None:
            if resource is None:
                return
            bridge.forward(self._session.bus, resource)

        return forward
