from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Callable, Sequence

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from focustree import __version__
from focustree.core.bridges import OPEN_FILE_COMMAND
from focustree.core.command_provider import FocusTreeCommandProvider
from focustree.core.commands import COMMAND_LABELS, CommandId, FocusCommandController, menu_for
from focustree.core.config import get_runtime_config
from focustree.core.drag_drop import DragPayload
from focustree.core.errors import FocusTreeError, Severity, format_error
from focustree.core.logging import configure_logging
from focustree.core.messages import (
    CommandRequest,
    ContextMenuRequest,
    DragStartRequest,
    DropRequest,
    WatchEventsPending,
)
from focustree.core.notify import NotifyTimeouts
from focustree.core.paths import resolve_settings_path
from focustree.core.resources import Resource
from focustree.core.session import FocusSession
from focustree.core.settings_store import SettingsStore
from focustree.core.tree_model import TreeNode
from focustree.widgets.dialogs import (
    ChoiceDialog,
    ConfirmDialog,
    FolderPickerDialog,
    InputDialog,
)
from focustree.widgets.focus_tree import FocusTree


class FocusTreeApp(App):
    TITLE = "Focus Tree"
    SUB_TITLE = f"v{__version__}"
    CSS_PATH = Path(__file__).parent / "styles" / "index.tcss"
    COMMANDS = App.COMMANDS | {FocusTreeCommandProvider}

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        settings_store: SettingsStore,
        *,
        initial_paths: Sequence[Path] = (),
        session: FocusSession | None = None,
    ) -> None:
        super().__init__()
        self.notify_timeouts = NotifyTimeouts()
        self._initial_paths = tuple(initial_paths)
        self._drag_payload: DragPayload | None = None
        self.session = session or FocusSession(
            settings_store,
            wake=self._wake_watchers,
            on_root_lost=self._handle_root_lost,
        )
        self.command_controller = FocusCommandController(
            self.session,
            present_input=self._present_input,
            present_confirm=self._present_confirm,
            present_choice=self._present_choice,
            present_folder=self._present_folder,
            notify=self._notify,
            write_clipboard=self.copy_to_clipboard,
            current_selection=self._current_selection,
            reveal_nodes=self._reveal_nodes,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        yield FocusTree(self.session.tree_model, id="focus_tree")
        yield Footer()

    def on_mount(self) -> None:
        self.session.bus.register(OPEN_FILE_COMMAND, open_with_default_app)
        self.session.activate()
        for path in self._initial_paths:
            try:
                self.session.focus(path)
            except FocusTreeError as exc:
                self.show_error(exc)
        self.query_one(FocusTree).focus()

    def on_unmount(self) -> None:
        self.session.deactivate()

    def run_focus_command(self, command: CommandId) -> None:
        tree = self.query_one(FocusTree)
        selection = tree.selected_resources()
        resource = selection[0] if selection else None
        self.command_controller.execute(command, resource)

    def show_error(self, error: BaseException) -> None:
        message, severity = format_error(error)
        self._notify(message, severity)

    def _notify(self, message: str, severity: Severity) -> None:
        timeouts = self.notify_timeouts
        if severity == "information":
            timeout = timeouts.quick
        elif severity == "warning":
            timeout = timeouts.normal
        else:
            timeout = timeouts.long
        self.notify(message, severity=severity, timeout=timeout, markup=False)

    def _wake_watchers(self) -> None:
        # Called on the watchdog thread; post_message is thread safe.
        self.post_message(WatchEventsPending())

    def _handle_root_lost(self, root: Path) -> None:
        self._notify(f"Focused folder '{root.name}' was removed", "warning")

    def _present_input(
        self,
        prompt: str,
        default: str,
        callback: Callable[[str | None], None],
    ) -> None:
        self.push_screen(InputDialog(prompt, default=default), callback)

    def _present_confirm(
        self,
        message: str,
        confirm_label: str,
        callback: Callable[[bool | None], None],
    ) -> None:
        self.push_screen(ConfirmDialog(message, confirm_label=confirm_label), callback)

    def _present_choice(
        self,
        title: str,
        options: Sequence[tuple[str, str]],
        callback: Callable[[str | None], None],
    ) -> None:
        self.push_screen(ChoiceDialog(title, options), callback)

    def _present_folder(
        self,
        title: str,
        start: Path,
        root: Path | None,
        callback: Callable[[Path | None], None],
    ) -> None:
        self.push_screen(FolderPickerDialog(title, start, root=root), callback)

    def _current_selection(self) -> list[Resource]:
        return self.query_one(FocusTree).selected_resources()

    def _reveal_nodes(self, chain: list[TreeNode]) -> None:
        self.query_one(FocusTree).reveal(chain)

    @on(WatchEventsPending)
    def handle_watch_events(self, _: WatchEventsPending) -> None:
        self.session.watchers.process_pending()

    @on(CommandRequest)
    def handle_command(self, event: CommandRequest) -> None:
        self.command_controller.execute(event.command, event.resource, event.selection)

    @on(ContextMenuRequest)
    def handle_context_menu(self, event: ContextMenuRequest) -> None:
        options = [
            (COMMAND_LABELS[command], command.value)
            for command in menu_for(event.resource.kind)
        ]

        def after(value: str | None) -> None:
            if value:
                self.command_controller.execute(CommandId(value), event.resource, event.selection)

        self._present_choice(event.resource.path.name, options, after)

    @on(DragStartRequest)
    def handle_drag_start(self, event: DragStartRequest) -> None:
        payload = self.session.drag_drop.handle_drag(event.nodes)
        if payload is None:
            self._notify("Focused folders cannot be dragged; use Move Up/Down", "warning")
            return
        self._drag_payload = payload
        self._notify(f"Picked up {len(payload.paths)} item(s)", "information")

    @on(DropRequest)
    def handle_drop(self, event: DropRequest) -> None:
        payload = self._drag_payload
        if payload is None:
            return
        self._drag_payload = None
        self.command_controller.drop(payload, event.target)


def open_with_default_app(path: Path) -> None:
    target = str(path)
    if sys.platform == "darwin":
        subprocess.run(["open", target], check=False)
    elif sys.platform == "win32":
        subprocess.run(["cmd", "/c", "start", "", target], check=False)
    else:
        subprocess.run(["xdg-open", target], check=False)


def main(
    settings_path: Path | None = None,
    initial_paths: Sequence[Path] = (),
) -> None:
    config = get_runtime_config()
    configure_logging(
        level=config.log_level,
        format_name=config.log_format,
        log_dir=config.log_dir,
    )
    store = SettingsStore(resolve_settings_path(settings_path or config.settings_path))
    FocusTreeApp(store, initial_paths=initial_paths).run()
