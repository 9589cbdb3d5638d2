from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from textual.command import CommandListItem, SimpleCommand, SimpleProvider
from textual.screen import Screen
from textual.style import Style

from focustree.core.commands import COMMAND_LABELS, CommandId

if TYPE_CHECKING:
    from focustree.app import FocusTreeApp


class FocusTreeCommandProvider(SimpleProvider):
    """Command palette provider for the focused-folder actions."""

    _COMMAND_DEFS: tuple[tuple[CommandId, str], ...] = (
        (CommandId.FOCUS_FOLDER, "Pin a folder to the focused tree."),
        (CommandId.CLEAR_FOCUS, "Remove every focused folder."),
        (CommandId.REFRESH, "Re-read all expanded folders."),
        (CommandId.SORT, "Choose how folder contents are ordered."),
        (CommandId.PASTE, "Paste cut or copied items into the highlighted folder."),
        (CommandId.COPY_PATH, "Copy the selected paths."),
        (CommandId.COPY_RELATIVE_PATH, "Copy the selected paths relative to the workspace."),
        (CommandId.REVEAL_IN_OS, "Show the highlighted item in the system file manager."),
    )

    def __init__(self, screen: Screen[Any], match_style: Style | None = None) -> None:
        app = cast("FocusTreeApp", screen.app)
        commands: list[CommandListItem] = [
            SimpleCommand(
                COMMAND_LABELS[command],
                lambda command=command: app.run_focus_command(command),
                description,
            )
            for command, description in self._COMMAND_DEFS
        ]
        super().__init__(screen, commands)
        if match_style is not None:
            self._SimpleProvider__match_style = match_style  # type: ignore[attr-defined]
