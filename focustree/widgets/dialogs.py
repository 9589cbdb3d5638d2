from __future__ import annotations

from pathlib import Path
from typing import Sequence

from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DirectoryTree, Input, Label, OptionList
from textual.widgets.option_list import Option


class ConfirmDialog(ModalScreen[bool | None]):
    def __init__(self, message: str, *, confirm_label: str = "Yes"):
        super().__init__()
        self.message = message
        self.confirm_label = confirm_label

    def compose(self):
        yield Container(
            Label(self.message, id="dialog_message"),
            Horizontal(
                Button(self.confirm_label, id="yes", variant="warning"),
                Button("Cancel", id="cancel"),
                classes="dialog_buttons",
            ),
            id="dialog_container",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")


class InputDialog(ModalScreen[str | None]):
    def __init__(self, message: str, default: str | None = None) -> None:
        super().__init__()
        self._message = message
        self._default = default

    def compose(self):
        yield Vertical(
            Label(self._message, id="dialog_message"),
            Container(
                Input(value=self._default or "", id="input"),
                id="input_container",
            ),
            Horizontal(
                Button("OK", id="ok", variant="primary"),
                Button("Cancel", id="cancel"),
                classes="dialog_buttons",
            ),
            id="dialog_container",
        )

    def on_mount(self) -> None:
        self.query_one(Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            value = self.query_one(Input).value
            self.dismiss(value)
        else:
            self.dismiss(None)


class ChoiceDialog(ModalScreen[str | None]):
    """Pick one value from labelled options."""

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, title: str, options: Sequence[tuple[str, str]]) -> None:
        super().__init__()
        self._prompt = title
        self._options = list(options)

    def compose(self):
        yield Vertical(
            Label(self._prompt, id="dialog_message"),
            OptionList(
                *(Option(label, id=value) for label, value in self._options),
                id="choice_list",
            ),
            id="dialog_container",
        )

    def on_mount(self) -> None:
        self.query_one(OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option_id)

    def action_cancel(self) -> None:
        self.dismiss(None)


class FolderPickerDialog(ModalScreen[Path | None]):
    """Type or browse for a destination folder.

    The path input starts at ``start``; picking a folder in the browser
    (rooted at ``root``, or the home folder) copies it into the input.
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, title: str, start: Path, *, root: Path | None = None) -> None:
        super().__init__()
        self._prompt = title
        self._start = start
        self._root = root or Path.home()

    def compose(self):
        yield Vertical(
            Label(self._prompt, id="dialog_message"),
            Input(value=str(self._start), id="folder_input"),
            DirectoryTree(self._root, id="folder_tree"),
            Horizontal(
                Button("Move Here", id="ok", variant="primary"),
                Button("Cancel", id="cancel"),
                classes="dialog_buttons",
            ),
            id="dialog_container",
        )

    def on_mount(self) -> None:
        self.query_one("#folder_input", Input).focus()

    def on_directory_tree_directory_selected(
        self, event: DirectoryTree.DirectorySelected
    ) -> None:
        self.query_one("#folder_input", Input).value = str(event.path)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            self._submit(self.query_one("#folder_input", Input).value)
        else:
            self.dismiss(None)

    def _submit(self, value: str) -> None:
        text = value.strip()
        if not text:
            self.dismiss(None)
            return
        destination = Path(text).expanduser()
        if not destination.is_dir():
            self.notify(f"'{text}' is not a folder", severity="warning", markup=False)
            return
        self.dismiss(destination)

    def action_cancel(self) -> None:
        self.dismiss(None)
