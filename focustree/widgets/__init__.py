from .dialogs import ChoiceDialog, ConfirmDialog, FolderPickerDialog, InputDialog
from .focus_tree import FocusTree

__all__ = [
    "FocusTree",
    "ChoiceDialog",
    "ConfirmDialog",
    "FolderPickerDialog",
    "InputDialog",
]
