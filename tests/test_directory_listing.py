from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from focustree.core.errors import ListError
from focustree.core.sort_policy import SortOrder
from focustree.services.directory_listing import DirectoryLister, is_entry_visible
from tests.mocks import make_tree


def test_lists_visible_entries_with_directories_first(tmp_path: Path) -> None:
    make_tree(
        tmp_path,
        {
            "b.txt": "b",
            "A.txt": "a",
            "dir1": None,
            ".hidden": "secret",
            ".cache": None,
        },
    )

    entries = DirectoryLister().list(tmp_path, SortOrder.DESCENDING)

    assert [entry.name for entry in entries] == ["dir1", "b.txt", "A.txt"]
    assert entries[0].is_directory
    assert entries[0].full_path == tmp_path / "dir1"
    assert not entries[1].is_directory


def test_reports_modification_time_in_milliseconds(tmp_path: Path) -> None:
    make_tree(tmp_path, {"old.txt": "o", "new.txt": "n"})
    os.utime(tmp_path / "old.txt", (1_000, 1_000))
    os.utime(tmp_path / "new.txt", (2_000, 2_000))

    entries = DirectoryLister().list(tmp_path, SortOrder.BY_MODIFIED_DESC)

    assert [(entry.name, entry.modified_at_millis) for entry in entries] == [
        ("new.txt", 2_000_000),
        ("old.txt", 1_000_000),
    ]


def test_missing_directory_raises_list_error(tmp_path: Path) -> None:
    with pytest.raises(ListError) as excinfo:
        DirectoryLister().list(tmp_path / "missing", SortOrder.MANUAL)

    assert excinfo.value.code == "list_failed"


def test_file_instead_of_directory_raises_list_error(tmp_path: Path) -> None:
    make_tree(tmp_path, {"plain.txt": "x"})

    with pytest.raises(ListError):
        DirectoryLister().list(tmp_path / "plain.txt", SortOrder.MANUAL)


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
def test_dangling_symlink_is_listed_as_a_file(tmp_path: Path) -> None:
    (tmp_path / "broken").symlink_to(tmp_path / "nowhere")

    entries = DirectoryLister().list(tmp_path, SortOrder.ASCENDING)

    assert len(entries) == 1
    assert entries[0].name == "broken"
    assert not entries[0].is_directory
    assert entries[0].modified_at_millis == 0


@pytest.mark.parametrize(
    ("name", "visible"),
    [(".git", False), (".env", False), ("src", True), ("a.b", True)],
)
def test_is_entry_visible(name: str, visible: bool) -> None:
    assert is_entry_visible(name) is visible
