from __future__ import annotations

from pathlib import Path

import pytest

from focustree.core.sort_policy import SortOrder, normalize_sort_order, sort_entries
from focustree.services.directory_listing import DirectoryEntry


def _entry(name: str, *, is_dir: bool = False, modified: int = 0) -> DirectoryEntry:
    return DirectoryEntry(name, Path("/base") / name, is_dir, modified)


@pytest.mark.parametrize("order", list(SortOrder))
def test_directories_always_come_first(order: SortOrder) -> None:
    entries = [
        _entry("zeta.txt", modified=50),
        _entry("beta", is_dir=True, modified=1),
        _entry("Alpha.txt", modified=99),
        _entry("alpha", is_dir=True, modified=2),
    ]

    ordered = sort_entries(entries, order)

    kinds = [entry.is_directory for entry in ordered]
    assert kinds == [True, True, False, False]


def test_descending_is_case_insensitive() -> None:
    entries = [_entry("b.txt"), _entry("A.txt"), _entry("dir1", is_dir=True)]

    ordered = sort_entries(entries, SortOrder.DESCENDING)

    assert [entry.name for entry in ordered] == ["dir1", "b.txt", "A.txt"]


@pytest.mark.parametrize("order", [SortOrder.ASCENDING, SortOrder.MANUAL])
def test_ascending_and_manual_are_alphabetical(order: SortOrder) -> None:
    entries = [_entry("b.txt"), _entry("C.txt"), _entry("a.txt")]

    ordered = sort_entries(entries, order)

    assert [entry.name for entry in ordered] == ["a.txt", "b.txt", "C.txt"]


def test_modified_puts_newest_first_and_breaks_ties_by_name() -> None:
    entries = [
        _entry("old.txt", modified=10),
        _entry("b.txt", modified=30),
        _entry("a.txt", modified=30),
        _entry("new.txt", modified=40),
    ]

    ordered = sort_entries(entries, SortOrder.BY_MODIFIED_DESC)

    assert [entry.name for entry in ordered] == ["new.txt", "a.txt", "b.txt", "old.txt"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("ASC", SortOrder.ASCENDING),
        ("desc", SortOrder.DESCENDING),
        ("MODIFIED", SortOrder.BY_MODIFIED_DESC),
        ("BY_MODIFIED_DESC", SortOrder.BY_MODIFIED_DESC),
        ("whatever", SortOrder.MANUAL),
        (None, SortOrder.MANUAL),
        (SortOrder.DESCENDING, SortOrder.DESCENDING),
    ],
)
def test_normalize_sort_order(value: object, expected: SortOrder) -> None:
    assert normalize_sort_order(value) is expected
