from __future__ import annotations

from enum import Enum
from typing import Iterable, Protocol, Sequence, TypeVar


class SortOrder(str, Enum):
    ASCENDING = "ASC"
    DESCENDING = "DESC"
    BY_MODIFIED_DESC = "MODIFIED"
    MANUAL = "MANUAL"


SORT_ORDER_LABELS: dict[SortOrder, str] = {
    SortOrder.ASCENDING: "A → Z",
    SortOrder.DESCENDING: "Z → A",
    SortOrder.BY_MODIFIED_DESC: "Latest Modified",
    SortOrder.MANUAL: "Manual (Drag Order)",
}


class SortableEntry(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def is_directory(self) -> bool: ...

    @property
    def modified_at_millis(self) -> int: ...


_EntryT = TypeVar("_EntryT", bound=SortableEntry)


def normalize_sort_order(value: object) -> SortOrder:
    if isinstance(value, SortOrder):
        return value
    text = str(value or "").strip().upper()
    for order in SortOrder:
        if text in {order.value, order.name}:
            return order
    return SortOrder.MANUAL


def _name_key(entry: SortableEntry) -> tuple[str, str]:
    return (entry.name.casefold(), entry.name)


def _sort_bucket(entries: Iterable[_EntryT], order: SortOrder) -> list[_EntryT]:
    if order is SortOrder.BY_MODIFIED_DESC:
        return sorted(
            entries,
            key=lambda entry: (-entry.modified_at_millis, *_name_key(entry)),
        )
    if order is SortOrder.DESCENDING:
        return sorted(entries, key=_name_key, reverse=True)
    # ASCENDING and MANUAL share alphabetical order below the root level.
    return sorted(entries, key=_name_key)


def sort_entries(entries: Sequence[_EntryT], order: SortOrder) -> list[_EntryT]:
    """Order listing entries: directories first, then files, each by ``order``."""
    directories = [entry for entry in entries if entry.is_directory]
    files = [entry for entry in entries if not entry.is_directory]
    return _sort_bucket(directories, order) + _sort_bucket(files, order)
