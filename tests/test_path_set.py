from __future__ import annotations

import random
from pathlib import Path

from focustree.core.path_set import PathSet, normalize_path


def _always(_: Path) -> bool:
    return True


def test_add_ignores_duplicates_and_keeps_insertion_order() -> None:
    path_set = PathSet(exists=_always)
    assert path_set.add("/a")
    assert path_set.add("/b")
    assert not path_set.add("/a")
    assert not path_set.add("/b/")
    assert path_set.paths == (normalize_path("/a"), normalize_path("/b"))
    assert [root.added_order for root in path_set.roots] == [0, 1]


def test_random_add_remove_sequences_never_duplicate() -> None:
    rng = random.Random(1234)
    candidates = [f"/root{index}" for index in range(6)]
    for _ in range(50):
        path_set = PathSet(exists=_always)
        expected: list[Path] = []
        for _ in range(40):
            value = rng.choice(candidates)
            target = normalize_path(value)
            if rng.random() < 0.6:
                path_set.add(value)
                if target not in expected:
                    expected.append(target)
            else:
                path_set.remove(value)
                if target in expected:
                    expected.remove(target)
            assert len(set(path_set.paths)) == len(path_set.paths)
            assert list(path_set.paths) == expected


def test_listeners_fire_only_on_change() -> None:
    path_set = PathSet(exists=_always)
    seen: list[tuple[Path, ...]] = []
    path_set.subscribe(seen.append)
    assert seen == [()]

    path_set.add("/a")
    path_set.add("/a")
    path_set.remove("/missing")
    path_set.clear()
    path_set.clear()

    assert seen == [(), (normalize_path("/a"),), ()]


def test_move_up_and_down_are_noops_at_the_boundaries() -> None:
    path_set = PathSet(exists=_always)
    for value in ("/a", "/b", "/c"):
        path_set.add(value)
    before = path_set.paths

    assert not path_set.move_up("/a")
    assert not path_set.move_down("/c")
    assert not path_set.move_up("/missing")
    assert path_set.paths == before


def test_move_swaps_exactly_the_adjacent_entries() -> None:
    path_set = PathSet(exists=_always)
    for value in ("/a", "/b", "/c", "/d"):
        path_set.add(value)

    assert path_set.move_up("/c")
    assert [path.name for path in path_set.paths] == ["a", "c", "b", "d"]

    assert path_set.move_down("/a")
    assert [path.name for path in path_set.paths] == ["c", "a", "b", "d"]


def test_reorder_drops_folders_missing_on_disk(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    path_set = PathSet()
    path_set.add(first)
    path_set.add(second)

    second.rmdir()
    path_set.reorder([second, first, first])

    assert path_set.paths == (first,)


def test_set_all_skips_missing_and_duplicate_paths(tmp_path: Path) -> None:
    present = tmp_path / "present"
    present.mkdir()
    path_set = PathSet()

    path_set.set_all([present, tmp_path / "gone", str(present)])

    assert path_set.paths == (present,)
    assert present in path_set
