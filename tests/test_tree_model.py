from __future__ import annotations

import shutil
from pathlib import Path

from focustree.core.path_set import PathSet
from focustree.core.resources import ResourceKind
from focustree.core.sort_policy import SortOrder
from focustree.core.tree_model import TreeModel, TreeNode
from tests.mocks import ChangeRecorder, make_tree


def _model(tmp_path: Path, *roots: str) -> tuple[PathSet, TreeModel]:
    path_set = PathSet()
    for name in roots:
        (tmp_path / name).mkdir(exist_ok=True)
        path_set.add(tmp_path / name)
    return path_set, TreeModel(path_set)


def test_roots_follow_path_set_order(tmp_path: Path) -> None:
    _, model = _model(tmp_path, "zeta", "alpha")

    roots = model.get_roots()

    assert [node.name for node in roots] == ["zeta", "alpha"]
    assert all(node.is_root and node.is_directory for node in roots)
    assert roots[0].kind is ResourceKind.ROOT


def test_children_use_active_sort_order(tmp_path: Path) -> None:
    _, model = _model(tmp_path, "project")
    make_tree(tmp_path / "project", {"b.txt": "", "A.txt": "", "src": None})
    root = model.get_roots()[0]

    assert [node.name for node in model.get_children(root)] == ["src", "A.txt", "b.txt"]

    model.set_sort_order(SortOrder.DESCENDING)

    children = model.get_children(root)
    assert [node.name for node in children] == ["src", "b.txt", "A.txt"]
    assert not any(node.is_root for node in children)
    assert children[0].kind is ResourceKind.DIRECTORY
    assert children[1].kind is ResourceKind.FILE


def test_files_have_no_children(tmp_path: Path) -> None:
    _, model = _model(tmp_path, "project")
    make_tree(tmp_path / "project", {"a.txt": ""})
    node = TreeNode(tmp_path / "project" / "a.txt", False, False)

    assert model.get_children(node) == []


def test_unreadable_folder_yields_no_children(tmp_path: Path) -> None:
    _, model = _model(tmp_path, "project")
    make_tree(tmp_path / "project", {"gone": None})
    node = model.get_children(model.get_roots()[0])[0]
    shutil.rmtree(node.path)

    assert model.get_children(node) == []


def test_focus_changes_and_sort_changes_fire_full_refresh(tmp_path: Path) -> None:
    path_set, model = _model(tmp_path, "one")
    recorder = ChangeRecorder()
    model.subscribe(recorder)
    (tmp_path / "two").mkdir()

    path_set.add(tmp_path / "two")
    model.set_sort_order(SortOrder.ASCENDING)

    assert recorder.paths == [None, None]
    assert all(change.is_full for change in recorder.changes)


def test_invalidate_can_target_one_folder(tmp_path: Path) -> None:
    _, model = _model(tmp_path, "one")
    recorder = ChangeRecorder()
    model.subscribe(recorder)

    model.invalidate(tmp_path / "one")

    assert recorder.paths == [tmp_path / "one"]
    assert not recorder.changes[0].is_full


def test_close_stops_notifications(tmp_path: Path) -> None:
    path_set, model = _model(tmp_path, "one")
    recorder = ChangeRecorder()
    model.subscribe(recorder)

    model.close()
    path_set.clear()

    assert recorder.changes == []


def test_locate_returns_chain_from_root(tmp_path: Path) -> None:
    _, model = _model(tmp_path, "project")
    make_tree(tmp_path / "project", {"src/pkg/mod.py": ""})

    chain = model.locate(tmp_path / "project" / "src" / "pkg" / "mod.py")

    assert chain is not None
    assert [node.name for node in chain] == ["project", "src", "pkg", "mod.py"]
    assert chain[0].is_root
    assert chain[2].is_directory
    assert not chain[3].is_directory


def test_locate_outside_focus_or_missing_returns_none(tmp_path: Path) -> None:
    _, model = _model(tmp_path, "project")
    make_tree(tmp_path, {"elsewhere.txt": ""})

    assert model.locate(tmp_path / "elsewhere.txt") is None
    assert model.locate(tmp_path / "project" / "missing.txt") is None
    assert model.root_for(tmp_path / "project" / "missing.txt") == tmp_path / "project"
