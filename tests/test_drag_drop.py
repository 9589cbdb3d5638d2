from __future__ import annotations

from pathlib import Path

import pytest

from focustree.core.drag_drop import DragDropController, DragPayload
from focustree.core.errors import InvalidDropTarget, SelfContainmentError
from focustree.core.file_ops import FileOps
from focustree.core.fs_controller import FileSystemController
from focustree.core.tree_model import TreeNode
from tests.mocks import make_tree


@pytest.fixture
def invalidated() -> list[Path | None]:
    return []


@pytest.fixture
def controller(invalidated: list[Path | None]) -> DragDropController:
    ops = FileOps(FileSystemController(use_trash=False), invalidate=invalidated.append)
    return DragDropController(ops, invalidate=invalidated.append)


def _node(path: Path, *, root: bool = False) -> TreeNode:
    return TreeNode(path, root, path.is_dir())


def test_roots_cannot_be_dragged(tmp_path: Path, controller: DragDropController) -> None:
    make_tree(tmp_path, {"root/a.txt": ""})
    root = _node(tmp_path / "root", root=True)
    child = _node(tmp_path / "root" / "a.txt")

    assert controller.handle_drag([root]) is None
    payload = controller.handle_drag([root, child])
    assert payload == DragPayload((tmp_path / "root" / "a.txt",))


def test_drop_moves_items_into_target_folder(
    tmp_path: Path,
    controller: DragDropController,
    invalidated: list,
) -> None:
    make_tree(tmp_path, {"src/a.txt": "a", "src/b.txt": "b", "dst": None})
    payload = DragPayload((tmp_path / "src" / "a.txt", tmp_path / "src" / "b.txt"))

    report = controller.handle_drop(payload, _node(tmp_path / "dst"))

    assert report.ok
    assert sorted(path.name for path in (tmp_path / "dst").iterdir()) == ["a.txt", "b.txt"]
    assert invalidated == [tmp_path / "src", tmp_path / "dst"]


def test_drop_on_a_file_uses_its_folder(tmp_path: Path, controller: DragDropController) -> None:
    make_tree(tmp_path, {"src/a.txt": "", "dst/existing.txt": ""})

    report = controller.handle_drop(
        DragPayload((tmp_path / "src" / "a.txt",)),
        _node(tmp_path / "dst" / "existing.txt"),
    )

    assert report.succeeded == [tmp_path / "dst" / "a.txt"]


def test_drop_without_target_is_rejected(tmp_path: Path, controller: DragDropController) -> None:
    make_tree(tmp_path, {"a.txt": ""})

    with pytest.raises(InvalidDropTarget) as excinfo:
        controller.handle_drop(DragPayload((tmp_path / "a.txt",)), None)

    assert excinfo.value.message == "Cannot drop here - select a folder as drop target"
    assert (tmp_path / "a.txt").exists()


def test_folder_dropped_onto_itself_or_descendant_is_rejected(
    tmp_path: Path,
    controller: DragDropController,
) -> None:
    make_tree(tmp_path, {"pkg/sub/deep": None, "pkg/file.txt": "x"})
    payload = DragPayload((tmp_path / "pkg",))

    onto_self = controller.handle_drop(payload, _node(tmp_path / "pkg"))
    onto_child = controller.handle_drop(payload, _node(tmp_path / "pkg" / "sub" / "deep"))

    for report in (onto_self, onto_child):
        assert [type(error) for error in report.failures] == [SelfContainmentError]
        assert report.succeeded == []
    assert (tmp_path / "pkg" / "file.txt").read_text() == "x"
    assert (tmp_path / "pkg" / "sub" / "deep").is_dir()


def test_drop_into_current_parent_is_skipped(tmp_path: Path, controller: DragDropController, invalidated: list) -> None:
    make_tree(tmp_path, {"src/a.txt": ""})

    report = controller.handle_drop(DragPayload((tmp_path / "src" / "a.txt",)), _node(tmp_path / "src"))

    assert report.skipped == [tmp_path / "src" / "a.txt"]
    assert invalidated == []


def test_one_bad_item_does_not_stop_the_batch(tmp_path: Path, controller: DragDropController) -> None:
    make_tree(tmp_path, {"pkg/sub": None, "a.txt": ""})
    payload = DragPayload((tmp_path / "pkg", tmp_path / "a.txt"))

    report = controller.handle_drop(payload, _node(tmp_path / "pkg" / "sub"))

    assert len(report.failures) == 1
    assert report.succeeded == [tmp_path / "pkg" / "sub" / "a.txt"]


def test_empty_payload_does_nothing(tmp_path: Path, controller: DragDropController) -> None:
    report = controller.handle_drop(None, _node(tmp_path))

    assert report.ok and report.succeeded == []


def test_vanished_drag_source_is_reported(tmp_path: Path, controller: DragDropController) -> None:
    make_tree(tmp_path, {"dst": None})

    report = controller.handle_drop(DragPayload((tmp_path / "gone.txt",)), _node(tmp_path / "dst"))

    assert [error.code for error in report.failures] == ["source_missing"]
