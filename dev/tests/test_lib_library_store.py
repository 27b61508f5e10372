from __future__ import annotations

from pathlib import Path

import pytest

from qrlibrary.core.library_store import LibraryStore
from qrlibrary.exceptions import FileOperationError, LibraryRootError, PathTraversalError

pytestmark = pytest.mark.integration


@pytest.fixture
def store(library_root: Path) -> LibraryStore:
    return LibraryStore(library_root)


def test_missing_root_rejected(tmp_path: Path) -> None:
    with pytest.raises(LibraryRootError):
        LibraryStore(tmp_path / "missing")


def test_save_and_read(store: LibraryStore, library_root: Path) -> None:
    final = store.save_snippet("my notes/first note", "hello\r\nthere")

    assert final == "my_notes/first_note.txt"
    assert store.read_text(final) == "hello\r\nthere"
    assert (library_root / "my_notes" / "first_note.txt").is_file()


def test_save_overwrites_by_default(store: LibraryStore) -> None:
    store.save_snippet("a.txt", "one")
    store.save_snippet("a.txt", "two")

    assert store.read_text("a.txt") == "two"


def test_save_without_overwrite_picks_free_name(store: LibraryStore) -> None:
    store.save_snippet("a.txt", "one")

    final = store.save_snippet("a.txt", "two", overwrite=False)

    assert final == "a-1.txt"
    assert store.read_text("a.txt") == "one"


def test_create_snippet(store: LibraryStore) -> None:
    first = store.create_snippet("sub", "", "x")
    second = store.create_snippet("sub", "", "y")

    assert (first, second) == ("sub/Imported.txt", "sub/Imported-1.txt")


def test_read_missing_raises(store: LibraryStore) -> None:
    with pytest.raises(FileOperationError) as excinfo:
        store.read_text("nothing.txt")

    assert str(excinfo.value) == "Could not read nothing.txt: No such file or directory"
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_traversal_is_neutralised(store: LibraryStore, library_root: Path) -> None:
    final = store.save_snippet("../../outside.txt", "x")

    assert final == "outside.txt"
    assert not (library_root.parent / "outside.txt").exists()


def test_rename_keeps_folder_and_avoids_collisions(store: LibraryStore) -> None:
    store.save_snippet("sub/a.txt", "a")
    store.save_snippet("sub/b.txt", "b")

    final = store.rename("sub/a.txt", "b")

    assert final == "sub/b-1.txt"
    assert store.read_text("sub/b.txt") == "b"
    assert store.read_text("sub/b-1.txt") == "a"


def test_rename_to_same_name_is_noop(store: LibraryStore) -> None:
    store.save_snippet("a.qr", "a")

    assert store.rename("a.qr", "a.qr") == "a.qr"


def test_rename_missing_raises(store: LibraryStore) -> None:
    with pytest.raises(FileOperationError):
        store.rename("ghost.txt", "other")


def test_delete(store: LibraryStore, library_root: Path) -> None:
    store.save_snippet("gone.txt", "x")

    store.delete("gone.txt")

    assert not (library_root / "gone.txt").exists()
    with pytest.raises(FileOperationError):
        store.delete("gone.txt")


def test_create_folder(store: LibraryStore, library_root: Path) -> None:
    assert store.create_folder("new folder/inner") == "new_folder/inner"
    assert (library_root / "new_folder" / "inner").is_dir()
    assert store.create_folder("..") == ""


def test_clear_removes_everything_and_notifies(store: LibraryStore, library_root: Path, write_files) -> None:
    write_files(library_root, {"a.txt": "1", "sub/b.txt": "2", "other.bin": "3"})
    calls = []

    removed = store.clear(on_clear=lambda: calls.append(1))

    assert removed == 3
    assert list(library_root.iterdir()) == []
    assert calls == [1]


def test_clear_empty_library_does_not_notify(store: LibraryStore) -> None:
    calls = []

    assert store.clear(on_clear=lambda: calls.append(1)) == 0
    assert calls == []


def test_build_tree_dirs_first_case_insensitive(store: LibraryStore, library_root: Path, write_files) -> None:
    write_files(library_root, {
        "b.txt": "",
        "A.qr": "",
        "zeta/x.txt": "",
        "Alpha/y.txt": "",
        "skip.bin": "",
        ".hidden.txt": "",
    })

    tree = store.build_tree()

    assert [(node.name, node.is_dir) for node in tree.children] == [
        ("Alpha", True), ("zeta", True), ("A.qr", False), ("b.txt", False),
    ]
    alpha = tree.children[0]
    assert [(node.name, node.relative_path) for node in alpha.children] == [("y.txt", "Alpha/y.txt")]
    assert tree.relative_path == ""


def test_symlinked_folder_escape_rejected(store: LibraryStore, library_root: Path, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    try:
        (library_root / "link").symlink_to(outside, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    with pytest.raises(PathTraversalError):
        store.save_snippet("link/x.txt", "x")
