"""Snippet storage: the file operations behind the library browser."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..exceptions import FileOperationError
from ..security.path_guard import confine_to_root, relative_to_root, require_library_root
from ..security.sanitize import (
    DEFAULT_BASENAME,
    has_allowed_extension,
    join_relative_path,
    sanitize_file_name,
    sanitize_folder_path,
    sanitize_relative_path,
    split_relative_path,
)
from ..utils.result import is_err, read_text_result
from .file_utils import collision_candidates, write_new_file
from .models import FileNode, LibraryListener
from .scanner import entry_sort_key

logger = logging.getLogger(__name__)


class LibraryStore:
    """File operations on snippets below one library root.

    Every relative path passed in is sanitized and confined to the root, so
    callers may hand through raw user input.
    """

    def __init__(self, root: Union[str, Path], allowed_extensions: Optional[Iterable[str]] = None):
        self.root = require_library_root(root)
        self.allowed_extensions = list(allowed_extensions) if allowed_extensions is not None else None

    def _resolve(self, relative_path: str) -> Path:
        clean = sanitize_relative_path(relative_path, allowed_extensions=self.allowed_extensions)
        return confine_to_root(self.root, clean)

    def _resolve_folder(self, relative_path: str) -> Path:
        clean = sanitize_folder_path(str(relative_path or "").replace("\\", "/"))
        if not clean:
            return self.root
        return confine_to_root(self.root, clean)

    def read_text(self, relative_path: str) -> str:
        path = self._resolve(relative_path)
        result = read_text_result(path)
        if is_err(result):
            raise FileOperationError(
                f"Could not read {relative_path}: {result.reason}", file_path=str(path), operation="read"
            ) from result.error
        return result.value

    def save_snippet(self, relative_path: str, text: str, overwrite: bool = True) -> str:
        """Write ``text`` to the sanitized path and return the final relative path.

        With ``overwrite`` disabled an existing file is left alone and the
        snippet lands on the next free ``-N`` variant instead.
        """
        path = self._resolve(relative_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if overwrite:
                path.write_bytes(text.encode("utf-8"))
            else:
                path = write_new_file(path, text)
        except OSError as exc:
            raise FileOperationError(
                f"Could not save {relative_path}: {exc}", file_path=str(path), operation="write"
            ) from exc
        return relative_to_root(self.root, path)

    def create_snippet(self, folder: str, name: str, text: str = "") -> str:
        """Create a new snippet without touching existing files."""
        filename = sanitize_file_name(name, DEFAULT_BASENAME, self.allowed_extensions)
        return self.save_snippet(join_relative_path(sanitize_folder_path(folder), filename), text, overwrite=False)

    def rename(self, relative_path: str, new_name: str) -> str:
        """Rename a snippet within its folder, avoiding collisions."""
        source = self._resolve(relative_path)
        if not source.is_file():
            raise FileOperationError(
                f"Snippet not found: {relative_path}", file_path=str(source), operation="rename"
            )
        folder, _ = split_relative_path(relative_to_root(self.root, source))
        filename = sanitize_file_name(new_name, source.name, self.allowed_extensions)
        target = self._resolve(join_relative_path(folder, filename))
        if target == source:
            return relative_to_root(self.root, source)

        try:
            for candidate in collision_candidates(target):
                if candidate.exists():
                    continue
                source.rename(candidate)
                logger.info("Renamed %s -> %s", relative_path, candidate.name)
                return relative_to_root(self.root, candidate)
        except OSError as exc:
            raise FileOperationError(
                f"Could not rename {relative_path}: {exc}", file_path=str(source), operation="rename"
            ) from exc
        raise FileOperationError(
            f"No free file name left for {filename}", file_path=str(target), operation="rename"
        )

    def delete(self, relative_path: str) -> None:
        path = self._resolve(relative_path)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise FileOperationError(
                f"Snippet not found: {relative_path}", file_path=str(path), operation="delete"
            ) from exc
        except OSError as exc:
            raise FileOperationError(
                f"Could not delete {relative_path}: {exc}", file_path=str(path), operation="delete"
            ) from exc
        logger.info("Deleted %s", relative_path)

    def create_folder(self, relative_path: str) -> str:
        path = self._resolve_folder(relative_path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileOperationError(
                f"Could not create folder {relative_path}: {exc}", file_path=str(path), operation="mkdir"
            ) from exc
        return relative_to_root(self.root, path) if path != self.root else ""

    def clear(self, on_clear: Optional[LibraryListener] = None) -> int:
        """Remove everything below the root and return the number of top-level items removed."""
        removed = 0
        try:
            for child in sorted(self.root.iterdir()):
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
                removed += 1
        except OSError as exc:
            raise FileOperationError(
                f"Could not clear library: {exc}", file_path=str(self.root), operation="clear"
            ) from exc
        finally:
            if removed and on_clear is not None:
                on_clear()
        logger.info("Cleared library %s (%d items removed)", self.root, removed)
        return removed

    def build_tree(self) -> FileNode:
        return FileNode(name=self.root.name, relative_path="", is_dir=True, children=self._list_children(self.root))

    def _list_children(self, directory: Path) -> List[FileNode]:
        try:
            with os.scandir(directory) as it:
                items = [entry for entry in it if not entry.name.startswith(".")]
        except OSError as exc:
            logger.debug("Could not list %s: %s", directory, exc)
            return []

        dirs: List[FileNode] = []
        files: List[FileNode] = []
        for item in items:
            path = Path(item.path)
            rel = relative_to_root(self.root, path)
            if item.is_dir(follow_symlinks=False):
                dirs.append(FileNode(name=item.name, relative_path=rel, is_dir=True,
                                     children=self._list_children(path)))
            elif has_allowed_extension(item.name, self.allowed_extensions):
                files.append(FileNode(name=item.name, relative_path=rel, is_dir=False))

        dirs.sort(key=lambda node: entry_sort_key(node.name))
        files.sort(key=lambda node: entry_sort_key(node.name))
        return dirs + files
