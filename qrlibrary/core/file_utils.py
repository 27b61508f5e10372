"""Collision-safe file writing."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from ..exceptions import FileOperationError
from ..security.path_guard import confine_to_root, relative_to_root
from ..security.sanitize import split_extension

MAX_COLLISION_SUFFIX = 100_000


def collision_candidates(path: Path) -> Iterator[Path]:
    """Yield ``path``, then ``base-1.ext``, ``base-2.ext``, ..."""
    yield path
    base, ext = split_extension(path.name)
    suffix = f".{ext}" if ext else ""
    for index in range(1, MAX_COLLISION_SUFFIX + 1):
        yield path.with_name(f"{base}-{index}{suffix}")


def write_new_file(path: Path, text: str) -> Path:
    """Write ``text`` to the first free collision variant of ``path``.

    Files are opened in exclusive-create mode, so an existing file is never
    overwritten even if it appears between the check and the write.
    """
    data = text.encode("utf-8")
    for candidate in collision_candidates(path):
        if candidate.exists() or candidate.is_symlink():
            continue
        try:
            with open(candidate, "xb") as handle:
                handle.write(data)
            return candidate
        except FileExistsError:
            continue
    raise FileOperationError(
        f"No free file name left for {path.name}", file_path=str(path), operation="write"
    )


def _claim_directory(root: Path, path: Path) -> Path:
    for candidate in collision_candidates(path):
        if candidate.is_dir():
            # Raises for a directory symlink leading out of the root.
            confine_to_root(root, relative_to_root(root, candidate))
            return candidate
        if candidate.exists() or candidate.is_symlink():
            continue
        try:
            candidate.mkdir()
            return candidate
        except FileExistsError:
            continue
    raise FileOperationError(
        f"No free folder name left for {path.name}", file_path=str(path), operation="mkdir"
    )


def ensure_folder(root: Path, folder: str) -> Path:
    """Create the ``/``-separated ``folder`` below ``root`` and return it.

    A segment taken by a file moves to its first ``-N`` variant that is an
    existing directory or free, so the returned path can differ from the
    requested one.
    """
    current = root
    for segment in folder.split("/") if folder else []:
        current = _claim_directory(root, current / segment)
    return current
