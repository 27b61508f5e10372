"""Confinement checks for paths below the library root."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from ..exceptions import LibraryRootError, PathTraversalError

logger = logging.getLogger(__name__)


def require_library_root(root: Union[str, Path]) -> Path:
    """Return ``root`` as a Path, failing if it is not an accessible directory."""
    path = Path(root)
    try:
        if not path.is_dir():
            raise LibraryRootError(f"Library root is not a directory: {path}", root=str(path))
        # Listing proves the directory is actually readable.
        next(path.iterdir(), None)
    except OSError as exc:
        raise LibraryRootError(f"Library root not accessible: {exc}", root=str(path)) from exc
    return path


def is_within(path: Path, base: Path) -> bool:
    try:
        path.relative_to(base)
        return True
    except ValueError:
        return False


def confine_to_root(root: Path, relative_path: str) -> Path:
    """Join ``relative_path`` onto ``root`` and verify it stays inside.

    Symlinked folders are resolved, so a link pointing out of the library is
    rejected even though the relative path itself is clean.
    """
    root_resolved = root.resolve()
    target = root / relative_path
    resolved = target.resolve(strict=False)
    if resolved == root_resolved or not is_within(resolved, root_resolved):
        logger.warning("Security warning: path outside library root denied: %s", target)
        raise PathTraversalError(f"Path escapes library root: {relative_path}", path=str(target))
    return target


def relative_to_root(root: Path, path: Path) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators."""
    return path.relative_to(root).as_posix()
