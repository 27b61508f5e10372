"""Library scanner: collects ``(relative_path, text)`` pairs below a root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from ..logging_config import LoggingTimer
from ..security.path_guard import require_library_root
from ..security.sanitize import has_allowed_extension
from ..utils.result import is_err, read_text_result
from .models import LibraryEntry, ScanResult, SkippedItem

logger = logging.getLogger(__name__)


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def entry_sort_key(relative_path: str) -> Tuple[str, str]:
    """Case-insensitive ordering with the raw path as a stable tie-breaker."""
    return relative_path.casefold(), relative_path


def iter_library_files(
    root: Path,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> Iterator[Tuple[str, Path, Optional[str]]]:
    """Walk ``root`` depth-first.

    Yields ``(relative_path, path, skip_reason)`` for every non-hidden file with
    an allowed extension. ``skip_reason`` is set for files that exist but must
    not be read (symlinks, unlistable directories).
    """
    stack: List[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                children = sorted(it, key=lambda e: e.name, reverse=True)
        except OSError as exc:
            rel = current.relative_to(root).as_posix()
            yield rel, current, f"directory not readable: {exc.strerror or exc}"
            continue

        for child in children:
            if _is_hidden(child.name):
                continue
            child_path = Path(child.path)
            rel = child_path.relative_to(root).as_posix()
            try:
                if child.is_dir(follow_symlinks=False):
                    stack.append(child_path)
                    continue
                if not has_allowed_extension(child.name, allowed_extensions):
                    continue
                if child.is_symlink():
                    yield rel, child_path, "symlink not followed"
                elif not child.is_file(follow_symlinks=False):
                    yield rel, child_path, "not a regular file"
                else:
                    yield rel, child_path, None
            except OSError as exc:
                yield rel, child_path, f"stat failed: {exc.strerror or exc}"


def scan_library(
    root: Union[str, Path],
    allowed_extensions: Optional[Iterable[str]] = None,
) -> ScanResult:
    """Build a snapshot of the library at ``root``.

    Per-file failures exclude the file and are reported in
    ``ScanResult.skipped``; only an unusable root raises.
    """
    root_path = require_library_root(root)
    entries: List[LibraryEntry] = []
    skipped: List[SkippedItem] = []

    with LoggingTimer("scan_library"):
        for rel, path, skip_reason in iter_library_files(root_path, allowed_extensions):
            if skip_reason is not None:
                logger.debug("Skipping %s: %s", rel, skip_reason)
                skipped.append(SkippedItem(source=rel, reason=skip_reason))
                continue
            result = read_text_result(path)
            if is_err(result):
                reason = f"unreadable: {result.reason}"
                logger.debug("Skipping %s: %s", rel, reason)
                skipped.append(SkippedItem(source=rel, reason=reason))
                continue
            entries.append(LibraryEntry(relative_path=rel, text=result.value))

    entries.sort(key=lambda entry: entry_sort_key(entry.relative_path))
    logger.info("Scanned %s: %d entries, %d skipped", root_path, len(entries), len(skipped))
    return ScanResult(root=str(root_path), entries=entries, skipped=skipped)
