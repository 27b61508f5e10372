"""Write parsed snapshot entries into the library."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..core.file_utils import ensure_folder, write_new_file
from ..core.models import AppliedEntry, ApplyReport, LibraryEntry, LibraryListener
from ..exceptions import FileOperationError
from ..logging_config import LoggingTimer
from ..security.path_guard import confine_to_root, relative_to_root, require_library_root
from ..security.sanitize import sanitize_relative_path, split_relative_path

logger = logging.getLogger(__name__)


def apply_snapshot(
    root: Union[str, Path],
    entries: Iterable[LibraryEntry],
    *,
    on_change: Optional[LibraryListener] = None,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> ApplyReport:
    """Write ``entries`` below ``root`` in input order.

    Paths are sanitized again here and collide against the live filesystem,
    so two entries mapping to the same name in one batch both survive. A
    folder segment taken by a file moves to a ``-N`` variant as well. A
    write failure stops the batch; files already written stay on disk.
    ``on_change`` is called once if anything was written.
    """
    root_path = require_library_root(root)
    allowed = list(allowed_extensions) if allowed_extensions is not None else None
    applied: List[AppliedEntry] = []

    try:
        with LoggingTimer("apply_snapshot"):
            for entry in entries:
                requested = sanitize_relative_path(entry.relative_path, allowed_extensions=allowed)
                target = confine_to_root(root_path, requested)
                folder, filename = split_relative_path(requested)
                try:
                    parent = ensure_folder(root_path, folder)
                    written = write_new_file(parent / filename, entry.text)
                except OSError as exc:
                    logger.error("Import write failed for %s: %s", requested, exc)
                    raise FileOperationError(
                        f"Could not write {requested}: {exc}", file_path=str(target), operation="write"
                    ) from exc
                final = relative_to_root(root_path, written)
                if final != requested:
                    logger.debug("Renamed %s -> %s to avoid a collision", requested, final)
                applied.append(AppliedEntry(requested_path=requested, final_path=final))
    finally:
        if applied and on_change is not None:
            on_change()

    renamed = sum(1 for item in applied if item.renamed)
    logger.info("Applied %d entries to %s (%d renamed)", len(applied), root_path, renamed)
    return ApplyReport(root=str(root_path), applied=applied, changed=bool(applied))
