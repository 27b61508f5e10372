"""Export / import use cases: the library to and from one portable file."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from ..codec import coerce_format, detect_format, parse_snapshot, serialize_snapshot
from ..core.models import ExportReport, ImportReport, LibraryListener, SnapshotFormat
from ..core.scanner import scan_library
from ..exceptions import FileOperationError
from ..logging_config import LoggingTimer
from .applier import apply_snapshot

logger = logging.getLogger(__name__)

EXPORT_NAME_SUFFIX = "QRLibrary"
EXPORT_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def default_export_name(
    fmt: Union[str, SnapshotFormat] = SnapshotFormat.CSV,
    now: Optional[datetime] = None,
    suffix: str = EXPORT_NAME_SUFFIX,
) -> str:
    """Suggested export file name, e.g. ``2024-05-01_09-30-00_QRLibrary.csv``."""
    snapshot_format = coerce_format(fmt) or SnapshotFormat.CSV
    stamp = (now or datetime.now()).strftime(EXPORT_TIMESTAMP_FORMAT)
    return f"{stamp}_{suffix}.{snapshot_format.value}"


def export_library(
    root: Union[str, Path],
    destination: Union[str, Path],
    fmt: Union[str, SnapshotFormat, None] = None,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> ExportReport:
    """Scan ``root`` and write the snapshot to ``destination``.

    The format comes from ``fmt`` or else the destination suffix (CSV by
    default). Files that could not be read are listed in the report.
    """
    dest = Path(destination)
    snapshot_format = coerce_format(fmt) or detect_format(name=dest)

    with LoggingTimer("export_library"):
        scan = scan_library(root, allowed_extensions)
        payload = serialize_snapshot(scan.entries, snapshot_format)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with open(dest, "w", encoding="utf-8", newline="") as handle:
                handle.write(payload)
        except OSError as exc:
            logger.error("Export to %s failed: %s", dest, exc)
            raise FileOperationError(
                f"Could not write export file: {exc}", file_path=str(dest), operation="export"
            ) from exc

    logger.info("Exported %d entries to %s (%s)", len(scan.entries), dest, snapshot_format.value)
    return ExportReport(
        destination=str(dest),
        format=snapshot_format,
        entry_count=len(scan.entries),
        skipped=list(scan.skipped),
    )


def read_snapshot_file(source: Union[str, Path]) -> str:
    path = Path(source)
    try:
        # utf-8-sig drops the BOM spreadsheet tools put in front of CSV files.
        with open(path, "r", encoding="utf-8-sig", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Import from %s failed: %s", path, exc)
        raise FileOperationError(
            f"Could not read import file: {exc}", file_path=str(path), operation="import"
        ) from exc


def import_library(
    source: Union[str, Path],
    root: Union[str, Path],
    fmt: Union[str, SnapshotFormat, None] = None,
    on_change: Optional[LibraryListener] = None,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> ImportReport:
    """Read ``source``, parse it and write every entry into ``root``.

    Existing files are never overwritten; clashing names get ``-N`` suffixes.
    ``on_change`` fires once after the entries are written.
    """
    src = Path(source)
    with LoggingTimer("import_library"):
        data = read_snapshot_file(src)
        snapshot_format = coerce_format(fmt) or detect_format(name=src, content=data)
        parsed = parse_snapshot(data, snapshot_format, allowed_extensions)
        applied = apply_snapshot(root, parsed.entries, on_change=on_change,
                                 allowed_extensions=allowed_extensions)

    logger.info(
        "Imported %d entries from %s (%d rows skipped)",
        len(applied.applied), src, len(parsed.skipped),
    )
    return ImportReport(source=str(src), format=snapshot_format, parse=parsed, apply=applied)
