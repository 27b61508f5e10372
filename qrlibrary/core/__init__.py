"""Library data model, scanner and snippet storage."""

from .library_store import LibraryStore
from .models import (
    AppliedEntry,
    ApplyReport,
    ExportReport,
    FileNode,
    ImportReport,
    LibraryEntry,
    LibraryListener,
    ParseResult,
    ScanResult,
    SkippedItem,
    SnapshotFormat,
)
from .scanner import scan_library

__all__ = [
    "AppliedEntry",
    "ApplyReport",
    "ExportReport",
    "FileNode",
    "ImportReport",
    "LibraryEntry",
    "LibraryListener",
    "LibraryStore",
    "ParseResult",
    "ScanResult",
    "SkippedItem",
    "SnapshotFormat",
    "scan_library",
]
