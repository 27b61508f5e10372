"""Public API surface for the UI and integrations.

Centralizes stable imports so callers stay decoupled from module layout.
"""

from __future__ import annotations

from ..codec import detect_format, parse_snapshot, serialize_snapshot
from ..core.library_store import LibraryStore
from ..core.models import (
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
from ..core.scanner import scan_library
from ..security.sanitize import (
    ALLOWED_EXTENSIONS,
    sanitize_file_name,
    sanitize_folder_component,
    sanitize_folder_path,
    sanitize_relative_path,
)
from .applier import apply_snapshot
from .transfer_controller import default_export_name, export_library, import_library

__all__ = [
    "ALLOWED_EXTENSIONS",
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
    "apply_snapshot",
    "default_export_name",
    "detect_format",
    "export_library",
    "import_library",
    "parse_snapshot",
    "sanitize_file_name",
    "sanitize_folder_component",
    "sanitize_folder_path",
    "sanitize_relative_path",
    "scan_library",
    "serialize_snapshot",
]
