"""Shared dataclasses for scanning, parsing and applying snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

LibraryListener = Callable[[], None]


class SnapshotFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


@dataclass(frozen=True)
class LibraryEntry:
    relative_path: str
    text: str


@dataclass(frozen=True)
class SkippedItem:
    """A file or row left out of a snapshot, with the reason why."""

    source: str
    reason: str


@dataclass(frozen=True)
class ScanResult:
    root: str
    entries: List[LibraryEntry]
    skipped: List[SkippedItem] = field(default_factory=list)


@dataclass(frozen=True)
class ParseResult:
    entries: List[LibraryEntry]
    skipped: List[SkippedItem] = field(default_factory=list)
    format: Optional[SnapshotFormat] = None


@dataclass(frozen=True)
class AppliedEntry:
    requested_path: str
    final_path: str

    @property
    def renamed(self) -> bool:
        return self.requested_path != self.final_path


@dataclass(frozen=True)
class ApplyReport:
    root: str
    applied: List[AppliedEntry]
    changed: bool


@dataclass(frozen=True)
class ExportReport:
    destination: str
    format: SnapshotFormat
    entry_count: int
    skipped: List[SkippedItem] = field(default_factory=list)


@dataclass(frozen=True)
class ImportReport:
    source: str
    format: SnapshotFormat
    parse: ParseResult
    apply: ApplyReport


@dataclass
class FileNode:
    name: str
    relative_path: str
    is_dir: bool
    children: Optional[List["FileNode"]] = None
