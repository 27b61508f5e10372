"""Snapshot codecs (CSV and JSON) and format dispatch."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from ..core.models import LibraryEntry, ParseResult, SnapshotFormat
from .csv_codec import ColumnMap, detect_columns, parse_csv, serialize_csv, tokenize_rows
from .json_codec import SNAPSHOT_VERSION, parse_json, serialize_json


def coerce_format(fmt: Union[str, SnapshotFormat, None]) -> Optional[SnapshotFormat]:
    if fmt is None or isinstance(fmt, SnapshotFormat):
        return fmt
    try:
        return SnapshotFormat(str(fmt).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown snapshot format: {fmt!r}") from None


def detect_format(name: Union[str, Path, None] = None, content: Optional[str] = None) -> SnapshotFormat:
    """Pick a format from the file suffix, then from the content, else CSV."""
    if name is not None:
        suffix = Path(name).suffix.lower()
        if suffix == ".json":
            return SnapshotFormat.JSON
        if suffix == ".csv":
            return SnapshotFormat.CSV
    if content is not None:
        head = content.lstrip("\ufeff \t\r\n")[:1]
        if head in ("{", "["):
            return SnapshotFormat.JSON
    return SnapshotFormat.CSV


def serialize_snapshot(entries: Iterable[LibraryEntry], fmt: Union[str, SnapshotFormat] = SnapshotFormat.CSV) -> str:
    if coerce_format(fmt) is SnapshotFormat.JSON:
        return serialize_json(entries)
    return serialize_csv(entries)


def parse_snapshot(
    data: str,
    fmt: Union[str, SnapshotFormat, None] = None,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> ParseResult:
    snapshot_format = coerce_format(fmt) or detect_format(content=data)
    if snapshot_format is SnapshotFormat.JSON:
        return parse_json(data, allowed_extensions)
    return parse_csv(data, allowed_extensions)


__all__ = [
    "SNAPSHOT_VERSION",
    "ColumnMap",
    "SnapshotFormat",
    "coerce_format",
    "detect_columns",
    "detect_format",
    "parse_csv",
    "parse_json",
    "parse_snapshot",
    "serialize_csv",
    "serialize_json",
    "serialize_snapshot",
    "tokenize_rows",
]
