"""CSV snapshot codec.

Written form::

    "folder","filename","text","order"
    "","note1.txt","hello world","1"
    "sub","note2.txt","line one\\nline two","2"

Every field, header included, is quoted with ``"`` doubled, and newlines in the
text are stored as the two characters ``\\n`` so each entry stays on one
physical line. The parser also accepts the older hand-editable exports:
unquoted fields, no header, no ``folder``/``order`` columns, columns in any
order, and text containing bare commas.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..core.models import LibraryEntry, ParseResult, SkippedItem, SnapshotFormat
from ..security.sanitize import (
    DEFAULT_BASENAME,
    join_relative_path,
    sanitize_file_name,
    sanitize_folder_path,
    split_relative_path,
)

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("folder", "filename", "text", "order")
NEWLINE_ESCAPE = "\\n"

_ORDER_RE = re.compile(r"^\s*\d+\s*$")


def normalize_newlines(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\r", "\n")


def escape_text(text: str) -> str:
    return normalize_newlines(text).replace("\n", NEWLINE_ESCAPE)


def unescape_text(text: str) -> str:
    return text.replace(NEWLINE_ESCAPE, "\n")


# =====================================================================================================
# Serialize
# =====================================================================================================


def serialize_csv(entries: Iterable[LibraryEntry]) -> str:
    """Serialize entries in the given order; ``order`` is the 1-based row index."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for order, entry in enumerate(entries, start=1):
        folder, filename = split_relative_path(entry.relative_path)
        writer.writerow([folder, filename, escape_text(entry.text), order])
    return buffer.getvalue()


# =====================================================================================================
# Tokenize
# =====================================================================================================


def tokenize_rows(data: str) -> List[List[str]]:
    """Split CSV text into rows of fields.

    Outside quotes ``,`` ends a field and LF ends a row; a ``"`` anywhere
    toggles quoting, and inside quotes ``""`` is a literal quote. CR is
    dropped beforehand. The final row is always emitted, so text ending in a
    newline yields a trailing ``[""]`` row that callers ignore.
    """
    text = normalize_newlines(data)
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < length and text[i + 1] == '"':
                    field.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            row.append("".join(field))
            field = []
        elif ch == "\n":
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
        else:
            field.append(ch)
        i += 1

    row.append("".join(field))
    rows.append(row)
    return rows


# =====================================================================================================
# Column mapping
# =====================================================================================================


def _is_order_value(value: str) -> bool:
    return bool(_ORDER_RE.match(value))


@dataclass(frozen=True)
class ColumnMap:
    """Where each logical column lives in a row.

    ``order_trailing`` means the order value, when present, is the last cell
    of the row; that is what lets text with bare commas span several cells.
    """

    filename: int = 0
    text: int = 1
    folder: Optional[int] = None
    order: Optional[int] = None
    order_trailing: bool = True
    has_header: bool = False

    @classmethod
    def positional(cls) -> "ColumnMap":
        return cls()

    @classmethod
    def from_header(cls, header: Sequence[str]) -> Optional["ColumnMap"]:
        names = [cell.strip().lower() for cell in header]
        if "filename" not in names:
            return None

        def index_of(name: str) -> Optional[int]:
            return names.index(name) if name in names else None

        filename = index_of("filename")
        folder = index_of("folder")
        order = index_of("order")
        text = index_of("text")
        if text is None:
            identifying = [i for i in (filename, folder) if i is not None]
            text = max(identifying) + 1
        return cls(
            filename=filename if filename is not None else 0,
            text=text,
            folder=folder,
            order=order,
            order_trailing=order is not None and order == len(names) - 1 and order > text,
            has_header=True,
        )

    def text_end(self, row: Sequence[str]) -> int:
        """Index one past the last text cell of ``row``."""
        if self.order_trailing:
            if len(row) > self.text + 1 and _is_order_value(row[-1]):
                return len(row) - 1
            return len(row)
        stops = [i for i in (self.filename, self.folder, self.order) if i is not None and i > self.text]
        if stops:
            return min(min(stops), len(row))
        return len(row)

    def cell(self, row: Sequence[str], index: Optional[int]) -> str:
        if index is None or index >= len(row):
            return ""
        return row[index]


def detect_columns(rows: List[List[str]]) -> ColumnMap:
    """Return the column map, dropping the header row from ``rows`` if found."""
    if rows:
        mapping = ColumnMap.from_header(rows[0])
        if mapping is not None:
            del rows[0]
            return mapping
    return ColumnMap.positional()


# =====================================================================================================
# Parse
# =====================================================================================================


def parse_csv(data: str, allowed_extensions: Optional[Iterable[str]] = None) -> ParseResult:
    """Parse a CSV snapshot leniently; bad rows are skipped, never fatal."""
    rows = tokenize_rows(data)
    columns = detect_columns(rows)
    first_line = 2 if columns.has_header else 1
    allowed = list(allowed_extensions) if allowed_extensions is not None else None

    entries: List[LibraryEntry] = []
    skipped: List[SkippedItem] = []

    for line_no, row in enumerate(rows, start=first_line):
        if row == [""]:
            continue
        source = f"row {line_no}"
        end = columns.text_end(row)
        if end <= columns.text:
            skipped.append(SkippedItem(source=source, reason="no text column"))
            continue

        text = unescape_text(",".join(row[columns.text:end]))
        raw_name = columns.cell(row, columns.filename)
        fallback = raw_name if raw_name.strip() else DEFAULT_BASENAME
        filename = sanitize_file_name(raw_name, fallback, allowed)
        if not filename:
            skipped.append(SkippedItem(source=source, reason="empty filename"))
            continue

        folder = sanitize_folder_path(columns.cell(row, columns.folder))
        entries.append(LibraryEntry(relative_path=join_relative_path(folder, filename), text=text))

    for item in skipped:
        logger.debug("CSV %s skipped: %s", item.source, item.reason)
    logger.debug("Parsed CSV snapshot: %d entries, %d skipped", len(entries), len(skipped))
    return ParseResult(entries=entries, skipped=skipped, format=SnapshotFormat.CSV)
