"""JSON snapshot codec: ``{"version": 1, "items": [{"path": ..., "text": ...}]}``."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional

from ..core.models import LibraryEntry, ParseResult, SkippedItem, SnapshotFormat
from ..exceptions import SnapshotFormatError
from ..security.sanitize import sanitize_relative_path

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def snapshot_to_dict(entries: Iterable[LibraryEntry], version: int = SNAPSHOT_VERSION) -> dict:
    return {
        "version": version,
        "items": [{"path": entry.relative_path, "text": entry.text} for entry in entries],
    }


def serialize_json(entries: Iterable[LibraryEntry], version: int = SNAPSHOT_VERSION) -> str:
    return json.dumps(snapshot_to_dict(entries, version), indent=2, ensure_ascii=False) + "\n"


def _extract_items(payload: Any) -> List[Any]:
    # A bare list of items predates the versioned envelope.
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise SnapshotFormatError(
            f"Expected a JSON object, got {type(payload).__name__}", snapshot_format="json"
        )

    version = payload.get("version", SNAPSHOT_VERSION)
    if isinstance(version, bool) or not isinstance(version, int):
        raise SnapshotFormatError(f"Invalid snapshot version: {version!r}", snapshot_format="json")
    if version < 1 or version > SNAPSHOT_VERSION:
        raise SnapshotFormatError(
            f"Unsupported snapshot version: {version}",
            snapshot_format="json",
            details={"version": version, "supported": SNAPSHOT_VERSION},
        )

    items = payload.get("items", [])
    if not isinstance(items, list):
        raise SnapshotFormatError("'items' must be a list", snapshot_format="json")
    return items


def parse_json(data: str, allowed_extensions: Optional[Iterable[str]] = None) -> ParseResult:
    """Parse a JSON snapshot.

    A document that is not JSON, or whose envelope is wrong, raises
    ``SnapshotFormatError``. Individual malformed items are skipped.
    """
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise SnapshotFormatError(f"Invalid JSON snapshot: {exc}", snapshot_format="json") from exc

    allowed = list(allowed_extensions) if allowed_extensions is not None else None
    entries: List[LibraryEntry] = []
    skipped: List[SkippedItem] = []

    for index, item in enumerate(_extract_items(payload)):
        source = f"item {index}"
        if not isinstance(item, dict):
            skipped.append(SkippedItem(source=source, reason="item is not an object"))
            continue
        path = item.get("path")
        text = item.get("text")
        if not isinstance(path, str):
            skipped.append(SkippedItem(source=source, reason="missing path"))
            continue
        if not isinstance(text, str):
            skipped.append(SkippedItem(source=source, reason="missing text"))
            continue
        entries.append(LibraryEntry(relative_path=sanitize_relative_path(path, allowed_extensions=allowed), text=text))

    for skipped_item in skipped:
        logger.debug("JSON %s skipped: %s", skipped_item.source, skipped_item.reason)
    logger.debug("Parsed JSON snapshot: %d entries, %d skipped", len(entries), len(skipped))
    return ParseResult(entries=entries, skipped=skipped, format=SnapshotFormat.JSON)
