from __future__ import annotations

import json

import pytest

from qrlibrary.codec import detect_format, parse_snapshot, serialize_snapshot
from qrlibrary.codec.json_codec import SNAPSHOT_VERSION, parse_json, serialize_json
from qrlibrary.core.models import LibraryEntry, SnapshotFormat
from qrlibrary.exceptions import SnapshotFormatError


def test_serialize_envelope() -> None:
    out = serialize_json([LibraryEntry("sub/a.txt", "x\r\ny"), LibraryEntry("b.qr", "ü")])

    payload = json.loads(out)
    assert payload == {
        "version": SNAPSHOT_VERSION,
        "items": [{"path": "sub/a.txt", "text": "x\r\ny"}, {"path": "b.qr", "text": "ü"}],
    }
    assert "ü" in out
    assert out.endswith("\n")


def test_round_trip_is_lossless() -> None:
    entries = [
        LibraryEntry("a.txt", "line\r\nwith CRLF"),
        LibraryEntry("deep/er/b.qrtext", "C:\\new folder"),
        LibraryEntry("c.txt", "12"),
    ]

    assert parse_json(serialize_json(entries)).entries == entries


def test_paths_are_sanitised() -> None:
    data = json.dumps({"version": 1, "items": [
        {"path": "../../etc/passwd", "text": "x"},
        {"path": "C:\\Users\\me\\note.pdf", "text": "y"},
    ]})

    result = parse_json(data)

    assert [e.relative_path for e in result.entries] == ["etc/passwd.txt", "C-/Users/me/note.txt"]


def test_bare_list_is_accepted() -> None:
    result = parse_json('[{"path": "a.txt", "text": "1"}]')

    assert result.entries == [LibraryEntry("a.txt", "1")]
    assert result.format is SnapshotFormat.JSON


def test_malformed_items_are_skipped() -> None:
    data = json.dumps({"items": [
        "nope",
        {"text": "no path"},
        {"path": "p.txt"},
        {"path": "ok.txt", "text": ""},
    ]})

    result = parse_json(data)

    assert result.entries == [LibraryEntry("ok.txt", "")]
    assert [(s.source, s.reason) for s in result.skipped] == [
        ("item 0", "item is not an object"),
        ("item 1", "missing path"),
        ("item 2", "missing text"),
    ]


@pytest.mark.parametrize(
    "data",
    [
        "{not json",
        '"a string"',
        '{"version": 2, "items": []}',
        '{"version": 0, "items": []}',
        '{"version": "1", "items": []}',
        '{"version": true, "items": []}',
        '{"version": 1, "items": {}}',
    ],
)
def test_invalid_documents_raise(data: str) -> None:
    with pytest.raises(SnapshotFormatError) as excinfo:
        parse_json(data)

    assert excinfo.value.details["format"] == "json"
    assert excinfo.value.error_code == "SNAPSHOT_FORMAT_ERROR"


class TestFormatDispatch:
    def test_suffix_wins(self) -> None:
        assert detect_format(name="x.JSON", content="a,b") is SnapshotFormat.JSON
        assert detect_format(name="x.csv", content="{}") is SnapshotFormat.CSV

    def test_content_sniffing(self) -> None:
        assert detect_format(content='\ufeff  {"items": []}') is SnapshotFormat.JSON
        assert detect_format(content="\n[ ]") is SnapshotFormat.JSON
        assert detect_format(content="folder,filename") is SnapshotFormat.CSV
        assert detect_format() is SnapshotFormat.CSV

    def test_parse_snapshot_detects_json(self) -> None:
        data = serialize_snapshot([LibraryEntry("a.txt", "1")], "json")

        assert parse_snapshot(data).format is SnapshotFormat.JSON

    def test_unknown_format_rejected(self) -> None:
        with pytest.raises(ValueError):
            serialize_snapshot([], "xml")
