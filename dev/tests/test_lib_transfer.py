from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from qrlibrary.app.api import (
    LibraryEntry,
    SnapshotFormat,
    default_export_name,
    export_library,
    import_library,
    scan_library,
)
from qrlibrary.exceptions import FileOperationError, LibraryRootError, SnapshotFormatError

pytestmark = pytest.mark.integration


def test_default_export_name() -> None:
    now = datetime(2024, 5, 1, 9, 30, 0)

    assert default_export_name("csv", now=now) == "2024-05-01_09-30-00_QRLibrary.csv"
    assert default_export_name(SnapshotFormat.JSON, now=now, suffix="Backup") == "2024-05-01_09-30-00_Backup.json"


def test_export_writes_documented_csv(library_root: Path, tmp_path: Path, write_files) -> None:
    write_files(library_root, {"note1.txt": "hello world", "sub/note2.txt": "line one\nline two"})
    dest = tmp_path / "out" / "export.csv"

    report = export_library(library_root, dest)

    assert dest.read_bytes().decode("utf-8") == (
        '"folder","filename","text","order"\n'
        '"","note1.txt","hello world","1"\n'
        '"sub","note2.txt","line one\\nline two","2"\n'
    )
    assert report.entry_count == 2
    assert report.format is SnapshotFormat.CSV
    assert report.skipped == []


def test_export_format_from_suffix(library_root: Path, tmp_path: Path, write_files) -> None:
    write_files(library_root, {"a.qr": "x"})

    report = export_library(library_root, tmp_path / "snap.json")

    assert report.format is SnapshotFormat.JSON
    payload = json.loads((tmp_path / "snap.json").read_text(encoding="utf-8"))
    assert payload["items"] == [{"path": "a.qr", "text": "x"}]


def test_export_of_empty_library(library_root: Path, tmp_path: Path) -> None:
    dest = tmp_path / "empty.csv"

    report = export_library(library_root, dest)

    assert report.entry_count == 0
    assert dest.read_text(encoding="utf-8") == '"folder","filename","text","order"\n'


def test_export_to_unwritable_destination(library_root: Path, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(FileOperationError) as excinfo:
        export_library(library_root, blocker / "export.csv")

    assert excinfo.value.details["operation"] == "export"


@pytest.mark.parametrize("fmt", ["csv", "json"])
def test_export_then_import_into_empty_library(library_root: Path, tmp_path: Path, write_files, fmt: str) -> None:
    files = {"a.txt": "alpha", "sub/b.qr": 'comma, "quote"\nand newline', "sub/deeper/c.qrtext": ""}
    write_files(library_root, files)
    dest = tmp_path / f"snap.{fmt}"
    export_library(library_root, dest)

    target = tmp_path / "restored"
    target.mkdir()
    report = import_library(dest, target)

    assert scan_library(target).entries == scan_library(library_root).entries
    assert report.format.value == fmt
    assert not any(item.renamed for item in report.apply.applied)


def test_reimport_into_same_library_duplicates(library_root: Path, tmp_path: Path, write_files) -> None:
    write_files(library_root, {"n.txt": "1"})
    dest = tmp_path / "snap.csv"
    export_library(library_root, dest)

    report = import_library(dest, library_root)

    assert [item.final_path for item in report.apply.applied] == ["n-1.txt"]
    assert (library_root / "n.txt").read_text(encoding="utf-8") == "1"
    assert (library_root / "n-1.txt").read_text(encoding="utf-8") == "1"


def test_import_notifies_once(library_root: Path, tmp_path: Path) -> None:
    source = tmp_path / "in.csv"
    source.write_text("note1.txt,hello,1\nnote2.txt,world,2\n", encoding="utf-8")
    calls = []

    report = import_library(source, library_root, on_change=lambda: calls.append(1))

    assert calls == [1]
    assert [e.relative_path for e in report.parse.entries] == ["note1.txt", "note2.txt"]


def test_import_strips_bom(library_root: Path, tmp_path: Path) -> None:
    source = tmp_path / "excel.csv"
    source.write_bytes("\ufefffolder,filename,text,order\n\"\",\"a.txt\",\"x\",1\n".encode("utf-8"))

    report = import_library(source, library_root)

    assert report.parse.entries == [LibraryEntry("a.txt", "x")]


def test_import_detects_json_content(library_root: Path, tmp_path: Path) -> None:
    source = tmp_path / "snapshot.dat"
    source.write_text('{"version": 1, "items": [{"path": "j.txt", "text": "y"}]}', encoding="utf-8")

    report = import_library(source, library_root)

    assert report.format is SnapshotFormat.JSON
    assert (library_root / "j.txt").read_text(encoding="utf-8") == "y"


def test_import_reports_skipped_rows(library_root: Path, tmp_path: Path) -> None:
    source = tmp_path / "in.csv"
    source.write_text("filename,text\nonly-name\ngood.txt,ok\n", encoding="utf-8")

    report = import_library(source, library_root)

    assert [e.relative_path for e in report.parse.entries] == ["good.txt"]
    assert [s.source for s in report.parse.skipped] == ["row 2"]


def test_import_missing_source(library_root: Path, tmp_path: Path) -> None:
    with pytest.raises(FileOperationError) as excinfo:
        import_library(tmp_path / "missing.csv", library_root)

    assert excinfo.value.details["operation"] == "import"


def test_import_invalid_json_writes_nothing(library_root: Path, tmp_path: Path) -> None:
    source = tmp_path / "bad.json"
    source.write_text("{oops", encoding="utf-8")

    with pytest.raises(SnapshotFormatError):
        import_library(source, library_root)

    assert list(library_root.iterdir()) == []


def test_import_into_missing_root(tmp_path: Path) -> None:
    source = tmp_path / "in.csv"
    source.write_text("a.txt,x\n", encoding="utf-8")

    with pytest.raises(LibraryRootError):
        import_library(source, tmp_path / "nowhere")
