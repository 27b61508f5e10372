#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
QR Library - command line interface

Exports the snippet library to a single CSV/JSON file, imports such a file
back, and offers a few maintenance commands for the library folder.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .app.transfer_controller import default_export_name, export_library, import_library
from .config import AppSettings, load_settings, resolve_library_root
from .core.library_store import LibraryStore
from .core.models import FileNode
from .core.scanner import scan_library
from .exceptions import QRLibraryError
from .logging_config import get_logger, get_performance_logger, setup_logging
from .version import load_version

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrlibrary", description="QR Library - snippet library transfer tool")
    parser.add_argument("--root", help="Library root directory (default: per-user data folder)")
    parser.add_argument("--config", help="Settings file (YAML or JSON)")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--log-json", action="store_true", help="Emit structured JSON log lines")
    parser.add_argument("--version", action="version", version=f"%(prog)s {load_version()}")

    sub = parser.add_subparsers(dest="command", required=True)

    export_cmd = sub.add_parser("export", help="Export the library to one file")
    export_cmd.add_argument("destination", nargs="?", help="Target file or directory")
    export_cmd.add_argument("--format", choices=["csv", "json"], help="Snapshot format")

    import_cmd = sub.add_parser("import", help="Import a CSV/JSON snapshot into the library")
    import_cmd.add_argument("source", help="Snapshot file to import")
    import_cmd.add_argument("--format", choices=["csv", "json"], help="Snapshot format (default: detect)")

    sub.add_parser("scan", help="List library entries")
    sub.add_parser("tree", help="Show the library folder tree")

    clear_cmd = sub.add_parser("clear", help="Delete every snippet in the library")
    clear_cmd.add_argument("--yes", action="store_true", help="Confirm deletion")
    return parser


def _export_target(destination: Optional[str], fmt: Optional[str], settings: AppSettings) -> Path:
    chosen = fmt or settings.transfer.default_format
    name = default_export_name(chosen, suffix=settings.transfer.export_name_suffix)
    if not destination:
        return Path.cwd() / name
    target = Path(destination)
    if target.is_dir():
        return target / name
    return target


def _print_tree(node: FileNode, depth: int = 0) -> None:
    for child in node.children or []:
        marker = "/" if child.is_dir else ""
        print(f"{'  ' * depth}{child.name}{marker}")
        if child.is_dir:
            _print_tree(child, depth + 1)


def run(args: argparse.Namespace, settings: AppSettings) -> int:
    if args.root:
        settings.library.root = args.root
    root = resolve_library_root(settings)
    allowed = settings.library.allowed_extensions

    if args.command == "export":
        target = _export_target(args.destination, args.format, settings)
        report = export_library(root, target, args.format, allowed_extensions=allowed)
        print(f"Exported {report.entry_count} snippets to {report.destination}")
        for item in report.skipped:
            print(f"  skipped {item.source}: {item.reason}")
        return 0

    if args.command == "import":
        report = import_library(args.source, root, args.format, allowed_extensions=allowed)
        renamed = sum(1 for item in report.apply.applied if item.renamed)
        print(f"Imported {len(report.apply.applied)} snippets into {root} ({renamed} renamed)")
        for item in report.parse.skipped:
            print(f"  skipped {item.source}: {item.reason}")
        return 0

    if args.command == "scan":
        scan = scan_library(root, allowed)
        for entry in scan.entries:
            print(entry.relative_path)
        for item in scan.skipped:
            print(f"  skipped {item.source}: {item.reason}")
        return 0

    if args.command == "tree":
        _print_tree(LibraryStore(root, allowed).build_tree())
        return 0

    if args.command == "clear":
        if not args.yes:
            print("Refusing to clear the library without --yes")
            return 1
        removed = LibraryStore(root, allowed).clear()
        print(f"Cleared library ({removed} items removed)")
        return 0

    return 1


def _log_timings() -> None:
    for operation, stats in sorted(get_performance_logger().get_stats().items()):
        logger.debug(
            "Timing %s: %d call(s), %.3fs total, %.3fs avg",
            operation, stats["count"], stats["total_time"], stats["avg_time"],
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings(args.config)
    log_cfg = settings.logging
    setup_logging(
        log_level=args.log_level or log_cfg.level,
        log_dir=log_cfg.log_dir,
        enable_file_logging=log_cfg.file_logging,
        max_log_size=log_cfg.max_log_size,
        backup_count=log_cfg.backup_count,
        structured_json=True if args.log_json else log_cfg.json_output,
    )

    try:
        return run(args, settings)
    except QRLibraryError as exc:
        logger.error("%s failed: %s", args.command, exc, extra={"details": exc.to_dict()})
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        _log_timings()


if __name__ == "__main__":
    raise SystemExit(main())
