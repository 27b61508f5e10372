"""Version utilities for QR Library."""

from __future__ import annotations

from importlib import metadata

FALLBACK_VERSION = "1.0.0"


def load_version() -> str:
    try:
        return metadata.version("qrlibrary")
    except metadata.PackageNotFoundError:
        return FALLBACK_VERSION
