"""Path sanitization for library entries.

Every function here is pure and total: arbitrary user or import supplied
strings are normalised into safe path components and never raise.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

ALLOWED_EXTENSIONS = frozenset({"txt", "qr", "qrtext"})
DEFAULT_EXTENSION = "txt"
DEFAULT_BASENAME = "Imported"

_WHITESPACE_RE = re.compile(r"\s+")
# Windows-reserved characters plus control characters.
_ILLEGAL_CHARS_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')


def _normalize_extensions(allowed_extensions: Optional[Iterable[str]]) -> frozenset:
    if allowed_extensions is None:
        return ALLOWED_EXTENSIONS
    return frozenset(str(ext).strip().lstrip(".").lower() for ext in allowed_extensions)


def _substitute(value: str) -> str:
    value = _WHITESPACE_RE.sub("_", value.strip())
    return _ILLEGAL_CHARS_RE.sub("-", value)


def split_extension(name: str) -> Tuple[str, str]:
    """Split ``name`` into base and extension (without dot).

    A leading dot does not start an extension and a trailing dot yields an
    empty one, so ``".profile"`` and ``"note."`` have no extension.
    """
    idx = name.rfind(".")
    if idx <= 0:
        return name, ""
    return name[:idx], name[idx + 1:]


def has_allowed_extension(name: str, allowed_extensions: Optional[Iterable[str]] = None) -> bool:
    _, ext = split_extension(name)
    return bool(ext) and ext.lower() in _normalize_extensions(allowed_extensions)


def ensure_allowed_extension(name: str, allowed_extensions: Optional[Iterable[str]] = None) -> str:
    """Keep an allowed extension, otherwise replace or add ``.txt``."""
    if has_allowed_extension(name, allowed_extensions):
        return name
    base, _ = split_extension(name)
    return f"{base or DEFAULT_BASENAME}.{DEFAULT_EXTENSION}"


def sanitize_folder_component(raw: str) -> str:
    """Sanitize one folder name; ``.`` and ``..`` become empty.

    Leading dots are dropped as for file names, since hidden folders are
    never scanned.
    """
    value = str(raw or "").strip()
    if value in (".", ".."):
        return ""
    return _substitute(value).lstrip(".")


def _sanitize_file_component(raw: str) -> str:
    # Leading dots would make the file hidden, and hidden files are never scanned.
    return _substitute(str(raw or "")).lstrip(".")


def sanitize_file_name(raw: str, fallback: str = DEFAULT_BASENAME,
                       allowed_extensions: Optional[Iterable[str]] = None) -> str:
    candidate = _sanitize_file_component(raw)
    if not candidate:
        candidate = _sanitize_file_component(fallback)
    return ensure_allowed_extension(candidate, allowed_extensions)


def sanitize_folder_path(raw: str) -> str:
    components = (sanitize_folder_component(part) for part in str(raw or "").split("/"))
    return "/".join(part for part in components if part)


def split_relative_path(path: str) -> Tuple[str, str]:
    """Return ``(folder, filename)`` for a ``/``-separated relative path."""
    value = str(path or "")
    if "/" not in value:
        return "", value
    folder, _, filename = value.rpartition("/")
    return folder, filename


def join_relative_path(folder: str, filename: str) -> str:
    return f"{folder}/{filename}" if folder else filename


def sanitize_relative_path(raw: str, fallback: str = DEFAULT_BASENAME,
                           allowed_extensions: Optional[Iterable[str]] = None) -> str:
    """Sanitize a full relative path: folder segments plus a file name.

    Backslashes are treated as separators first so Windows-style paths keep
    their structure instead of collapsing into one component.
    """
    value = str(raw or "").replace("\\", "/")
    folder, filename = split_relative_path(value)
    return join_relative_path(
        sanitize_folder_path(folder),
        sanitize_file_name(filename, fallback, allowed_extensions),
    )
