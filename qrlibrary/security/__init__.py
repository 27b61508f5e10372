"""Path sanitization and library-root confinement."""

from .path_guard import confine_to_root, is_within, relative_to_root, require_library_root
from .sanitize import (
    ALLOWED_EXTENSIONS,
    DEFAULT_BASENAME,
    DEFAULT_EXTENSION,
    ensure_allowed_extension,
    has_allowed_extension,
    join_relative_path,
    sanitize_file_name,
    sanitize_folder_component,
    sanitize_folder_path,
    sanitize_relative_path,
    split_extension,
    split_relative_path,
)

__all__ = [
    "ALLOWED_EXTENSIONS",
    "DEFAULT_BASENAME",
    "DEFAULT_EXTENSION",
    "confine_to_root",
    "ensure_allowed_extension",
    "has_allowed_extension",
    "is_within",
    "join_relative_path",
    "relative_to_root",
    "require_library_root",
    "sanitize_file_name",
    "sanitize_folder_component",
    "sanitize_folder_path",
    "sanitize_relative_path",
    "split_extension",
    "split_relative_path",
]
