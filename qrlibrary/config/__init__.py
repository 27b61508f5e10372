"""QR Library configuration package.

Settings are stored as YAML (or JSON by suffix) and validated with pydantic.
"""

from .io import load_settings, save_settings
from .models import (
    DEFAULT_ALLOWED_EXTENSIONS,
    AppSettings,
    LibrarySettings,
    LoggingSettings,
    TransferSettings,
    validate_settings,
)
from .paths import default_library_root, resolve_library_root

__all__ = [
    "DEFAULT_ALLOWED_EXTENSIONS",
    "AppSettings",
    "LibrarySettings",
    "LoggingSettings",
    "TransferSettings",
    "default_library_root",
    "load_settings",
    "resolve_library_root",
    "save_settings",
    "validate_settings",
]
