"""Library root resolution."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

from ..exceptions import LibraryRootError
from .models import AppSettings

logger = logging.getLogger(__name__)

APP_NAME = "QRLibrary"
LIBRARY_DIR_NAME = "QRCodes"


def default_library_root() -> Path:
    return Path(user_data_dir(APP_NAME, appauthor=False)) / LIBRARY_DIR_NAME


def resolve_library_root(settings: Optional[AppSettings] = None, *, create: bool = True) -> Path:
    """Return the library root from settings or the per-user data directory.

    The directory is created when ``create`` is set. Any failure to create or
    reach it is fatal for the calling operation.
    """
    configured = settings.library.root if settings is not None else None
    root = Path(configured).expanduser() if configured else default_library_root()

    if create:
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LibraryRootError(f"Library root not available: {exc}", root=str(root)) from exc
    if root.exists() and not root.is_dir():
        raise LibraryRootError(f"Library root is not a directory: {root}", root=str(root))

    logger.debug("Library root resolved to %s", root)
    return root
