from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# Ensure repo root on path
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def library_root(tmp_path: Path) -> Path:
    root = tmp_path / "library"
    root.mkdir()
    return root


@pytest.fixture
def write_files() -> Callable[[Path, Dict[str, str]], None]:
    """Write ``{relative_path: text}`` below a directory."""

    def _write(base: Path, files: Dict[str, str]) -> None:
        for rel, text in files.items():
            path = base / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(text.encode("utf-8"))

    return _write


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo handlers and propagation changes made by ``setup_logging``."""
    yield
    import logging

    package_logger = logging.getLogger("qrlibrary")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("QRLIBRARY_CONFIG", "QRLIBRARY_HOME", "QRLIBRARY_LOG_JSON", "QRLIBRARY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
