"""QR Library: text snippet library with portable CSV/JSON snapshots."""

from .version import load_version

__version__ = load_version()

__all__ = ["__version__"]
