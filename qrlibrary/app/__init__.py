"""Application layer: snapshot applier and transfer use cases."""

from .applier import apply_snapshot
from .transfer_controller import default_export_name, export_library, import_library

__all__ = ["apply_snapshot", "default_export_name", "export_library", "import_library"]
