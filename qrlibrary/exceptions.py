#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
QR Library - Consolidated Exception Classes

All project-specific errors live here so the controller, the CLI and the
tests agree on one hierarchy.
"""

from datetime import datetime
from typing import Dict, Any, Optional


class QRLibraryError(Exception):
    """Base class for all project-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code or "ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': str(self),
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


# =====================================================================================================
# Security-related errors
# =====================================================================================================

class SecurityError(QRLibraryError):
    """Base class for security-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "SECURITY_ERROR", details)


class PathTraversalError(SecurityError):
    """Raised when a path would leave the library root."""

    def __init__(self, message: str, path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        path_details = details or {}
        if path:
            path_details['path'] = str(path)
        super().__init__(message, "PATH_TRAVERSAL", path_details)


# =====================================================================================================
# Configuration-related errors
# =====================================================================================================

class ConfigurationError(QRLibraryError):
    """Base class for configuration errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        config_details = details or {}
        if file_path:
            config_details['file_path'] = file_path
        super().__init__(message, error_code or "CONFIG_ERROR", config_details)


# =====================================================================================================
# IO and data-related errors
# =====================================================================================================

class DataError(QRLibraryError):
    """Base class for data-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "DATA_ERROR", details)


class FileOperationError(DataError):
    """Raised when reading or writing a single file fails."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 operation: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        file_details = details or {}
        if file_path:
            file_details['file_path'] = str(file_path)
        if operation:
            file_details['operation'] = operation
        super().__init__(message, "FILE_OP_ERROR", file_details)


class LibraryRootError(DataError):
    """Raised when the library root cannot be created or accessed."""

    def __init__(self, message: str, root: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        root_details = details or {}
        if root:
            root_details['root'] = str(root)
        super().__init__(message, "LIBRARY_ROOT_ERROR", root_details)


class SnapshotFormatError(DataError):
    """Raised when a snapshot file cannot be decoded at all."""

    def __init__(self, message: str, snapshot_format: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        format_details = details or {}
        if snapshot_format:
            format_details['format'] = snapshot_format
        super().__init__(message, "SNAPSHOT_FORMAT_ERROR", format_details)
