"""Shared helpers."""

from .result import Err, Ok, ReadResult, is_err, read_text_result

__all__ = ["Err", "Ok", "ReadResult", "is_err", "read_text_result"]
