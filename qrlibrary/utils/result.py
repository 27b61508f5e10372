"""Read outcomes for snippet files: ``Ok`` with the text or ``Err`` with the cause."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypeGuard, Union


@dataclass(frozen=True)
class Ok:
    value: str


@dataclass(frozen=True)
class Err:
    error: Exception

    @property
    def reason(self) -> str:
        """Short human readable cause, used for skipped-file reports."""
        if isinstance(self.error, UnicodeDecodeError):
            return "not valid UTF-8"
        if isinstance(self.error, OSError) and self.error.strerror:
            return self.error.strerror
        return str(self.error)


ReadResult = Union[Ok, Err]


def is_err(result: ReadResult) -> TypeGuard[Err]:
    return isinstance(result, Err)


def read_text_result(path: Union[str, Path]) -> ReadResult:
    """Read a UTF-8 text file without translating line endings."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as handle:
            return Ok(handle.read())
    except (OSError, UnicodeDecodeError) as exc:
        return Err(exc)
