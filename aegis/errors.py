"""Error taxonomy for the scanner: target, parse and source-read failures."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class AegisError(Exception):
    """Base class for all scanner errors. ``str(exc)`` is the user-facing message."""


class TargetError(AegisError):
    """The scan target is missing, unreadable or neither a file nor a directory."""


class SourceReadError(AegisError):
    """A source file could not be read (missing, permission denied, bad encoding)."""

    def __init__(self, message: str, path: Union[str, Path, None] = None) -> None:
        super().__init__(message)
        self.path = path


class ParseError(AegisError):
    """Source text is not valid Solidity."""

    def __init__(
        self,
        message: str,
        *,
        line: int = 0,
        path: Union[str, Path, None] = None,
    ) -> None:
        self.reason = message
        self.line = line
        self.path: Optional[Union[str, Path]] = path
        if path is not None:
            message = f"Parse error in {path}: {message}"
        super().__init__(message)
