"""Exceptions raised while reading highlight sources."""
from __future__ import annotations

from pathlib import Path
from typing import Union


class HighlightSourceError(RuntimeError):
    """Raised when a highlight source cannot be read; aborts the export."""

    def __init__(self, path: Union[str, Path], operation: str, reason: str) -> None:
        self.path = Path(path)
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed for {self.path}: {reason}")


class SourceUnavailable(HighlightSourceError):
    """The source file is missing, unreadable or not in the expected container format."""


class QueryError(HighlightSourceError):
    """The source opened, but its expected structure could not be queried."""


class MalformedInput(HighlightSourceError):
    """The source is well-formed but its content does not match the export schema."""


class RowDecodeError(ValueError):
    """A single record could not be decoded; readers skip it and carry on."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"row {index}: {reason}")
