"""Utilities for exporting e-reader highlights into Markdown."""

from .config import ExportConfig
from .errors import HighlightSourceError, MalformedInput, QueryError, SourceUnavailable
from .models import Book, HighlightEntry, InputType
from .pipeline import collect_books, export_highlights

__all__ = [
    "ExportConfig",
    "HighlightSourceError",
    "MalformedInput",
    "QueryError",
    "SourceUnavailable",
    "Book",
    "HighlightEntry",
    "InputType",
    "collect_books",
    "export_highlights",
]
