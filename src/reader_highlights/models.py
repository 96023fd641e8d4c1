"""Data models for e-reader highlight exports."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

NO_TITLE = "(No title)"
UNKNOWN_AUTHOR = "(Author unknown)"


class InputType(str, Enum):
    """Supported highlight sources."""

    KOBO = "kobo"
    OREILLY = "oreilly"

    @classmethod
    def from_value(cls, value: str) -> "InputType":
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower()
        for member in cls:
            if member.value == normalised:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown input type {value!r} (expected one of: {choices})")


@dataclass(frozen=True)
class HighlightEntry:
    """A single highlight as read from a source, before grouping.

    ``title`` is the section/chapter title reported by the source, while
    ``book_title`` identifies the book itself and may be absent.
    """

    isbn: Optional[str]
    author: Optional[str]
    book_title: Optional[str]
    title: str
    highlight_text: str
    annotation: Optional[str]
    start_offset: int
    end_offset: int
    start_container_path: str
    end_container_path: str


@dataclass
class Book:
    """Highlights collected for a single book."""

    title: str
    author: str
    highlights: List[str] = field(default_factory=list)
