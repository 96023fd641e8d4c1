"""Read a highlight source, group it by book and render each book."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Union

from .markdown import render_book
from .models import Book, InputType
from .parsers import get_parser, group_by_book

logger = logging.getLogger(__name__)


def collect_books(input_type: InputType, path: Union[str, Path]) -> Dict[str, Book]:
    """Read every highlight from ``path`` and group them by resolved book title.

    Any :class:`~reader_highlights.errors.HighlightSourceError` raised by the
    parser propagates unchanged, so a failed source never yields partial books.
    """

    source = Path(path)
    entries = get_parser(input_type).parse(source)
    books = group_by_book(entries)
    logger.info(
        "Read %d highlight(s) across %d book(s) from %s source %s",
        len(entries),
        len(books),
        input_type.value,
        source,
    )
    return books


def export_highlights(input_type: InputType, path: Union[str, Path]) -> List[str]:
    """Return one Markdown document per book found in the source."""

    return [render_book(book) for book in collect_books(input_type, path).values()]
