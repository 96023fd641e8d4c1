"""Markdown rendering for grouped highlights."""
from __future__ import annotations

from typing import List

from .models import Book


def render_highlight(text: str) -> str:
    """Render one highlight as a blockquote followed by a blank line.

    Each line of a multi-line highlight is trimmed and quoted on its own, so
    paragraph breaks survive inside the quote. Only newline characters
    separate lines, and a trailing newline does not add an empty quote line.
    Markdown in the text is not escaped.
    """

    lines = text.split("\n")
    if len(lines) > 1 and not lines[-1]:
        lines.pop()
    quoted: List[str] = [f"> {line.strip()}\n" for line in lines]
    return "".join(quoted) + "\n"


def render_book(book: Book) -> str:
    header = f"# {book.title}\n\nAuthor: {book.author}\n\n"
    return header + "".join(render_highlight(text) for text in book.highlights)
