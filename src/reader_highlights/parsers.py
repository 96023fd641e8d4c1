"""Parsers that ingest e-reader highlight exports and group them by book."""
from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Type, TypeVar

from .errors import MalformedInput, QueryError, RowDecodeError, SourceUnavailable
from .models import NO_TITLE, UNKNOWN_AUTHOR, Book, HighlightEntry, InputType

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


class HighlightParser:
    """Base class for highlight parsers."""

    source_name = "unknown"

    def parse(self, path: Path) -> List[HighlightEntry]:
        raise NotImplementedError

    def _decode_all(
        self,
        path: Path,
        rows: Iterable[RowT],
        decode: Callable[[int, RowT], HighlightEntry],
    ) -> List[HighlightEntry]:
        """Decode every row, logging and skipping the ones that fail."""

        entries: List[HighlightEntry] = []
        failures: List[RowDecodeError] = []
        for index, row in enumerate(rows):
            try:
                entries.append(decode(index, row))
            except RowDecodeError as exc:
                failures.append(exc)

        for failure in failures:
            logger.warning("Skipping %s entry in %s: %s", self.source_name, path, failure)
        logger.debug(
            "Decoded %d %s entries from %s (%d skipped)",
            len(entries),
            self.source_name,
            path,
            len(failures),
        )
        return entries


def _require_str(index: int, name: str, value: object) -> str:
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RowDecodeError(index, f"{name} is not valid UTF-8: {exc}") from exc
    if not isinstance(value, str):
        raise RowDecodeError(index, f"{name} must be text, got {type(value).__name__}")
    return value


def _optional_str(index: int, name: str, value: object) -> Optional[str]:
    if value is None:
        return None
    return _require_str(index, name, value)


def _require_int(index: int, name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise RowDecodeError(index, f"{name} must be an integer, got {type(value).__name__}")
    return value


class KoboParser(HighlightParser):
    """Reads highlights from a Kobo ``KoboReader.sqlite`` database."""

    source_name = "kobo"

    # Bookmark content ids are prefixes of the epub content rows; author data
    # lives on the volume row (ContentType 6).
    QUERY = """
        select
          content.ISBN as isbn,
          content.BookTitle as book_title,
          content.Title as title,
          volume.Attribution as author,
          bookmark.Text as highlight_text,
          bookmark.Annotation as annotation,
          bookmark.StartOffset as start_offset,
          bookmark.EndOffset as end_offset,
          bookmark.StartContainerPath as start_container_path,
          bookmark.EndContainerPath as end_container_path
        from bookmark
        left outer join content
          on (content.ContentID like bookmark.ContentID || '%' and content.MimeType like '%epub%')
        left outer join content as volume
          on (volume.ContentID = bookmark.VolumeID and volume.ContentType = 6)
        where bookmark.Text is not null
    """

    def parse(self, path: Path) -> List[HighlightEntry]:
        path = path.expanduser()
        connection = self._connect(path)
        try:
            try:
                rows = connection.execute(self.QUERY).fetchall()
            except sqlite3.Error as exc:
                raise QueryError(path, "Kobo highlight query", str(exc)) from exc
        finally:
            connection.close()
        return self._decode_all(path, rows, self._decode_row)

    @staticmethod
    def _connect(path: Path) -> sqlite3.Connection:
        if not path.is_file():
            raise SourceUnavailable(path, "Opening Kobo database", "file not found")
        try:
            # Read-only URI so a wrong path never creates an empty database.
            connection = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as exc:
            raise SourceUnavailable(path, "Opening Kobo database", str(exc)) from exc
        connection.row_factory = sqlite3.Row
        # Text arrives as bytes and is decoded per row.
        connection.text_factory = bytes
        try:
            connection.execute("pragma schema_version").fetchone()
        except sqlite3.Error as exc:
            connection.close()
            raise SourceUnavailable(path, "Opening Kobo database", str(exc)) from exc
        return connection

    @staticmethod
    def _decode_row(index: int, row: sqlite3.Row) -> HighlightEntry:
        return HighlightEntry(
            isbn=_optional_str(index, "ISBN", row["isbn"]),
            author=_optional_str(index, "author", row["author"]),
            book_title=_optional_str(index, "book title", row["book_title"]),
            title=_require_str(index, "title", row["title"]),
            highlight_text=_require_str(index, "highlight text", row["highlight_text"]),
            annotation=_optional_str(index, "annotation", row["annotation"]),
            start_offset=_require_int(index, "start offset", row["start_offset"]),
            end_offset=_require_int(index, "end offset", row["end_offset"]),
            start_container_path=_require_str(
                index, "start container path", row["start_container_path"]
            ),
            end_container_path=_require_str(index, "end container path", row["end_container_path"]),
        )


class OreillyJsonParser(HighlightParser):
    """Parses an O'Reilly learning platform annotation export saved as JSON.

    The export mirrors the columns of the CSV download (``Book Title``,
    ``Authors``, ``Chapter Title``, ``Chapter URL``, ``Highlight``,
    ``Personal Note``), either as a top-level list or wrapped in an object under
    ``annotations``, ``highlights`` or ``items``.
    """

    source_name = "oreilly"

    LIST_KEYS = ("annotations", "highlights", "items")

    def parse(self, path: Path) -> List[HighlightEntry]:
        path = path.expanduser()
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailable(path, "Reading O'Reilly export", str(exc)) from exc
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedInput(path, "Parsing O'Reilly export", f"invalid JSON: {exc}") from exc

        items = self._extract_items(path, document)
        for position, item in enumerate(items):
            if not isinstance(item, dict):
                raise MalformedInput(
                    path,
                    "Parsing O'Reilly export",
                    f"annotation {position} is a {type(item).__name__}, expected an object",
                )
        return self._decode_all(path, items, self._decode_item)

    def _extract_items(self, path: Path, document: Any) -> List[Any]:
        if isinstance(document, list):
            return document
        if isinstance(document, dict):
            for key in self.LIST_KEYS:
                value = document.get(key)
                if isinstance(value, list):
                    return value
        raise MalformedInput(
            path,
            "Parsing O'Reilly export",
            "expected a list of annotations or an object containing one",
        )

    def _decode_item(self, index: int, item: Mapping[str, Any]) -> HighlightEntry:
        highlight = self._extract_first(item, ["highlight", "text", "highlight_text", "highlightText"])
        if not isinstance(highlight, str) or not highlight.strip():
            raise RowDecodeError(index, "annotation has no highlight text")

        book_title = self._extract_text(item, ["book_title", "bookTitle"])
        chapter_title = self._extract_text(item, ["chapter_title", "chapterTitle", "title"])
        start_path = self._extract_text(
            item, ["start_container_path", "startContainerPath", "chapter_url", "chapterUrl"]
        )
        end_path = self._extract_text(item, ["end_container_path", "endContainerPath"])
        start_offset = self._extract_offset(index, item, ["start_offset", "startOffset"])
        end_offset = self._extract_offset(index, item, ["end_offset", "endOffset"], default=start_offset)

        return HighlightEntry(
            isbn=self._extract_text(item, ["isbn", "ISBN"]),
            author=self._extract_author(item),
            book_title=book_title,
            title=chapter_title or book_title or "",
            highlight_text=highlight,
            annotation=self._extract_text(item, ["personal_note", "personalNote", "note", "annotation"]),
            start_offset=start_offset,
            end_offset=end_offset,
            start_container_path=start_path or "",
            end_container_path=end_path or start_path or "",
        )

    @staticmethod
    def _extract_first(item: Mapping[str, Any], keys: List[str]) -> Optional[Any]:
        for key in keys:
            value = item.get(key)
            if value not in (None, ""):
                return value
        return None

    def _extract_text(self, item: Mapping[str, Any], keys: List[str]) -> Optional[str]:
        value = self._extract_first(item, keys)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def _extract_author(self, item: Mapping[str, Any]) -> Optional[str]:
        authors = self._extract_first(item, ["authors", "author"])
        if isinstance(authors, list):
            names = [str(name).strip() for name in authors if str(name).strip()]
            return ", ".join(names) or None
        if isinstance(authors, str) and authors.strip():
            return authors.strip()
        return None

    def _extract_offset(self, index: int, item: Mapping[str, Any], keys: List[str], default: int = 0) -> int:
        value = self._extract_first(item, keys)
        if value is None:
            return default
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError as exc:
                raise RowDecodeError(index, f"{keys[0].replace('_', ' ')} is not an integer: {value!r}") from exc
        return _require_int(index, keys[0].replace("_", " "), value)


PARSERS: Dict[InputType, Type[HighlightParser]] = {
    InputType.KOBO: KoboParser,
    InputType.OREILLY: OreillyJsonParser,
}


def get_parser(input_type: InputType) -> HighlightParser:
    return PARSERS[input_type]()


def _sort_key(entry: HighlightEntry) -> Tuple[bool, str, str, int]:
    # Entries without a book title sort ahead of titled ones.
    return (
        bool(entry.book_title),
        entry.book_title or "",
        entry.start_container_path,
        entry.start_offset,
    )


def sort_entries(entries: Iterable[HighlightEntry]) -> List[HighlightEntry]:
    """Return entries in reading order: book title, container path, then offset."""

    return sorted(entries, key=_sort_key)


def group_by_book(entries: Iterable[HighlightEntry]) -> Dict[str, Book]:
    """Group entries into books keyed by their resolved title.

    Books sharing a title are merged, and a book's author is the first author
    found in reading order; neither case is reconciled any further.
    """

    books: Dict[str, Book] = {}
    resolved_authors: Set[str] = set()
    for entry in sort_entries(entries):
        title = entry.book_title or NO_TITLE
        book = books.get(title)
        if book is None:
            book = books[title] = Book(title=title, author=UNKNOWN_AUTHOR)
        if entry.author and title not in resolved_authors:
            book.author = entry.author
            resolved_authors.add(title)
        book.highlights.append(entry.highlight_text)
    return books
