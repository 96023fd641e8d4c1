"""Builders for small KoboReader.sqlite databases used in tests."""
from __future__ import annotations

import sqlite3
from typing import Dict, List

CONTENT_COLUMNS = ["ContentID", "ContentType", "MimeType", "BookTitle", "Title", "Attribution", "ISBN"]
BOOKMARK_COLUMNS = [
    "BookmarkID",
    "VolumeID",
    "ContentID",
    "StartContainerPath",
    "StartOffset",
    "EndContainerPath",
    "EndOffset",
    "Text",
    "Annotation",
]

EPUB_MIME = "application/x-kobo-epub+zip"


def insert_row(connection: sqlite3.Connection, table: str, columns: List[str], row: Dict[str, object]) -> None:
    values = [row.get(column) for column in columns]
    placeholders = ", ".join("?" for _ in columns)
    connection.execute(f"insert into {table} ({', '.join(columns)}) values ({placeholders})", values)


def volume(content_id: str, title: str, author: str | None) -> Dict[str, object]:
    return {
        "ContentID": content_id,
        "ContentType": 6,
        "MimeType": EPUB_MIME,
        "Title": title,
        "Attribution": author,
    }


def chapter(content_id: str, book_title: str | None, title: str, isbn: str | None = None) -> Dict[str, object]:
    return {
        "ContentID": content_id,
        "ContentType": 9,
        "MimeType": EPUB_MIME,
        "BookTitle": book_title,
        "Title": title,
        "ISBN": isbn,
    }


def bookmark(
    bookmark_id: str,
    volume_id: str,
    content_id: str,
    text: str | None,
    *,
    path: str = "span#kobo.1.1",
    offset: int | None = 0,
    annotation: str | None = None,
) -> Dict[str, object]:
    return {
        "BookmarkID": bookmark_id,
        "VolumeID": volume_id,
        "ContentID": content_id,
        "StartContainerPath": path,
        "StartOffset": offset,
        "EndContainerPath": path,
        "EndOffset": (offset or 0) + 10,
        "Text": text,
        "Annotation": annotation,
    }
