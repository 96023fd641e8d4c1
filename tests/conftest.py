import logging
import sqlite3
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from kobo_db import BOOKMARK_COLUMNS, CONTENT_COLUMNS, insert_row


@pytest.fixture
def make_kobo_db(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory that writes a minimal KoboReader.sqlite."""

    def factory(contents: List[Dict[str, object]], bookmarks: List[Dict[str, object]]) -> Path:
        path = tmp_path / "KoboReader.sqlite"
        connection = sqlite3.connect(str(path))
        try:
            connection.execute(
                "create table content (ContentID text, ContentType integer, MimeType text,"
                " BookTitle text, Title text, Attribution text, ISBN text)"
            )
            connection.execute(
                "create table bookmark (BookmarkID text, VolumeID text, ContentID text,"
                " StartContainerPath text, StartOffset integer, EndContainerPath text,"
                " EndOffset integer, Text text, Annotation text)"
            )
            for row in contents:
                insert_row(connection, "content", CONTENT_COLUMNS, row)
            for row in bookmarks:
                insert_row(connection, "bookmark", BOOKMARK_COLUMNS, row)
            connection.commit()
        finally:
            connection.close()
        return path

    return factory


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attaches so they never outlive a captured stream."""

    logger = logging.getLogger("reader_highlights")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
