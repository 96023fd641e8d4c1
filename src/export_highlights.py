"""Command line entry point for exporting e-reader highlights as Markdown."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable

from reader_highlights.config import ExportConfig, load_config
from reader_highlights.errors import HighlightSourceError
from reader_highlights.markdown import render_book
from reader_highlights.models import InputType
from reader_highlights.pipeline import collect_books

LOGGER_NAME = "reader_highlights"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Send package log records to stderr at ``level``."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def _parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "-i",
        "--input-type",
        choices=[member.value for member in InputType],
        help="Kind of highlight source to read",
        default=None,
    )
    parser.add_argument("-f", "--file", type=Path, help="Path to the highlight source file", default=None)
    parser.add_argument("--config", type=Path, help="Path to JSON configuration file", default=None)
    parser.add_argument(
        "--list", action="store_true", dest="list_only", help="List books and highlight counts only"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def _combine_config(args: argparse.Namespace) -> ExportConfig:
    try:
        file_config = load_config(args.config)
        config = ExportConfig.from_mapping(file_config)
    except FileNotFoundError as exc:  # pragma: no cover - user error
        raise SystemExit(f"Configuration file not found: {args.config}") from exc
    except OSError as exc:  # pragma: no cover - user error
        raise SystemExit(f"Failed to read configuration file: {exc}") from exc
    except (json.JSONDecodeError, ValueError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    if args.input_type is not None:
        config.input_type = InputType.from_value(args.input_type)
    if args.file is not None:
        config.file_path = args.file
    if args.list_only:
        config.list_only = True
    if args.verbose:
        config.log_level = "DEBUG"

    if config.input_type is None:
        raise SystemExit("An input type is required (--input-type kobo|oreilly).")
    if config.file_path is None:
        raise SystemExit("A source file is required (--file PATH).")
    return config


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    config = _combine_config(args)
    configure_logging(config.log_level)

    try:
        books = collect_books(config.input_type, config.file_path)
    except HighlightSourceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if config.list_only:
        total = sum(len(book.highlights) for book in books.values())
        print(f"Found {total} highlights across {len(books)} books.")
        for book in books.values():
            print(f"- {book.title} ({book.author}): {len(book.highlights)} highlight(s)")
        return 0

    for index, book in enumerate(books.values()):
        if index and config.separator:
            print(config.separator)
        print(render_book(book), end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
