from reader_highlights.markdown import render_book, render_highlight
from reader_highlights.models import Book


def test_render_book_layout() -> None:
    book = Book(title="Foo", author="Jane Doe", highlights=["First.", "Second."])

    assert render_book(book) == (
        "# Foo\n"
        "\n"
        "Author: Jane Doe\n"
        "\n"
        "> First.\n"
        "\n"
        "> Second.\n"
        "\n"
    )


def test_render_highlight_trims_each_line() -> None:
    assert render_highlight("Line one.\n  Line two.  ") == "> Line one.\n> Line two.\n\n"


def test_render_highlight_keeps_blank_lines_inside_quote() -> None:
    assert render_highlight("Para one.\n\nPara two.") == "> Para one.\n> \n> Para two.\n\n"


def test_render_highlight_empty_text() -> None:
    assert render_highlight("") == "> \n\n"


def test_render_book_without_highlights() -> None:
    assert render_book(Book(title="Empty", author="Nobody")) == "# Empty\n\nAuthor: Nobody\n\n"


def test_render_book_passes_markdown_through() -> None:
    book = Book(title="*Bold* _title_", author="A & B", highlights=["# not a heading"])

    rendered = render_book(book)

    assert rendered.startswith("# *Bold* _title_\n\nAuthor: A & B\n\n")
    assert "> # not a heading\n" in rendered


def test_render_book_is_repeatable() -> None:
    book = Book(title="Foo", author="Jane", highlights=["a\n b ", "c"])

    assert render_book(book) == render_book(book)


def test_render_highlight_splits_only_on_newlines() -> None:
    assert render_highlight("one\x0btwo three\r\nfour\n") == "> one\x0btwo three\n> four\n\n"
