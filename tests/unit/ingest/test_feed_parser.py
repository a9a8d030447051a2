"""Unit tests for the streaming CSV feed parser."""

from __future__ import annotations

import io

import pytest

from core.errors import MalformedCsvError
from ingest.feed_parser import parse_feed
from tests.fixture_paths import feed_bytes


def test_parse_feed_keeps_quoted_commas_and_newlines() -> None:
    """Quoted fields should keep embedded separators and line breaks."""
    records = list(parse_feed(io.BytesIO(feed_bytes("books_valid.csv"))))

    assert records[1][4] == "Winning will make you famous.\nLosing means certain death." and (
        records[3][1] == "Pride and Prejudice, Annotated"
    )


def test_parse_feed_yields_header_first() -> None:
    """The header row should be the first record produced."""
    records = parse_feed(io.BytesIO(feed_bytes("books_smith.csv")))

    assert next(records)[:3] == ["bookId", "title", "author"]


def test_parse_feed_unescapes_doubled_quotes() -> None:
    """Doubled quotes inside a quoted field should become one quote."""
    records = list(parse_feed(io.BytesIO(feed_bytes("books_valid.csv"))))

    assert records[5][4] == 'Poems with "quoted" lines.'


def test_parse_feed_strips_byte_order_mark_and_blank_lines() -> None:
    """A UTF-8 BOM and blank lines should not leak into records."""
    payload = "\ufeffbookId,title\r\n\r\n1,A\r\n".encode("utf-8")

    records = list(parse_feed(io.BytesIO(payload)))

    assert records == [["bookId", "title"], ["1", "A"]]


def test_parse_feed_raises_for_unbalanced_quotes() -> None:
    """An unterminated quoted field should abort parsing."""
    records = parse_feed(io.BytesIO(feed_bytes("books_unbalanced.csv")))

    with pytest.raises(MalformedCsvError):
        list(records)


def test_parse_feed_is_lazy() -> None:
    """Parsing should not read the stream before iteration starts."""
    stream = io.BytesIO(b"bookId\n1\n")

    parse_feed(stream)

    assert stream.tell() == 0


def test_parse_feed_accepts_fields_beyond_default_csv_limit() -> None:
    """A long balanced quoted field should parse instead of aborting the feed."""
    description = "x" * 200_000
    payload = f'bookId,description\n1,"{description}"\n'.encode("utf-8")

    records = list(parse_feed(io.BytesIO(payload)))

    assert len(records[1][1]) == 200_000


def test_parse_feed_reports_invalid_utf8() -> None:
    """Undecodable bytes should surface as a malformed feed."""
    payload = b"bookId,title\n1,\xff\xfe broken\n"

    with pytest.raises(MalformedCsvError, match="decode"):
        list(parse_feed(io.BytesIO(payload)))
