"""Streaming CSV feed parser.

This module turns the fetched byte stream into raw records lazily,
honoring comma separation and double-quoted fields.
"""

from __future__ import annotations

import csv
import io
from typing import BinaryIO, Iterator

from core.constants import FEED_ENCODING, FEED_MAX_FIELD_CHARS
from core.errors import MalformedCsvError
from core.types import RawRecord


def parse_feed(byte_stream: BinaryIO, encoding: str = FEED_ENCODING) -> Iterator[RawRecord]:
    """Yield raw records from a CSV byte stream.

    The first yielded record is the header. Blank lines are skipped.
    Quoted fields may contain separators and newlines.

    Args:
        byte_stream: Readable binary stream; it is not closed here.
        encoding: Text encoding of the feed.

    Yields:
        One list of text fields per CSV record.

    Raises:
        MalformedCsvError: If quoting is unbalanced, a field exceeds
            ``FEED_MAX_FIELD_CHARS``, or the bytes cannot be decoded.
    """
    if csv.field_size_limit() < FEED_MAX_FIELD_CHARS:
        csv.field_size_limit(FEED_MAX_FIELD_CHARS)
    text_stream = io.TextIOWrapper(byte_stream, encoding=encoding, newline="")
    reader = csv.reader(text_stream, delimiter=",", quotechar='"', strict=True)
    try:
        while True:
            try:
                record = next(reader)
            except StopIteration:
                return
            except csv.Error as error:
                raise MalformedCsvError(
                    f"Failed to parse feed near line {reader.line_num}: {error}. "
                    f"{_describe_csv_error(error)}"
                ) from error
            except UnicodeDecodeError as error:
                raise MalformedCsvError(
                    f"Failed to decode feed near line {reader.line_num} as {encoding}: {error}."
                ) from error
            if not record:
                continue
            yield record
    finally:
        text_stream.detach()


def _describe_csv_error(error: csv.Error) -> str:
    """Name the likely cause of a reader error for the failure message."""
    if "field larger than field limit" in str(error):
        return (
            f"A field exceeds {FEED_MAX_FIELD_CHARS} characters; "
            "check the feed for a runaway quoted field."
        )
    return "The feed has unbalanced quoting and cannot be trusted."
