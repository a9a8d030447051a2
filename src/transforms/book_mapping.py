"""Header indexing and row projection.

This module validates the feed header once and projects each raw
record into a typed ``BookRecord`` plus its author name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from core.constants import (
    COLUMN_AUTHOR,
    COLUMN_BOOK_FORMAT,
    COLUMN_BOOK_ID,
    COLUMN_DESCRIPTION,
    COLUMN_EDITION,
    COLUMN_FIRST_PUBLISH_DATE,
    COLUMN_ISBN,
    COLUMN_LANGUAGE,
    COLUMN_LIKED_PERCENT,
    COLUMN_PAGES,
    COLUMN_PRICE,
    COLUMN_PUBLISH_DATE,
    COLUMN_PUBLISHER,
    COLUMN_RATING,
    COLUMN_TITLE,
    LIKED_PERCENT_NUMERIC,
    POSTGRES_BIGINT_MAX,
    POSTGRES_BIGINT_MIN,
    POSTGRES_INTEGER_MAX,
    POSTGRES_INTEGER_MIN,
    PRICE_NUMERIC,
    RATING_NUMERIC,
    REQUIRED_FEED_COLUMNS,
)
from core.errors import MissingColumnError
from core.types import BookRecord, MappedRow
from transforms.field_coercion import coerce_date, coerce_decimal, coerce_int


@dataclass(frozen=True)
class HeaderIndex:
    """Column name to position lookup for one feed."""

    positions: Mapping[str, int]

    @classmethod
    def from_header(cls, header: Sequence[str]) -> "HeaderIndex":
        """Build and validate a header index.

        Args:
            header: First record of the feed.

        Returns:
            Header index covering every required column.

        Raises:
            MissingColumnError: If any required column is absent.
        """
        positions = {name.strip(): position for position, name in enumerate(header)}
        missing_columns = tuple(
            column for column in REQUIRED_FEED_COLUMNS if column not in positions
        )
        if missing_columns:
            raise MissingColumnError(missing_columns)
        return cls(positions=positions)

    def cell(self, record: Sequence[str], column: str) -> str:
        """Return the cell for a column, or an empty string for short rows."""
        position = self.positions[column]
        if position >= len(record):
            return ""
        return record[position]


def map_row(header_index: HeaderIndex, record: Sequence[str]) -> MappedRow:
    """Project one raw record into a typed book and author name.

    Args:
        header_index: Validated header index.
        record: Raw CSV fields for one data row.

    Returns:
        Mapped row; cell-level problems fall back to coercion defaults.
    """

    def cell(column: str) -> str:
        return header_index.cell(record, column)

    book = BookRecord(
        book_id=coerce_int(cell(COLUMN_BOOK_ID), POSTGRES_BIGINT_MIN, POSTGRES_BIGINT_MAX),
        title=cell(COLUMN_TITLE),
        rating=coerce_decimal(cell(COLUMN_RATING), RATING_NUMERIC),
        description=cell(COLUMN_DESCRIPTION),
        language=cell(COLUMN_LANGUAGE),
        isbn=cell(COLUMN_ISBN),
        book_format=cell(COLUMN_BOOK_FORMAT),
        edition=cell(COLUMN_EDITION),
        pages=coerce_int(cell(COLUMN_PAGES), POSTGRES_INTEGER_MIN, POSTGRES_INTEGER_MAX),
        publisher=cell(COLUMN_PUBLISHER),
        publish_date=coerce_date(cell(COLUMN_PUBLISH_DATE)),
        first_publish_date=coerce_date(cell(COLUMN_FIRST_PUBLISH_DATE)),
        liked_percent=coerce_decimal(cell(COLUMN_LIKED_PERCENT), LIKED_PERCENT_NUMERIC),
        price=coerce_decimal(cell(COLUMN_PRICE), PRICE_NUMERIC),
    )
    return MappedRow(book=book, author_name=cell(COLUMN_AUTHOR))
