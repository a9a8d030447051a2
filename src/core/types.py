"""Shared typed models.

This module defines immutable data models used by the mapping, store,
and orchestration layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from core.constants import PHASE_DONE

RawRecord = list[str]


@dataclass(frozen=True)
class BookRecord:
    """Typed catalog entry ready for persistence.

    Attributes:
        book_id: Natural key of the book.
        title: Book title.
        rating: Average rating, zero when unparseable.
        description: Free-text description.
        language: Language name, may be empty.
        isbn: ISBN text, may be empty.
        book_format: Binding or format, may be empty.
        edition: Edition text, may be empty.
        pages: Page count, zero when unparseable.
        publisher: Publisher name, may be empty.
        publish_date: Publication date when parseable.
        first_publish_date: First publication date when parseable.
        liked_percent: Share of readers who liked the book.
        price: List price, zero when unparseable.
    """

    book_id: int
    title: str
    rating: Decimal
    description: str
    language: str
    isbn: str
    book_format: str
    edition: str
    pages: int
    publisher: str
    publish_date: date | None
    first_publish_date: date | None
    liked_percent: Decimal
    price: Decimal


@dataclass(frozen=True)
class MappedRow:
    """One feed row projected into a book and its raw author name."""

    book: BookRecord
    author_name: str


@dataclass(frozen=True)
class AuthorEntry:
    """Author natural key paired with its store-assigned identifier."""

    name: str
    author_id: int


@dataclass(frozen=True)
class BookAuthorLink:
    """Association row between a book and an author."""

    book_id: int
    author_id: int


@dataclass(frozen=True)
class IngestionChunk:
    """Bounded unit of work applied to the store in one transaction.

    Attributes:
        index: One-based chunk position within the run.
        books: Book rows to upsert.
        links: Book/author rows to upsert.
    """

    index: int
    books: tuple[BookRecord, ...]
    links: tuple[BookAuthorLink, ...]


@dataclass(frozen=True)
class ImportOptions:
    """Import command options.

    Attributes:
        feed_url: Optional feed URL override.
        batch_size: Optional chunk size override.
        dry_run: Fetch, parse, and map without touching the store.
    """

    feed_url: str | None = None
    batch_size: int | None = None
    dry_run: bool = False


@dataclass(frozen=True)
class WriteResult:
    """Counters produced by the batch writer."""

    records_committed: int = 0
    books_inserted: int = 0
    links_inserted: int = 0
    links_skipped: int = 0
    chunks_committed: int = 0


@dataclass(frozen=True)
class IngestSummary:
    """Summary of one import run.

    Attributes:
        records_read: Data rows parsed from the feed, header excluded.
        records_committed: Book rows applied in committed chunks.
        books_inserted: Book rows that did not already exist.
        links_inserted: Link rows that did not already exist.
        links_skipped: Books written without a link because the author was blank.
        authors_resolved: Distinct author names resolved to identifiers.
        authors_inserted: Author rows created by this run.
        chunks_committed: Number of committed chunks.
        elapsed_seconds: Wall-clock duration of the run.
        phase: Final phase reached.
        dry_run: Whether the store was skipped.
    """

    records_read: int
    records_committed: int
    books_inserted: int
    links_inserted: int
    links_skipped: int
    authors_resolved: int
    authors_inserted: int
    chunks_committed: int
    elapsed_seconds: float
    phase: str = PHASE_DONE
    dry_run: bool = False
