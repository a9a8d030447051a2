"""Parameterized catalog statements.

This module maps book, author, and link operations onto PostgreSQL
statements with ``ON CONFLICT DO NOTHING`` for idempotent re-runs.
Driver errors are translated into ``StoreError`` at this boundary.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, ContextManager, Iterator, Protocol, Sequence

import psycopg

from core.errors import StoreError
from core.types import BookAuthorLink, BookRecord

INSERT_AUTHOR_SQL = "INSERT INTO authors (name) VALUES (%s) ON CONFLICT (name) DO NOTHING"
SELECT_AUTHOR_SQL = "SELECT author_id FROM authors WHERE name = %s"
INSERT_BOOK_SQL = (
    "INSERT INTO books (book_id, title, rating, description, language, isbn, book_format, "
    "edition, pages, publisher, publish_date, first_publish_date, liked_percent, price) "
    "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s) "
    "ON CONFLICT (book_id) DO NOTHING"
)
INSERT_BOOK_AUTHOR_SQL = (
    "INSERT INTO books_authors (book_id, author_id) VALUES (%s, %s) ON CONFLICT DO NOTHING"
)


class CatalogStore(Protocol):
    """Store operations required by author resolution and batch writes."""

    def find_author_id(self, name: str) -> int | None: ...

    def insert_author(self, name: str) -> bool: ...

    def insert_books(self, books: Sequence[BookRecord]) -> int: ...

    def insert_links(self, links: Sequence[BookAuthorLink]) -> int: ...

    def transaction(self) -> ContextManager[None]: ...


class PostgresCatalogStore:
    """PostgreSQL implementation of catalog writes.

    The connection is expected in autocommit mode so that statements outside
    ``transaction()`` apply immediately and each ``transaction()`` block is
    one atomic unit.
    """

    def __init__(self, connection: psycopg.Connection[Any]) -> None:
        self._connection = connection

    def find_author_id(self, name: str) -> int | None:
        """Return the stored identifier for an author name, if any."""
        with _translate_errors("read author"):
            with self._connection.cursor() as cursor:
                cursor.execute(SELECT_AUTHOR_SQL, (name,))
                row = cursor.fetchone()
        if row is None:
            return None
        return int(row[0])

    def insert_author(self, name: str) -> bool:
        """Insert an author name, treating an existing name as success.

        Returns:
            True when a new row was created, False when the name already existed.
        """
        with _translate_errors("insert author"):
            with self._connection.cursor() as cursor:
                cursor.execute(INSERT_AUTHOR_SQL, (name,))
                return cursor.rowcount == 1

    def insert_books(self, books: Sequence[BookRecord]) -> int:
        """Stage book upserts and return the number of new rows."""
        if not books:
            return 0
        with _translate_errors("insert books"):
            with self._connection.cursor() as cursor:
                cursor.executemany(INSERT_BOOK_SQL, [_book_params(book) for book in books])
                return max(cursor.rowcount, 0)

    def insert_links(self, links: Sequence[BookAuthorLink]) -> int:
        """Stage book/author link upserts and return the number of new rows."""
        if not links:
            return 0
        with _translate_errors("insert book authors"):
            with self._connection.cursor() as cursor:
                cursor.executemany(
                    INSERT_BOOK_AUTHOR_SQL,
                    [(link.book_id, link.author_id) for link in links],
                )
                return max(cursor.rowcount, 0)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed statements as one transaction.

        Commits when the block exits normally and rolls back on any exception,
        including ``KeyboardInterrupt``.

        Raises:
            StoreError: If begin, commit, or rollback fails in the driver.
        """
        with _translate_errors("apply transaction"):
            with self._connection.transaction():
                yield


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    """Translate driver errors into StoreError.

    Args:
        action: Short description used in the error message.

    Raises:
        StoreError: Wrapping any ``psycopg.Error``.
    """
    try:
        yield
    except psycopg.Error as error:
        raise StoreError(
            f"Failed to {action}: {error}. "
            "Check the database schema and connection, then re-run the import."
        ) from error


def _book_params(book: BookRecord) -> tuple[object, ...]:
    """Build positional statement parameters for one book."""
    return (
        book.book_id,
        book.title,
        book.rating,
        book.description,
        book.language,
        book.isbn,
        book.book_format,
        book.edition,
        book.pages,
        book.publisher,
        book.publish_date,
        book.first_publish_date,
        book.liked_percent,
        book.price,
    )
