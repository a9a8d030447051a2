"""Chunked transactional book writes.

This module groups resolved book rows into fixed-size chunks and
applies each chunk as one transaction. A failed chunk is rolled back
in full while previously committed chunks remain intact.
"""

from __future__ import annotations

from dataclasses import replace
from itertools import islice
from typing import Iterable, Iterator

from core.errors import StoreError
from core.logging_config import get_logger
from core.types import BookAuthorLink, BookRecord, IngestionChunk, WriteResult
from ingest.progress import IngestProgressTracker
from store.catalog_store import CatalogStore

_LOGGER = get_logger(__name__)


class BatchWriter:
    """Apply resolved books and links to the store chunk by chunk."""

    def __init__(
        self,
        store: CatalogStore,
        batch_size: int,
        progress: IngestProgressTracker | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._store = store
        self._batch_size = batch_size
        self._progress = progress
        self.result = WriteResult()

    def write(self, pairs: Iterable[tuple[BookRecord, int | None]]) -> WriteResult:
        """Write ``(book, author_id)`` pairs in atomic chunks.

        Args:
            pairs: Ordered books with their resolved author id, None when blank.

        Returns:
            Counters for all committed chunks.

        Raises:
            StoreError: If a chunk fails; that chunk is rolled back.
        """
        for chunk in build_chunks(pairs, self._batch_size):
            self._apply_chunk(chunk)
        return self.result

    def _apply_chunk(self, chunk: IngestionChunk) -> None:
        try:
            with self._store.transaction():
                books_inserted = self._store.insert_books(chunk.books)
                links_inserted = self._store.insert_links(chunk.links)
        except StoreError:
            _LOGGER.error(
                "chunk_rolled_back",
                chunk=chunk.index,
                chunk_records=len(chunk.books),
                records_committed=self.result.records_committed,
            )
            raise
        self.result = replace(
            self.result,
            records_committed=self.result.records_committed + len(chunk.books),
            books_inserted=self.result.books_inserted + books_inserted,
            links_inserted=self.result.links_inserted + links_inserted,
            links_skipped=self.result.links_skipped + len(chunk.books) - len(chunk.links),
            chunks_committed=self.result.chunks_committed + 1,
        )
        if self._progress is not None:
            self._progress.log_chunk_committed(
                chunk_index=chunk.index,
                chunk_records=len(chunk.books),
                records_committed=self.result.records_committed,
            )


def build_chunks(
    pairs: Iterable[tuple[BookRecord, int | None]],
    batch_size: int,
) -> Iterator[IngestionChunk]:
    """Group resolved pairs into ordered chunks of at most ``batch_size`` books.

    Books whose author id is None are kept; they simply contribute no link.
    """
    iterator = iter(pairs)
    chunk_index = 0
    while True:
        batch = list(islice(iterator, batch_size))
        if not batch:
            return
        chunk_index += 1
        yield IngestionChunk(
            index=chunk_index,
            books=tuple(book for book, _ in batch),
            links=tuple(
                BookAuthorLink(book_id=book.book_id, author_id=author_id)
                for book, author_id in batch
                if author_id is not None
            ),
        )
