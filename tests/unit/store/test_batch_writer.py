"""Unit tests for chunked transactional writes."""

from __future__ import annotations

from decimal import Decimal

import pytest

from core.errors import StoreError
from core.types import BookRecord
from store.batch_writer import BatchWriter, build_chunks
from tests.fakes import InMemoryCatalogStore


def _book(book_id: int) -> BookRecord:
    return BookRecord(
        book_id=book_id,
        title=f"Book {book_id}",
        rating=Decimal("4.0"),
        description="",
        language="English",
        isbn="",
        book_format="",
        edition="",
        pages=100,
        publisher="",
        publish_date=None,
        first_publish_date=None,
        liked_percent=Decimal(0),
        price=Decimal(0),
    )


def _store_with_author() -> InMemoryCatalogStore:
    store = InMemoryCatalogStore()
    store.insert_author("Smith")
    return store


def test_build_chunks_groups_by_batch_size() -> None:
    """Pairs should be grouped into ordered chunks of the batch size."""
    pairs = [(_book(book_id), 1) for book_id in range(1, 6)]

    chunks = list(build_chunks(pairs, 2))

    assert [len(chunk.books) for chunk in chunks] == [2, 2, 1] and chunks[-1].index == 3


def test_build_chunks_omits_links_for_blank_authors() -> None:
    """Books without an author id should be kept without a link."""
    pairs = [(_book(1), 1), (_book(2), None)]

    chunk = next(build_chunks(pairs, 10))

    assert len(chunk.books) == 2 and [link.book_id for link in chunk.links] == [1]


def test_write_commits_each_chunk() -> None:
    """Every chunk should be committed in its own transaction."""
    store = _store_with_author()
    writer = BatchWriter(store, batch_size=2)

    result = writer.write([(_book(book_id), 1) for book_id in range(1, 6)])

    assert (store.commits, result.records_committed, result.links_inserted) == (3, 5, 5)


def test_write_rolls_back_failed_chunk_only() -> None:
    """A mid-chunk failure should hide that chunk and keep earlier chunks."""
    store = _store_with_author()
    store.fail_on_book_id = 4
    writer = BatchWriter(store, batch_size=2)

    with pytest.raises(StoreError):
        writer.write([(_book(book_id), 1) for book_id in range(1, 6)])

    assert sorted(store.books) == [1, 2] and sorted(store.links) == [(1, 1), (2, 1)] and (
        store.rollbacks == 1 and writer.result.records_committed == 2
    )


def test_write_is_idempotent_on_rerun() -> None:
    """Re-writing the same records should insert nothing new."""
    store = _store_with_author()
    pairs = [(_book(book_id), 1) for book_id in range(1, 4)]
    BatchWriter(store, batch_size=2).write(pairs)

    second = BatchWriter(store, batch_size=2).write(pairs)

    assert (second.books_inserted, second.links_inserted, second.records_committed) == (0, 0, 3)


def test_write_reports_progress_per_chunk() -> None:
    """The progress tracker should see each committed chunk."""

    class _FakeProgress:
        def __init__(self) -> None:
            self.committed: list[int] = []

        def log_chunk_committed(self, chunk_index, chunk_records, records_committed) -> None:
            self.committed.append(records_committed)

    progress = _FakeProgress()
    writer = BatchWriter(_store_with_author(), batch_size=2, progress=progress)

    writer.write([(_book(book_id), 1) for book_id in range(1, 6)])

    assert progress.committed == [2, 4, 5]


def test_batch_writer_rejects_non_positive_batch_size() -> None:
    """A zero batch size cannot form chunks."""
    with pytest.raises(ValueError):
        BatchWriter(InMemoryCatalogStore(), batch_size=0)
