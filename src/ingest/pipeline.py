"""Import orchestration for the book catalog feed.

This module sequences fetch, parse, header mapping, author resolution,
and chunked writes, and reports one consolidated outcome per run.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import replace
from typing import Callable

import requests

from core.config import LoaderConfig, StoreSettings, validate_batch_size, validate_feed_url
from core.constants import (
    PHASE_DONE,
    PHASE_FETCHING,
    PHASE_MAPPING_HEADER,
    PHASE_PARSING,
    PHASE_RESOLVING_AUTHORS,
    PHASE_WRITING_BOOKS,
)
from core.errors import BookloaderError
from core.logging_config import get_logger
from core.types import BookRecord, ImportOptions, IngestSummary, MappedRow, RawRecord
from ingest.feed_fetcher import open_feed
from ingest.feed_parser import parse_feed
from ingest.progress import IngestProgressTracker
from ingest.run_state import ImportRunState
from store.author_resolver import AuthorResolver
from store.batch_writer import BatchWriter
from store.catalog_store import CatalogStore
from store.connection import open_catalog_store
from transforms.book_mapping import HeaderIndex, map_row

_LOGGER = get_logger(__name__)

StoreFactory = Callable[[StoreSettings], AbstractContextManager[CatalogStore]]


class ImportPipelineRunner:
    """Stateful runner for one feed import."""

    def __init__(
        self,
        options: ImportOptions,
        config: LoaderConfig,
        session: requests.Session | None = None,
        store_factory: StoreFactory = open_catalog_store,
    ) -> None:
        self._options = options
        self._config = _apply_overrides(config, options)
        self._session = session
        self._store_factory = store_factory
        self._state = ImportRunState()
        self._progress = IngestProgressTracker(
            feed_url=self._config.feed_url,
            batch_size=self._config.batch_size,
        )
        self._resolver: AuthorResolver | None = None
        self._writer: BatchWriter | None = None

    @property
    def phase(self) -> str:
        """Current phase of the run."""
        return self._state.phase

    def run(self) -> IngestSummary:
        """Execute the import and return its summary.

        Raises:
            BookloaderError: Any fatal failure, after the failure report is logged.
        """
        _LOGGER.info(
            "import_started",
            feed_url=self._config.feed_url,
            batch_size=self._config.batch_size,
            dry_run=self._options.dry_run,
        )
        try:
            summary = self._run_phases()
        except (BookloaderError, KeyboardInterrupt) as error:
            self._report_failure(error)
            raise
        _log_import_completion(summary)
        return summary

    def _run_phases(self) -> IngestSummary:
        records = self._read_feed()
        if records is None:
            _LOGGER.warning("feed_empty", feed_url=self._config.feed_url)
            self._state.advance(PHASE_DONE)
            return self._build_summary()
        header, data_records = records
        mapped_rows = self._map_rows(header, data_records)
        if self._options.dry_run:
            self._state.advance(PHASE_DONE)
            return self._build_summary()
        with self._store_factory(self._config.store) as store:
            resolved_pairs = self._resolve_authors(store, mapped_rows)
            self._write_books(store, resolved_pairs)
        self._state.advance(PHASE_DONE)
        return self._build_summary()

    def _read_feed(self) -> tuple[RawRecord, list[RawRecord]] | None:
        """Fetch and fully parse the feed; the stream is closed before returning."""
        self._state.advance(PHASE_FETCHING)
        with open_feed(self._config.feed_url, self._config.fetch, self._session) as stream:
            self._state.advance(PHASE_PARSING)
            raw_records = parse_feed(stream)
            header = next(raw_records, None)
            if header is None:
                return None
            data_records: list[RawRecord] = []
            for record in raw_records:
                data_records.append(record)
                self._state.records_read += 1
        _LOGGER.info("feed_parsed", records_read=self._state.records_read)
        return header, data_records

    def _map_rows(self, header: RawRecord, data_records: list[RawRecord]) -> list[MappedRow]:
        self._state.advance(PHASE_MAPPING_HEADER)
        header_index = HeaderIndex.from_header(header)
        return [map_row(header_index, record) for record in data_records]

    def _resolve_authors(
        self,
        store: CatalogStore,
        mapped_rows: list[MappedRow],
    ) -> list[tuple[BookRecord, int | None]]:
        """Resolve every author before any book chunk is written."""
        self._state.advance(PHASE_RESOLVING_AUTHORS)
        self._resolver = AuthorResolver(store)
        resolved_pairs = [
            (row.book, self._resolver.resolve(row.author_name, book_id=row.book.book_id))
            for row in mapped_rows
        ]
        _LOGGER.info(
            "authors_resolved",
            authors_resolved=self._resolver.authors_resolved,
            authors_inserted=self._resolver.authors_inserted,
            insert_attempts=self._resolver.insert_attempts,
        )
        _LOGGER.debug(
            "author_cache_ready",
            authors={entry.name: entry.author_id for entry in self._resolver.entries()},
        )
        return resolved_pairs

    def _write_books(
        self,
        store: CatalogStore,
        resolved_pairs: list[tuple[BookRecord, int | None]],
    ) -> None:
        self._state.advance(PHASE_WRITING_BOOKS)
        self._writer = BatchWriter(store, self._config.batch_size, self._progress)
        self._progress.log_writing_started(len(resolved_pairs))
        try:
            self._writer.write(resolved_pairs)
        finally:
            self._state.records_committed = self._writer.result.records_committed

    def _build_summary(self) -> IngestSummary:
        write_result = self._writer.result if self._writer else None
        resolver = self._resolver
        return IngestSummary(
            records_read=self._state.records_read,
            records_committed=self._state.records_committed,
            books_inserted=write_result.books_inserted if write_result else 0,
            links_inserted=write_result.links_inserted if write_result else 0,
            links_skipped=write_result.links_skipped if write_result else 0,
            authors_resolved=resolver.authors_resolved if resolver else 0,
            authors_inserted=resolver.authors_inserted if resolver else 0,
            chunks_committed=write_result.chunks_committed if write_result else 0,
            elapsed_seconds=round(self._progress.elapsed_seconds(), 3),
            phase=self._state.phase,
            dry_run=self._options.dry_run,
        )

    def _report_failure(self, error: BaseException) -> None:
        """Log the single consolidated failure event for this run."""
        failed_phase = self._state.fail()
        _LOGGER.error(
            "import_failed",
            phase=failed_phase,
            error_type=type(error).__name__,
            error=str(error) or type(error).__name__,
            feed_url=self._config.feed_url,
            records_read=self._state.records_read,
            records_committed=self._state.records_committed,
            elapsed_seconds=round(self._progress.elapsed_seconds(), 3),
        )


def run_import(
    options: ImportOptions,
    config: LoaderConfig,
    session: requests.Session | None = None,
    store_factory: StoreFactory = open_catalog_store,
) -> IngestSummary:
    """Run the feed import pipeline.

    Args:
        options: Import request options.
        config: Runtime configuration.
        session: Optional HTTP session for the feed request.
        store_factory: Context manager factory yielding a catalog store.

    Returns:
        Summary of the completed run.

    Raises:
        FetchError: If the feed cannot be retrieved.
        MalformedCsvError: If the feed cannot be parsed.
        MissingColumnError: If the header lacks a required column.
        StoreError: If a store operation fails; the failing chunk is rolled back.
    """
    runner = ImportPipelineRunner(options, config, session, store_factory)
    return runner.run()


def _apply_overrides(config: LoaderConfig, options: ImportOptions) -> LoaderConfig:
    """Apply per-run option overrides on top of environment config."""
    if options.feed_url:
        config = replace(config, feed_url=validate_feed_url(options.feed_url))
    if options.batch_size is not None:
        config = replace(config, batch_size=validate_batch_size(options.batch_size))
    return config


def _log_import_completion(summary: IngestSummary) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "import_completed",
        records_read=summary.records_read,
        records_committed=summary.records_committed,
        books_inserted=summary.books_inserted,
        links_inserted=summary.links_inserted,
        links_skipped=summary.links_skipped,
        authors_resolved=summary.authors_resolved,
        authors_inserted=summary.authors_inserted,
        chunks_committed=summary.chunks_committed,
        elapsed_seconds=summary.elapsed_seconds,
        dry_run=summary.dry_run,
    )
