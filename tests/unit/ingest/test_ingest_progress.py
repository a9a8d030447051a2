"""Unit tests for import progress reporting helpers."""

from __future__ import annotations

from ingest.progress import IngestProgressTracker


class _FakeLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, object]]] = []

    def info(self, event: str, **fields: object) -> None:
        self.events.append((event, fields))


def test_progress_tracker_logs_chunk_totals(monkeypatch) -> None:
    """Chunk events should carry the running committed count and progress."""
    fake_logger = _FakeLogger()
    monkeypatch.setattr("ingest.progress._LOGGER", fake_logger)
    tracker = IngestProgressTracker(feed_url="https://example.test/books.csv", batch_size=2)

    tracker.log_writing_started(3)
    tracker.log_chunk_committed(chunk_index=1, chunk_records=2, records_committed=2)
    tracker.log_chunk_committed(chunk_index=2, chunk_records=1, records_committed=3)

    started_fields = fake_logger.events[0][1]
    last_fields = fake_logger.events[-1][1]
    assert started_fields["total_chunks"] == 2 and (
        last_fields["records_committed"],
        last_fields["progress"],
    ) == (3, 1.0)


def test_progress_tracker_handles_empty_runs(monkeypatch) -> None:
    """Zero-record runs should report zero chunks without dividing by zero."""
    fake_logger = _FakeLogger()
    monkeypatch.setattr("ingest.progress._LOGGER", fake_logger)
    tracker = IngestProgressTracker(feed_url="https://example.test/books.csv", batch_size=1000)

    tracker.log_writing_started(0)

    assert fake_logger.events == [
        (
            "writing_started",
            {
                "feed_url": "https://example.test/books.csv",
                "batch_size": 1000,
                "total_records": 0,
                "total_chunks": 0,
            },
        )
    ]
