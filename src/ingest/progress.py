"""Structured import progress reporting.

This module emits progress events for long-running imports,
including per-chunk commit updates and throughput estimates.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass
class IngestProgressTracker:
    """Track and emit import progress events across chunks."""

    feed_url: str
    batch_size: int
    total_records: int = 0
    run_started_at: float = field(default_factory=time.monotonic)

    def log_writing_started(self, total_records: int) -> None:
        """Log one event when the chunk loop starts."""
        self.total_records = total_records
        _LOGGER.info(
            "writing_started",
            feed_url=self.feed_url,
            batch_size=self.batch_size,
            total_records=total_records,
            total_chunks=_chunk_count(total_records, self.batch_size),
        )

    def log_chunk_committed(
        self,
        chunk_index: int,
        chunk_records: int,
        records_committed: int,
    ) -> None:
        """Log a committed chunk with running totals and rate."""
        elapsed_seconds = self.elapsed_seconds()
        _LOGGER.info(
            "chunk_committed",
            chunk=chunk_index,
            chunk_records=chunk_records,
            records_committed=records_committed,
            total_records=self.total_records,
            progress=round(_progress_fraction(records_committed, self.total_records), 3),
            elapsed_seconds=round(elapsed_seconds, 3),
            records_per_second=round(_rate(records_committed, elapsed_seconds), 1),
        )

    def elapsed_seconds(self) -> float:
        """Seconds since the tracker was created."""
        return max(0.0, time.monotonic() - self.run_started_at)


def _chunk_count(total_records: int, batch_size: int) -> int:
    if total_records <= 0 or batch_size <= 0:
        return 0
    return -(-total_records // batch_size)


def _progress_fraction(done: int, total: int) -> float:
    """Compute bounded progress fraction."""
    if total <= 0:
        return 0.0
    return min(1.0, max(0.0, done / total))


def _rate(count: int, elapsed_seconds: float) -> float:
    if elapsed_seconds <= 0:
        return 0.0
    return count / elapsed_seconds
