"""Bookloader exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline phase raises a specific error type for debuggability.
"""

from __future__ import annotations


class BookloaderError(Exception):
    """Base exception for all Bookloader failures."""


class ConfigurationError(BookloaderError):
    """Raised for missing or invalid runtime configuration."""


class FetchError(BookloaderError):
    """Raised for network and transport failures while fetching the feed."""


class TooManyRedirectsError(FetchError):
    """Raised when the feed redirect chain exceeds the configured bound."""


class MalformedCsvError(BookloaderError):
    """Raised when the feed cannot be parsed as quoted CSV."""


class MissingColumnError(BookloaderError):
    """Raised when the feed header lacks a required column."""

    def __init__(self, missing_columns: tuple[str, ...]) -> None:
        self.missing_columns = missing_columns
        super().__init__(
            "Feed header is missing required columns: "
            f"{', '.join(missing_columns)}. "
            "Check that the feed URL points at the book catalog export."
        )


class StoreError(BookloaderError):
    """Raised for destination store connection and write failures."""


class RunStateError(BookloaderError):
    """Raised for illegal import phase transitions."""
