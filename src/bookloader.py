"""Public SDK surface for Bookloader.

This module provides a stable import path for programmatic imports.
It re-exports the pipeline entry point and typed option models.
"""

from __future__ import annotations

from core.config import FetchSettings, LoaderConfig, StoreSettings
from core.errors import (
    BookloaderError,
    ConfigurationError,
    FetchError,
    MalformedCsvError,
    MissingColumnError,
    StoreError,
    TooManyRedirectsError,
)
from core.types import BookRecord, ImportOptions, IngestSummary
from ingest.pipeline import ImportPipelineRunner, run_import

__all__ = [
    "BookRecord",
    "BookloaderError",
    "ConfigurationError",
    "FetchError",
    "FetchSettings",
    "ImportOptions",
    "ImportPipelineRunner",
    "IngestSummary",
    "LoaderConfig",
    "MalformedCsvError",
    "MissingColumnError",
    "StoreError",
    "StoreSettings",
    "TooManyRedirectsError",
    "run_import",
]
