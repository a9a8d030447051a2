"""Bookloader CLI entry points.
This module exposes the feed import command.
It maps argparse commands onto pipeline calls and exit codes.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, replace
from typing import Any, Sequence

from core.config import LoaderConfig, validate_log_level
from core.constants import (
    EXIT_CODE_FAILURE,
    EXIT_CODE_INTERRUPTED,
    EXIT_CODE_SUCCESS,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import BookloaderError, ConfigurationError
from core.logging_config import configure_logging, get_logger
from core.types import ImportOptions
from ingest.pipeline import run_import

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="bookloader",
        description="Import the book catalog CSV feed into PostgreSQL",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=SUPPORTED_LOG_LEVELS,
        help="Override BOOKLOADER_LOG_LEVEL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Bookloader CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.log_level)
    except ConfigurationError as error:
        configure_logging()
        _LOGGER.error("configuration_invalid", error=str(error))
        return EXIT_CODE_FAILURE
    configure_logging(config.log_level)
    if args.command == "import":
        return _run_import_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(log_level: str | None) -> LoaderConfig:
    """Build config with an optional log-level override."""
    config = LoaderConfig.from_env()
    if log_level:
        config = replace(config, log_level=validate_log_level(log_level))
    return config


def _run_import_command(config: LoaderConfig, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code; failures are already reported by the pipeline.
    """
    options = ImportOptions(
        feed_url=args.feed_url,
        batch_size=args.batch_size,
        dry_run=args.dry_run,
    )
    try:
        summary = run_import(options, config)
    except ConfigurationError as error:
        _LOGGER.error("configuration_invalid", error=str(error))
        return EXIT_CODE_FAILURE
    except BookloaderError:
        return EXIT_CODE_FAILURE
    except KeyboardInterrupt:
        return EXIT_CODE_INTERRUPTED
    for key, value in asdict(summary).items():
        print(f"{key}={value}")
    return EXIT_CODE_SUCCESS


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Fetch the feed and load it into the store")
    parser.add_argument("--feed-url", help="Override BOOKLOADER_FEED_URL for this run")
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Override BOOKLOADER_BATCH_SIZE (records per committed chunk)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch, parse, and map the feed without writing to the store",
    )
