"""Runtime configuration model for Bookloader.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Mapping
from urllib.parse import urlparse

from core.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_DB_HOST,
    DEFAULT_DB_PORT,
    DEFAULT_FEED_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_READ_TIMEOUT_SECONDS,
    SUPPORTED_FEED_SCHEMES,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import ConfigurationError


@dataclass(frozen=True)
class StoreSettings:
    """Connection parameters for the destination PostgreSQL store.

    Attributes:
        host: Database server host name.
        port: Database server TCP port.
        database: Database name.
        user: Login role.
        password: Login password, excluded from repr.
    """

    host: str
    port: int
    database: str
    user: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class FetchSettings:
    """HTTP settings for retrieving the feed.

    Attributes:
        connect_timeout_seconds: TCP connect timeout.
        read_timeout_seconds: Socket read timeout between bytes.
        max_redirects: Maximum redirect responses followed before failing.
    """

    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    read_timeout_seconds: float = DEFAULT_READ_TIMEOUT_SECONDS
    max_redirects: int = DEFAULT_MAX_REDIRECTS


@dataclass(frozen=True)
class LoaderConfig:
    """Validated runtime configuration.

    Attributes:
        store: Destination store connection settings.
        fetch: Feed transport settings.
        feed_url: HTTP(S) location of the CSV feed.
        batch_size: Records per atomic write chunk.
        log_level: Minimum structured log level.
    """

    store: StoreSettings
    fetch: FetchSettings
    feed_url: str
    batch_size: int = DEFAULT_BATCH_SIZE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LoaderConfig":
        """Build config from process environment variables.

        Args:
            environ: Optional mapping used instead of ``os.environ``.

        Returns:
            A validated config object.

        Raises:
            ConfigurationError: If a required value is missing or invalid.
        """
        env = os.environ if environ is None else environ
        store = StoreSettings(
            host=_optional_value(env, "POSTGRES_HOST", DEFAULT_DB_HOST),
            port=_parse_port(_optional_value(env, "POSTGRES_PORT", str(DEFAULT_DB_PORT))),
            database=_required_value(env, "POSTGRES_DB"),
            user=_required_value(env, "POSTGRES_USER"),
            password=_required_value(env, "POSTGRES_PASSWORD"),
        )
        fetch = FetchSettings(
            connect_timeout_seconds=_parse_positive_float(
                "BOOKLOADER_CONNECT_TIMEOUT",
                _optional_value(
                    env, "BOOKLOADER_CONNECT_TIMEOUT", str(DEFAULT_CONNECT_TIMEOUT_SECONDS)
                ),
            ),
            read_timeout_seconds=_parse_positive_float(
                "BOOKLOADER_READ_TIMEOUT",
                _optional_value(
                    env, "BOOKLOADER_READ_TIMEOUT", str(DEFAULT_READ_TIMEOUT_SECONDS)
                ),
            ),
            max_redirects=_parse_int(
                "BOOKLOADER_MAX_REDIRECTS",
                _optional_value(env, "BOOKLOADER_MAX_REDIRECTS", str(DEFAULT_MAX_REDIRECTS)),
                minimum=0,
            ),
        )
        return cls(
            store=store,
            fetch=fetch,
            feed_url=validate_feed_url(
                _optional_value(env, "BOOKLOADER_FEED_URL", DEFAULT_FEED_URL)
            ),
            batch_size=validate_batch_size(
                _parse_int(
                    "BOOKLOADER_BATCH_SIZE",
                    _optional_value(env, "BOOKLOADER_BATCH_SIZE", str(DEFAULT_BATCH_SIZE)),
                    minimum=1,
                )
            ),
            log_level=validate_log_level(
                _optional_value(env, "BOOKLOADER_LOG_LEVEL", DEFAULT_LOG_LEVEL)
            ),
        )


def validate_feed_url(raw_value: str) -> str:
    """Validate the feed URL scheme and host.

    Args:
        raw_value: Candidate feed URL.

    Returns:
        The unchanged URL.

    Raises:
        ConfigurationError: If the URL is not an absolute http(s) URL.
    """
    parsed = urlparse(raw_value)
    if parsed.scheme not in SUPPORTED_FEED_SCHEMES or not parsed.netloc:
        raise ConfigurationError(
            f"Invalid BOOKLOADER_FEED_URL value: expected an http(s) URL, got '{raw_value}'. "
            "Set BOOKLOADER_FEED_URL to the CSV feed location."
        )
    return raw_value


def validate_batch_size(value: int) -> int:
    """Validate a chunk size supplied by env or CLI."""
    if value < 1:
        raise ConfigurationError(
            f"Invalid BOOKLOADER_BATCH_SIZE value: expected a positive integer, got {value}. "
            "Set BOOKLOADER_BATCH_SIZE to 1 or more."
        )
    return value


def validate_log_level(raw_value: str) -> str:
    """Normalize and validate a log level name."""
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid BOOKLOADER_LOG_LEVEL value: expected one of "
            f"{', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'."
        )
    return level


def _required_value(env: Mapping[str, str], key: str) -> str:
    """Read a required variable, failing fast when absent or blank.

    Args:
        env: Environment mapping.
        key: Variable name.

    Returns:
        Non-blank variable value.

    Raises:
        ConfigurationError: If the variable is missing or blank.
    """
    value = env.get(key)
    if value is None or not value.strip():
        raise ConfigurationError(
            f"Missing required environment variable: {key}. "
            f"Export {key} before running the import."
        )
    return value


def _optional_value(env: Mapping[str, str], key: str, default: str) -> str:
    """Read an overridable variable; set-but-blank values are rejected."""
    value = env.get(key)
    if value is None:
        return default
    if not value.strip():
        raise ConfigurationError(
            f"Environment variable {key} is set but blank. "
            f"Unset {key} to use the default or give it a value."
        )
    return value.strip()


def _parse_port(raw_value: str) -> int:
    port = _parse_int("POSTGRES_PORT", raw_value, minimum=1)
    if port > 65535:
        raise ConfigurationError(
            f"Invalid POSTGRES_PORT value: expected 1-65535, got {port}."
        )
    return port


def _parse_int(key: str, raw_value: str, minimum: int) -> int:
    """Parse an integer environment value with a lower bound.

    Args:
        key: Variable name for error messages.
        raw_value: Raw string from environment.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer.

    Raises:
        ConfigurationError: If value is not an integer or is below minimum.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise ConfigurationError(
            f"Invalid {key} value: expected integer, got '{raw_value}'. "
            f"Set {key} to a numeric value."
        ) from error
    if value < minimum:
        raise ConfigurationError(
            f"Invalid {key} value: expected at least {minimum}, got {value}."
        )
    return value


def _parse_positive_float(key: str, raw_value: str) -> float:
    try:
        value = float(raw_value)
    except ValueError as error:
        raise ConfigurationError(
            f"Invalid {key} value: expected a number of seconds, got '{raw_value}'."
        ) from error
    if value <= 0:
        raise ConfigurationError(
            f"Invalid {key} value: expected a positive number of seconds, got {value}."
        )
    return value
