"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import LoaderConfig
from core.constants import DEFAULT_BATCH_SIZE, DEFAULT_FEED_URL
from core.errors import ConfigurationError
from tests.fakes import TEST_ENVIRONMENT, build_test_config


def test_from_env_applies_defaults() -> None:
    """Optional keys should fall back to their defaults."""
    config = build_test_config()

    assert (config.store.host, config.store.port, config.feed_url, config.batch_size) == (
        "localhost",
        5432,
        DEFAULT_FEED_URL,
        DEFAULT_BATCH_SIZE,
    )


def test_from_env_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should read os.environ when no mapping is given."""
    for key, value in TEST_ENVIRONMENT.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("POSTGRES_HOST", "db.internal")

    config = LoaderConfig.from_env()

    assert config.store.host == "db.internal" and os.getenv("POSTGRES_DB") == "books"


@pytest.mark.parametrize("missing_key", ["POSTGRES_DB", "POSTGRES_USER", "POSTGRES_PASSWORD"])
def test_from_env_requires_credentials(missing_key: str) -> None:
    """Each credential key should be required."""
    environ = {key: value for key, value in TEST_ENVIRONMENT.items() if key != missing_key}

    with pytest.raises(ConfigurationError, match=missing_key):
        LoaderConfig.from_env(environ)


def test_from_env_rejects_blank_optional_value() -> None:
    """A set-but-blank key should fail rather than silently default."""
    with pytest.raises(ConfigurationError, match="POSTGRES_HOST"):
        build_test_config(POSTGRES_HOST="  ")


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("POSTGRES_PORT", "not-a-port"),
        ("POSTGRES_PORT", "70000"),
        ("BOOKLOADER_BATCH_SIZE", "0"),
        ("BOOKLOADER_READ_TIMEOUT", "-1"),
        ("BOOKLOADER_MAX_REDIRECTS", "-2"),
        ("BOOKLOADER_FEED_URL", "ftp://feeds.example.test/books.csv"),
        ("BOOKLOADER_LOG_LEVEL", "LOUD"),
    ],
)
def test_from_env_rejects_invalid_values(key: str, value: str) -> None:
    """Malformed values should raise ConfigurationError naming the key."""
    with pytest.raises(ConfigurationError, match=key):
        build_test_config(**{key: value})


def test_from_env_parses_overrides() -> None:
    """Numeric overrides should be parsed into typed fields."""
    config = build_test_config(
        POSTGRES_PORT="6543",
        BOOKLOADER_BATCH_SIZE="250",
        BOOKLOADER_CONNECT_TIMEOUT="2.5",
        BOOKLOADER_LOG_LEVEL="debug",
    )

    assert (
        config.store.port,
        config.batch_size,
        config.fetch.connect_timeout_seconds,
        config.log_level,
    ) == (6543, 250, 2.5, "DEBUG")


def test_store_settings_repr_hides_password() -> None:
    """The password should never appear in repr output."""
    config = build_test_config()

    assert "secret" not in repr(config)
