"""Destination store connections.

This module opens a scoped PostgreSQL connection from validated settings
and guarantees it is closed on every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import psycopg

from core.config import StoreSettings
from core.constants import DEFAULT_DB_CONNECT_TIMEOUT_SECONDS
from core.errors import StoreError
from core.logging_config import get_logger
from store.catalog_store import PostgresCatalogStore

_LOGGER = get_logger(__name__)


def connect(settings: StoreSettings) -> psycopg.Connection[Any]:
    """Open an autocommit connection to the destination store.

    Args:
        settings: Store connection settings.

    Returns:
        Open psycopg connection.

    Raises:
        StoreError: If the server cannot be reached or rejects the login.
    """
    try:
        connection = psycopg.connect(
            host=settings.host,
            port=settings.port,
            dbname=settings.database,
            user=settings.user,
            password=settings.password,
            connect_timeout=DEFAULT_DB_CONNECT_TIMEOUT_SECONDS,
            autocommit=True,
        )
    except psycopg.Error as error:
        raise StoreError(
            f"Failed to connect to database {settings.database} at "
            f"{settings.host}:{settings.port}: {error}. "
            "Check POSTGRES_* settings and that the server is running."
        ) from error
    _LOGGER.info(
        "store_connected",
        host=settings.host,
        port=settings.port,
        database=settings.database,
        user=settings.user,
    )
    return connection


@contextmanager
def open_catalog_store(settings: StoreSettings) -> Iterator[PostgresCatalogStore]:
    """Yield a catalog store bound to a fresh connection.

    Args:
        settings: Store connection settings.

    Yields:
        Catalog store; its connection is closed when the block exits.
    """
    connection = connect(settings)
    try:
        yield PostgresCatalogStore(connection)
    finally:
        connection.close()
