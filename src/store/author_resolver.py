"""Run-scoped author identifier resolution.

This module maps author names to store identifiers through a
read-through in-memory cache, so each distinct name costs at most
one insert attempt regardless of how many books reference it.
"""

from __future__ import annotations

from core.errors import StoreError
from core.logging_config import get_logger
from core.types import AuthorEntry
from store.catalog_store import CatalogStore

_LOGGER = get_logger(__name__)


class AuthorResolver:
    """Read-through author cache for one import run."""

    def __init__(self, store: CatalogStore) -> None:
        self._store = store
        self._cache: dict[str, int] = {}
        self.insert_attempts = 0
        self.authors_inserted = 0

    @property
    def authors_resolved(self) -> int:
        """Number of distinct names resolved so far."""
        return len(self._cache)

    def entries(self) -> list[AuthorEntry]:
        """Return resolved authors in first-seen order."""
        return [
            AuthorEntry(name=name, author_id=author_id)
            for name, author_id in self._cache.items()
        ]

    def resolve(self, name: str | None, book_id: int | None = None) -> int | None:
        """Resolve an author name to its identifier.

        Args:
            name: Raw author name from the feed.
            book_id: Referencing book, used only for the blank-name warning.

        Returns:
            Author identifier, or None when the name is blank.

        Raises:
            StoreError: If the store fails or the identifier cannot be read back.
        """
        author_name = (name or "").strip()
        if not author_name:
            _LOGGER.warning("author_name_blank", book_id=book_id)
            return None
        cached_id = self._cache.get(author_name)
        if cached_id is not None:
            return cached_id
        author_id = self._store.find_author_id(author_name)
        if author_id is None:
            author_id = self._insert_and_read(author_name)
        self._cache[author_name] = author_id
        return author_id

    def _insert_and_read(self, author_name: str) -> int:
        """Insert a new author, tolerating a concurrent insert, then read its id."""
        self.insert_attempts += 1
        if self._store.insert_author(author_name):
            self.authors_inserted += 1
        author_id = self._store.find_author_id(author_name)
        if author_id is None:
            raise StoreError(
                f"Failed to resolve author '{author_name}': no identifier after insert. "
                "Check the authors table unique constraint on name."
            )
        _LOGGER.debug("author_resolved", name=author_name, author_id=author_id)
        return author_id
