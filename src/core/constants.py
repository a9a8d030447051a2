"""Core constants used across Bookloader modules.

This module centralizes feed, store, and runtime defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_FEED_URL = (
    "https://gist.github.com/hhimanshu/d55d17b51e0a46a37b739d0f3d3e3c74/raw/"
    "5b9027cf7b1641546c1948caffeaa44129b7db63/books.csv"
)
DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_PORT = 5432
DEFAULT_DB_CONNECT_TIMEOUT_SECONDS = 10
DEFAULT_BATCH_SIZE = 1000
DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0
DEFAULT_READ_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_LOG_LEVEL = "INFO"
FEED_ENCODING = "utf-8-sig"
FEED_READ_CHUNK_BYTES = 64 * 1024
FEED_MAX_FIELD_CHARS = 16 * 1024 * 1024
SUPPORTED_FEED_SCHEMES = ("http", "https")
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

COLUMN_BOOK_ID = "bookId"
COLUMN_TITLE = "title"
COLUMN_AUTHOR = "author"
COLUMN_RATING = "rating"
COLUMN_DESCRIPTION = "description"
COLUMN_LANGUAGE = "language"
COLUMN_ISBN = "isbn"
COLUMN_BOOK_FORMAT = "bookFormat"
COLUMN_EDITION = "edition"
COLUMN_PAGES = "pages"
COLUMN_PUBLISHER = "publisher"
COLUMN_PUBLISH_DATE = "publishDate"
COLUMN_FIRST_PUBLISH_DATE = "firstPublishDate"
COLUMN_LIKED_PERCENT = "likedPercent"
COLUMN_PRICE = "price"
REQUIRED_FEED_COLUMNS = (
    COLUMN_BOOK_ID,
    COLUMN_TITLE,
    COLUMN_AUTHOR,
    COLUMN_RATING,
    COLUMN_DESCRIPTION,
    COLUMN_LANGUAGE,
    COLUMN_ISBN,
    COLUMN_BOOK_FORMAT,
    COLUMN_EDITION,
    COLUMN_PAGES,
    COLUMN_PUBLISHER,
    COLUMN_PUBLISH_DATE,
    COLUMN_FIRST_PUBLISH_DATE,
    COLUMN_LIKED_PERCENT,
    COLUMN_PRICE,
)

# %y maps two-digit years onto 1969-2068; four-digit years are read as written.
FEED_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%y", "%m/%d/%Y")

POSTGRES_INTEGER_MIN = -(2**31)
POSTGRES_INTEGER_MAX = 2**31 - 1
POSTGRES_BIGINT_MIN = -(2**63)
POSTGRES_BIGINT_MAX = 2**63 - 1
# (precision, scale) of the NUMERIC columns in db/schema.sql.
RATING_NUMERIC = (4, 2)
LIKED_PERCENT_NUMERIC = (5, 2)
PRICE_NUMERIC = (10, 2)

PHASE_IDLE = "idle"
PHASE_FETCHING = "fetching"
PHASE_PARSING = "parsing"
PHASE_MAPPING_HEADER = "mapping_header"
PHASE_RESOLVING_AUTHORS = "resolving_authors"
PHASE_WRITING_BOOKS = "writing_books"
PHASE_DONE = "done"
PHASE_FAILED = "failed"
IMPORT_PHASE_ORDER = (
    PHASE_IDLE,
    PHASE_FETCHING,
    PHASE_PARSING,
    PHASE_MAPPING_HEADER,
    PHASE_RESOLVING_AUTHORS,
    PHASE_WRITING_BOOKS,
    PHASE_DONE,
)

EXIT_CODE_SUCCESS = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_INTERRUPTED = 130
