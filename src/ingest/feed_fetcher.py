"""Remote feed retrieval.

This module opens the CSV feed over HTTP(S) with connect and read
timeouts, following redirects through an explicit bounded loop.
"""

from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Any, BinaryIO, Iterator
from urllib.parse import urljoin

import requests
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from core.config import FetchSettings
from core.constants import FEED_READ_CHUNK_BYTES
from core.errors import FetchError, TooManyRedirectsError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@contextmanager
def open_feed(
    url: str,
    settings: FetchSettings,
    session: requests.Session | None = None,
) -> Iterator[BinaryIO]:
    """Open the feed body as a readable byte stream.

    Args:
        url: Initial feed URL.
        settings: Timeout and redirect settings.
        session: Optional HTTP session; a private one is created when omitted.

    Yields:
        Buffered binary stream over the response body.

    Raises:
        TooManyRedirectsError: If more than ``max_redirects`` redirects occur.
        FetchError: For non-2xx terminal responses or transport failures.
    """
    owned_session = session is None
    http_session = requests.Session() if owned_session else session
    try:
        response = _request_following_redirects(http_session, url, settings)
        try:
            response.raw.decode_content = True
            yield io.BufferedReader(_FeedBodyReader(response.raw), FEED_READ_CHUNK_BYTES)
        finally:
            response.close()
    finally:
        if owned_session:
            http_session.close()


def _request_following_redirects(
    session: requests.Session,
    url: str,
    settings: FetchSettings,
) -> Any:
    """Issue GET requests until a non-redirect response arrives.

    Args:
        session: HTTP session.
        url: Initial URL.
        settings: Timeout and redirect settings.

    Returns:
        Streaming 2xx response.

    Raises:
        TooManyRedirectsError: If the redirect bound is exceeded.
        FetchError: For non-2xx terminal responses or transport failures.
    """
    current_url = url
    for redirect_count in range(settings.max_redirects + 1):
        response = _send(session, current_url, settings)
        location = response.headers.get("Location")
        if 300 <= response.status_code < 400 and location:
            response.close()
            next_url = urljoin(current_url, location)
            _LOGGER.debug(
                "feed_redirect",
                status_code=response.status_code,
                from_url=current_url,
                to_url=next_url,
                redirect_count=redirect_count + 1,
            )
            current_url = next_url
            continue
        if not 200 <= response.status_code < 300:
            status_code = response.status_code
            response.close()
            raise FetchError(
                f"Failed to fetch feed at {current_url}: HTTP {status_code}. "
                "Check that BOOKLOADER_FEED_URL is reachable."
            )
        _LOGGER.info("feed_opened", url=current_url, status_code=response.status_code)
        return response
    raise TooManyRedirectsError(
        f"Failed to fetch feed at {url}: more than {settings.max_redirects} redirects. "
        "Point BOOKLOADER_FEED_URL at the final feed location."
    )


def _send(session: requests.Session, url: str, settings: FetchSettings) -> Any:
    try:
        return session.get(
            url,
            stream=True,
            allow_redirects=False,
            timeout=(settings.connect_timeout_seconds, settings.read_timeout_seconds),
        )
    except requests.RequestException as error:
        raise FetchError(
            f"Failed to fetch feed at {url}: {error}. Check network access and retry."
        ) from error


class _FeedBodyReader(io.RawIOBase):
    """Raw stream adapter that reports mid-body transport errors as FetchError."""

    def __init__(self, body: Any) -> None:
        self._body = body

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        try:
            data = self._body.read(len(buffer))
        except (Urllib3HTTPError, requests.RequestException, OSError) as error:
            raise FetchError(
                f"Failed while reading feed body: {error}. Check network access and retry."
            ) from error
        if not data:
            return 0
        size = len(data)
        buffer[:size] = data
        return size
