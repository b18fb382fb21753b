# gamesincommon/services/rate_limited_fetcher.py

"""Detail payload fetching with retry on throttling.

The store endpoint answers HTTP 429 when it is called too often. A
throttled request is never reported as a failure: the fetcher waits a
fixed interval and tries again, as often as needed, until it gets the
payload or the run is cancelled. Any other error fails the call at once.
"""

from __future__ import annotations

import logging
import threading

import requests

from gamesincommon.core.errors import DetailFetchError, OperationCancelled
from gamesincommon.core.game import Game
from gamesincommon.integrations.catalog_client import CatalogClient

logger = logging.getLogger("gamesincommon.rate_limited_fetcher")

__all__ = ["DEFAULT_BACKOFF_SECONDS", "RateLimitedFetcher", "is_throttled"]

DEFAULT_BACKOFF_SECONDS = 60.0
_CHUNK_SIZE = 8192
_THROTTLE_STATUS = 429
_THROTTLE_MARKER = "HTTP/1.1 429"


def is_throttled(response: requests.Response) -> bool:
    """Checks a response for the rate-limit signal.

    Args:
        response: Response from the detail endpoint.

    Returns:
        True for status 429, or when a header value carries the raw
        ``HTTP/1.1 429`` status line (some proxies forward it that way).
    """
    if response.status_code == _THROTTLE_STATUS:
        return True
    return any(_THROTTLE_MARKER in value for value in response.headers.values())


class RateLimitedFetcher:
    """Fetches raw detail payloads, backing off while throttled.

    Args:
        client: Catalog backend that opens the detail responses.
        cancel_event: Set to stop a running fetch at its next checkpoint.
        backoff_seconds: Wait between a throttle response and the retry.
    """

    def __init__(
        self,
        client: CatalogClient,
        cancel_event: threading.Event,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    ) -> None:
        self._client = client
        self._cancel_event = cancel_event
        self.backoff_seconds = backoff_seconds

    def _check_cancelled(self) -> None:
        if self._cancel_event.is_set():
            raise OperationCancelled()

    def fetch_detail(self, game: Game) -> bytes:
        """Downloads the detail payload of a game.

        Args:
            game: Game whose app id is requested.

        Returns:
            The raw response body.

        Raises:
            DetailFetchError: On a network error or a non-throttle HTTP
                error status.
            OperationCancelled: If cancellation is requested while
                waiting or reading.
        """
        while True:
            self._check_cancelled()

            try:
                response = self._client.open_app_details(game.app_id)
            except requests.RequestException as e:
                raise DetailFetchError(game.app_id, type(e).__name__) from e

            with response:
                if is_throttled(response):
                    logger.warning(
                        "Too many requests, waiting %.0f seconds before retrying app %d",
                        self.backoff_seconds,
                        game.app_id,
                    )
                    if self._cancel_event.wait(self.backoff_seconds):
                        raise OperationCancelled()
                    continue

                try:
                    response.raise_for_status()
                except requests.HTTPError as e:
                    raise DetailFetchError(game.app_id, f"HTTP {response.status_code}") from e

                return self._read_body(response, game)

    def _read_body(self, response: requests.Response, game: Game) -> bytes:
        """Reads a streaming body chunk by chunk, checking for cancellation.

        Args:
            response: Successful streaming response.
            game: Game being fetched, for error reporting.

        Returns:
            The concatenated body.
        """
        chunks: list[bytes] = []
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                self._check_cancelled()
                chunks.append(chunk)
        except requests.RequestException as e:
            raise DetailFetchError(game.app_id, type(e).__name__) from e
        return b"".join(chunks)
