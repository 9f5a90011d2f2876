"""HTTP transport used by the dispatcher."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import requests

from maps_client.exceptions import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = "maps-client/0.1"

RETRYABLE_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


@dataclass(frozen=True, slots=True)
class HTTPResponse:
    """Status, headers and raw body of a completed HTTP exchange."""

    status_code: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


class Transport(Protocol):
    """Anything that can send an HTTP GET and return the raw response."""

    def get(self, url: str, *, timeout: float) -> HTTPResponse:
        """Send a GET request.

        Raises:
            TransportError: If the request could not be completed.
        """
        ...


class RequestsTransport:
    """Transport backed by a pooled ``requests.Session``.

    The session may be shared across threads for concurrent calls.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()

    def get(self, url: str, *, timeout: float) -> HTTPResponse:
        """Send a GET request through the session.

        Raises:
            TransportError: On any request failure. Connection errors,
                timeouts and broken chunked bodies are retryable; malformed
                URLs and other request errors are not.
        """
        try:
            response = self._session.get(
                url, timeout=timeout, headers={"User-Agent": USER_AGENT}
            )
        except RETRYABLE_ERRORS as exc:
            logger.debug("HTTP request failed", extra={"error": str(exc)})
            raise TransportError(f"HTTP request failed: {exc}", retryable=True) from exc
        except requests.RequestException as exc:
            logger.debug("HTTP request rejected", extra={"error": str(exc)})
            raise TransportError(f"HTTP request could not be sent: {exc}") from exc
        return HTTPResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        """Close the underlying session and its connection pool."""
        self._session.close()
