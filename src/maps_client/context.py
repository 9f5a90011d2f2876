"""Shared, read-only call context: credentials, transport and policies."""

import threading
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urlencode

from maps_client.config import DEFAULT_BASE_URL, Settings
from maps_client.decoding import decode_response
from maps_client.dispatch import RateLimiter, RetryPolicy, execute
from maps_client.encoding import Params, build_url, sign_hmac
from maps_client.exceptions import ConfigurationError
from maps_client.request import MapsRequest
from maps_client.transport import RequestsTransport, Transport

DEFAULT_TIMEOUT_SECONDS = 10.0


class Credentials(Protocol):
    def authorize(self, path: str, params: Params) -> Params:
        """Return ``params`` with authentication parameters appended."""
        ...


@dataclass(frozen=True, slots=True)
class ApiKey:
    """Authenticate with an API key sent verbatim as the ``key`` parameter."""

    key: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.key:
            raise ConfigurationError("API key must not be empty")

    def authorize(self, path: str, params: Params) -> Params:
        return [*params, ("key", self.key)]


@dataclass(frozen=True, slots=True)
class ClientSigning:
    """Authenticate with a client ID and an HMAC signature over path and query."""

    client_id: str
    secret: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.client_id or not self.secret:
            raise ConfigurationError("Client ID and secret must both be set")

    def authorize(self, path: str, params: Params) -> Params:
        # The signature covers the query exactly as sent, client ID included.
        signed = [*params, ("client", self.client_id)]
        signature = sign_hmac(self.secret, f"{path}?{urlencode(signed)}")
        return [*signed, ("signature", signature)]


@dataclass(frozen=True)
class Context:
    """Everything a request needs to reach the remote service.

    Build one per caller session with :meth:`create` (or
    :meth:`with_base_url` for a substitute endpoint) and pass it to every
    ``request.get(...)`` call. Contexts are immutable and safe to share
    between threads.
    """

    credentials: Credentials
    transport: Transport
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    rate_limiter: RateLimiter | None = None

    @classmethod
    def create(
        cls,
        credentials: Credentials,
        transport: Transport | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retry_policy: RetryPolicy | None = None,
        queries_per_second: int = 0,
    ) -> "Context":
        """Create a context against the production service."""
        return cls.with_base_url(
            credentials,
            transport,
            DEFAULT_BASE_URL,
            timeout=timeout,
            retry_policy=retry_policy,
            queries_per_second=queries_per_second,
        )

    @classmethod
    def with_base_url(
        cls,
        credentials: Credentials,
        transport: Transport | None,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retry_policy: RetryPolicy | None = None,
        queries_per_second: int = 0,
    ) -> "Context":
        """Create a context that sends requests to ``base_url`` instead.

        Args:
            credentials: ``ApiKey`` or ``ClientSigning``.
            transport: Transport to use; a ``RequestsTransport`` if omitted.
            base_url: Service root, e.g. a local test server.
            timeout: Per-attempt timeout in seconds.
            retry_policy: Retry bound and backoff; defaults to ``RetryPolicy()``.
            queries_per_second: Rate limit shared by all calls; 0 disables it.
        """
        if not base_url:
            raise ConfigurationError("Base URL must not be empty")
        if timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {timeout}")
        return cls(
            credentials=credentials,
            transport=transport if transport is not None else RequestsTransport(),
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            retry_policy=retry_policy or RetryPolicy(),
            rate_limiter=RateLimiter(queries_per_second) if queries_per_second > 0 else None,
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: Transport | None = None) -> "Context":
        """Create a context from environment-derived settings.

        Signing credentials win when both an API key and a client ID are set.

        Raises:
            ConfigurationError: If no usable credentials are configured.
        """
        credentials: Credentials
        if settings.client_id or settings.client_secret:
            credentials = ClientSigning(settings.client_id or "", settings.client_secret or "")
        elif settings.api_key:
            credentials = ApiKey(settings.api_key)
        else:
            raise ConfigurationError(
                "Set MAPS_API_KEY or both MAPS_CLIENT_ID and MAPS_CLIENT_SECRET"
            )
        return cls.with_base_url(
            credentials,
            transport,
            settings.base_url,
            timeout=settings.timeout_seconds,
            retry_policy=RetryPolicy(
                max_attempts=settings.max_attempts,
                base_delay=settings.base_backoff_seconds,
                max_delay=settings.max_backoff_seconds,
            ),
            queries_per_second=settings.queries_per_second,
        )

    def request(
        self,
        request: MapsRequest,
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> Any:
        """Validate, send and decode ``request``.

        Args:
            request: The per-operation request.
            cancel: Event that aborts the call when set.
            deadline: ``time.monotonic()`` value after which no attempt starts.

        Returns:
            The decoded payload; see ``decode_response``.

        Raises:
            ValidationError: If the request fails its checks. Nothing is sent.
            MapsClientError: Any other error raised by the dispatch pipeline.
        """
        request.check()
        url = build_url(self.base_url, request, self.credentials)

        def attempt(timeout: float) -> Any:
            response = self.transport.get(url, timeout=timeout)
            return decode_response(response, request)

        return execute(
            attempt,
            policy=self.retry_policy,
            timeout=self.timeout,
            rate_limiter=self.rate_limiter,
            cancel=cancel,
            deadline=deadline,
            description=request.operation,
        )
