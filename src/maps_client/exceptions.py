"""Custom exception hierarchy for the client."""


class MapsClientError(Exception):
    """Base exception for the client."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ValidationError(MapsClientError):
    """Raised when a request is structurally invalid before dispatch."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_REQUEST_FIELDS")


class ConfigurationError(MapsClientError):
    """Raised when a context cannot be built from the given credentials or settings."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")


class TransportError(MapsClientError):
    """Raised on connection failures or HTTP errors without a usable body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.status_code = status_code
        self.retryable = retryable


class ServiceError(MapsClientError):
    """Raised when the remote service answers with a terminal non-OK status."""

    def __init__(self, status: str, error_message: str | None = None) -> None:
        detail = f"{status}: {error_message}" if error_message else status
        super().__init__(detail, code=status)
        self.status = status
        self.error_message = error_message


class RetryableServiceError(ServiceError):
    """Raised when the remote service answers with a transient status."""


class DecodeError(MapsClientError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="DECODE_ERROR")


class RequestCancelledError(MapsClientError):
    """Raised when a call is cancelled or its deadline passes before completion."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="REQUEST_CANCELLED")
