"""Interpretation of the remote service's JSON envelope."""

import json
import logging
from typing import Any

import pydantic

from maps_client.exceptions import (
    DecodeError,
    RetryableServiceError,
    ServiceError,
    TransportError,
    ValidationError,
)
from maps_client.request import MapsRequest
from maps_client.transport import HTTPResponse

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"
RETRYABLE_STATUSES = frozenset({"OVER_QUERY_LIMIT", "UNKNOWN_ERROR"})
ENVELOPE_KEYS = frozenset({"status", "error_message"})


def decode_response(response: HTTPResponse, request: MapsRequest) -> Any:
    """Turn a raw HTTP response into the typed payload for ``request``.

    Args:
        response: The raw HTTP response.
        request: The request the response answers.

    Returns:
        A list of ``request.result_type`` for list operations, otherwise a
        single instance. ``ZERO_RESULTS`` yields an empty list or ``None``.

    Raises:
        TransportError: For HTTP 5xx/429 (retryable) or a non-2xx response
            without a service status (terminal).
        RetryableServiceError: For transient service statuses.
        ServiceError: For terminal service statuses.
        DecodeError: If a 2xx body does not match the expected shape.
    """
    status_code = response.status_code
    if status_code == 429 or status_code >= 500:
        raise TransportError(
            f"Remote service returned HTTP {status_code}",
            status_code=status_code,
            retryable=True,
        )

    http_ok = 200 <= status_code < 300
    envelope = _parse_envelope(response.body)
    status = envelope.get("status") if envelope is not None else None
    if not isinstance(status, str) or (status == STATUS_OK and not http_ok):
        if http_ok:
            raise DecodeError("Response envelope has no status field")
        raise TransportError(
            f"Remote service returned HTTP {status_code} with an unparsable body",
            status_code=status_code,
        )

    if status == STATUS_OK:
        results = _decode_payload(envelope, request)
        if request.returns_many():
            request.check_results(results)
        return results
    if status == STATUS_ZERO_RESULTS:
        return [] if request.returns_many() else None

    error_message = envelope.get("error_message")
    if not isinstance(error_message, str):
        error_message = None
    if status in RETRYABLE_STATUSES:
        raise RetryableServiceError(status, error_message)
    raise ServiceError(status, error_message)


def _parse_envelope(body: bytes) -> dict[str, Any] | None:
    try:
        envelope = json.loads(body)
    except ValueError:
        return None
    return envelope if isinstance(envelope, dict) else None


def _decode_payload(envelope: dict[str, Any], request: MapsRequest) -> Any:
    result_type = request.result_type
    key = request.payload_key

    if key is None:
        raw: Any = {name: value for name, value in envelope.items() if name not in ENVELOPE_KEYS}
    else:
        raw = envelope.get(key)
        expected = list if request.returns_many() else dict
        if not isinstance(raw, expected):
            raise DecodeError(
                f"Expected '{key}' to be a JSON {'array' if expected is list else 'object'}"
            )

    try:
        if request.returns_many():
            return [result_type.model_validate(item) for item in raw]
        return result_type.model_validate(raw)
    except (pydantic.ValidationError, ValidationError) as exc:
        logger.debug(
            "Failed to decode payload",
            extra={"operation": request.operation, "error": str(exc)},
        )
        raise DecodeError(
            f"Unexpected {request.operation} payload: {_describe(exc)}"
        ) from exc


def _describe(exc: Exception) -> str:
    if isinstance(exc, pydantic.ValidationError):
        return f"{exc.error_count()} validation error(s)"
    return str(exc)
