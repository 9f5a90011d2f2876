"""Query-string encoding and URL signing for outgoing requests."""

import base64
import binascii
import hashlib
import hmac
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING
from urllib.parse import urlencode, urlsplit

from maps_client.exceptions import ConfigurationError

if TYPE_CHECKING:
    from maps_client.context import Credentials
    from maps_client.request import MapsRequest

Params = list[tuple[str, str]]


def format_float(value: float) -> str:
    """Render a float in positional notation with the shortest round-tripping digits."""
    return format(Decimal(repr(float(value))), "f")


def join_locations(locations: Iterable[object]) -> str:
    """Join coordinates into the pipe-separated 'lat,lng|lat,lng' form."""
    return "|".join(str(location) for location in locations)


def sign_hmac(secret: str, payload: str) -> str:
    """Sign a URL path and query with a URL-safe base64 encoded secret.

    Args:
        secret: The client signing secret, URL-safe base64 encoded.
        payload: The exact '<path>?<query>' string the server will see.

    Returns:
        The URL-safe base64 encoded HMAC-SHA1 digest.

    Raises:
        ConfigurationError: If the secret is not valid base64.
    """
    try:
        key = base64.urlsafe_b64decode(secret.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ConfigurationError("Client secret is not valid URL-safe base64") from exc
    digest = hmac.new(key, payload.encode("utf-8"), hashlib.sha1).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii")


def build_url(base_url: str, request: "MapsRequest", credentials: "Credentials") -> str:
    """Assemble the fully qualified, authenticated URL for a validated request.

    Request parameters keep their declared order; authentication
    parameters are appended last.
    """
    endpoint = f"{base_url.rstrip('/')}/{request.operation}/json"
    path = urlsplit(endpoint).path
    params = credentials.authorize(path, request.params())
    return f"{endpoint}?{urlencode(params)}"
