"""Encoded polyline algorithm format used for 'enc:' paths.

Coordinates are rounded half-up to five decimal places, delta-encoded
against the previous point, and written as 5-bit chunks offset by 63.
"""

import math
from collections.abc import Iterable

from maps_client.exceptions import ValidationError
from maps_client.types import LatLng

PRECISION = 1e5


def _round(value: float) -> int:
    return int(math.floor(value * PRECISION + 0.5))


def _encode_value(value: int, out: list[str]) -> None:
    value = ~(value << 1) if value < 0 else value << 1
    while value >= 0x20:
        out.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    out.append(chr(value + 63))


def encode(path: Iterable[LatLng]) -> str:
    """Encode a sequence of coordinates as a polyline string."""
    out: list[str] = []
    prev_lat = prev_lng = 0
    for point in path:
        lat = _round(point.lat)
        lng = _round(point.lng)
        _encode_value(lat - prev_lat, out)
        _encode_value(lng - prev_lng, out)
        prev_lat, prev_lng = lat, lng
    return "".join(out)


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ValidationError(f"Truncated polyline: '{encoded}'")
        chunk = ord(encoded[index]) - 63
        index += 1
        if chunk < 0 or chunk > 0x3F:
            raise ValidationError(f"Invalid polyline character at {index - 1}: '{encoded}'")
        result |= (chunk & 0x1F) << shift
        shift += 5
        if chunk < 0x20:
            break
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode(encoded: str) -> list[LatLng]:
    """Decode a polyline string into coordinates.

    Raises:
        ValidationError: If the string is truncated or holds invalid characters.
    """
    path: list[LatLng] = []
    index = 0
    lat = lng = 0
    while index < len(encoded):
        delta_lat, index = _decode_value(encoded, index)
        delta_lng, index = _decode_value(encoded, index)
        lat += delta_lat
        lng += delta_lng
        path.append(LatLng(lat=lat / PRECISION, lng=lng / PRECISION))
    return path
