"""Coordinate value types shared by requests and results."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from maps_client.encoding import format_float
from maps_client.exceptions import ValidationError


def _check_range(lat: float, lng: float) -> None:
    if not (-90 <= lat <= 90):
        raise ValidationError(f"Invalid latitude: {lat}. Must be between -90 and 90.")
    if not (-180 <= lng <= 180):
        raise ValidationError(f"Invalid longitude: {lng}. Must be between -180 and 180.")


class LatLng(BaseModel):
    """An immutable latitude/longitude pair in decimal degrees.

    Out-of-range values raise the client's ``ValidationError``, which
    pydantic passes through unchanged.
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(strict=True)
    lng: float = Field(strict=True)

    @model_validator(mode="after")
    def within_range(self) -> "LatLng":
        _check_range(self.lat, self.lng)
        return self

    def __str__(self) -> str:
        return f"{format_float(self.lat)},{format_float(self.lng)}"

    @classmethod
    def parse(cls, location: str) -> "LatLng":
        """Parse a 'lat,lng' string into a LatLng.

        Args:
            location: Comma-separated latitude and longitude, e.g. '51.5,-0.1'.

        Returns:
            The parsed coordinate.

        Raises:
            ValidationError: If the format is wrong or values are out of range.
        """
        try:
            lat_str, lng_str = location.split(",")
            lat = float(lat_str.strip())
            lng = float(lng_str.strip())
        except ValueError as exc:
            raise ValidationError(
                f"Invalid location format: '{location}'. Expected 'latitude,longitude'."
            ) from exc

        return cls(lat=lat, lng=lng)


class LatLngBounds(BaseModel):
    """A rectangle given by its north-east and south-west corners."""

    model_config = ConfigDict(frozen=True)

    northeast: LatLng
    southwest: LatLng

    def __str__(self) -> str:
        return f"{self.southwest}|{self.northeast}"
