"""Pydantic schemas for forward and reverse geocoding."""

import threading

from pydantic import BaseModel, Field

from maps_client.context import Context
from maps_client.encoding import Params
from maps_client.exceptions import ValidationError
from maps_client.request import MapsRequest
from maps_client.types import LatLng, LatLngBounds


class AddressComponent(BaseModel):
    long_name: str
    short_name: str
    types: list[str] = Field(default_factory=list)


class Geometry(BaseModel):
    location: LatLng
    location_type: str
    viewport: LatLngBounds
    bounds: LatLngBounds | None = None


class GeocodingResult(BaseModel):
    """A single geocoding match."""

    address_components: list[AddressComponent] = Field(default_factory=list)
    formatted_address: str
    geometry: Geometry
    place_id: str
    types: list[str] = Field(default_factory=list)
    partial_match: bool = Field(default=False, strict=True)


class GeocodingRequest(MapsRequest):
    """Forward geocoding by address or components, reverse by latlng or place ID."""

    operation = "geocode"
    result_type = GeocodingResult

    address: str | None = None
    components: dict[str, str] = Field(default_factory=dict)
    bounds: LatLngBounds | None = None
    region: str | None = None
    latlng: LatLng | None = None
    place_id: str | None = None
    result_type_filter: list[str] = Field(default_factory=list)
    location_type: list[str] = Field(default_factory=list)
    language: str | None = None

    def check(self) -> None:
        if not (self.address or self.components or self.latlng or self.place_id):
            raise ValidationError(
                "Geocoding request requires address, components, latlng or place_id"
            )
        if self.latlng is not None and self.place_id:
            raise ValidationError("Geocoding request accepts latlng or place_id, not both")
        if (self.latlng is not None or self.place_id) and self.address:
            raise ValidationError("Reverse geocoding cannot be combined with an address")

    def params(self) -> Params:
        params: Params = []
        if self.address:
            params.append(("address", self.address))
        if self.components:
            params.append((
                "components",
                "|".join(f"{name}:{value}" for name, value in sorted(self.components.items())),
            ))
        if self.bounds is not None:
            params.append(("bounds", str(self.bounds)))
        if self.region:
            params.append(("region", self.region))
        if self.latlng is not None:
            params.append(("latlng", str(self.latlng)))
        if self.place_id:
            params.append(("place_id", self.place_id))
        if self.result_type_filter:
            params.append(("result_type", "|".join(self.result_type_filter)))
        if self.location_type:
            params.append(("location_type", "|".join(self.location_type)))
        if self.language:
            params.append(("language", self.language))
        return params

    def get(
        self,
        context: Context,
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> list[GeocodingResult]:
        results: list[GeocodingResult] = context.request(self, cancel=cancel, deadline=deadline)
        return results
