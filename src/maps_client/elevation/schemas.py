"""Pydantic schemas for elevation requests and results."""

import threading
from collections.abc import Sequence

from pydantic import BaseModel, Field

from maps_client import polyline
from maps_client.context import Context
from maps_client.encoding import Params, join_locations
from maps_client.exceptions import DecodeError, ValidationError
from maps_client.request import MapsRequest
from maps_client.types import LatLng


class ElevationResult(BaseModel):
    """Elevation data for a single coordinate."""

    location: LatLng
    elevation: float = Field(strict=True)
    resolution: float | None = Field(default=None, strict=True)


class ElevationRequest(MapsRequest):
    """Elevation lookup for discrete locations or for samples along a path.

    Set exactly one of ``locations`` or ``path``; a path also needs a
    positive ``samples`` count.
    """

    operation = "elevation"
    result_type = ElevationResult

    locations: list[LatLng] = Field(default_factory=list)
    path: list[LatLng] = Field(default_factory=list)
    samples: int = 0

    def check(self) -> None:
        if not self.locations and not self.path:
            raise ValidationError("Elevation request is missing locations: set locations or path")
        if self.locations and self.path:
            raise ValidationError("Elevation request accepts locations or path, not both")
        if self.path and self.samples <= 0:
            raise ValidationError(f"Elevation path requires samples > 0, got {self.samples}")

    def params(self) -> Params:
        if self.path:
            return [("path", "enc:" + polyline.encode(self.path)), ("samples", str(self.samples))]
        return [("locations", join_locations(self.locations))]

    def check_results(self, results: Sequence[ElevationResult]) -> None:
        if self.path and len(results) != self.samples:
            raise DecodeError(f"Expected {self.samples} path samples, got {len(results)}")

    def get(
        self,
        context: Context,
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> list[ElevationResult]:
        """Look up elevations.

        Returns:
            One result per location, or ``samples`` results along the path.
            Empty when the service reports no results.
        """
        results: list[ElevationResult] = context.request(self, cancel=cancel, deadline=deadline)
        return results
