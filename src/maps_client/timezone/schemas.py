"""Pydantic schemas for time zone lookups."""

import threading
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from maps_client.context import Context
from maps_client.encoding import Params
from maps_client.exceptions import ValidationError
from maps_client.request import MapsRequest
from maps_client.types import LatLng


class TimezoneResult(BaseModel):
    """Offsets and names of the time zone at a location.

    The service sends these fields at the top level of the envelope in
    camelCase.
    """

    model_config = ConfigDict(populate_by_name=True)

    dst_offset: int = Field(alias="dstOffset", strict=True)
    raw_offset: int = Field(alias="rawOffset", strict=True)
    time_zone_id: str = Field(alias="timeZoneId")
    time_zone_name: str = Field(alias="timeZoneName")


class TimezoneRequest(MapsRequest):
    operation = "timezone"
    result_type = TimezoneResult
    payload_key = None

    location: LatLng | None = None
    timestamp: datetime | int = 0
    language: str | None = None

    def check(self) -> None:
        if self.location is None:
            raise ValidationError("Time zone request is missing location")
        if self._unix_seconds() < 0:
            raise ValidationError(f"Time zone timestamp must not be negative, got {self.timestamp}")

    def _unix_seconds(self) -> int:
        if isinstance(self.timestamp, datetime):
            return int(self.timestamp.timestamp())
        return self.timestamp

    def params(self) -> Params:
        params: Params = [
            ("location", str(self.location)),
            ("timestamp", str(self._unix_seconds())),
        ]
        if self.language:
            params.append(("language", self.language))
        return params

    def get(
        self,
        context: Context,
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> TimezoneResult | None:
        """Look up the time zone; ``None`` when the service has no result."""
        result: TimezoneResult | None = context.request(self, cancel=cancel, deadline=deadline)
        return result
