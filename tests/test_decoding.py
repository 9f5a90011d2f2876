"""Tests for envelope parsing and status mapping."""

import pytest

from maps_client.decoding import decode_response
from maps_client.elevation.schemas import ElevationRequest, ElevationResult
from maps_client.exceptions import (
    DecodeError,
    RetryableServiceError,
    ServiceError,
    TransportError,
)
from maps_client.timezone.schemas import TimezoneRequest
from maps_client.transport import HTTPResponse
from maps_client.types import LatLng

LOCATIONS_REQUEST = ElevationRequest(locations=[LatLng(lat=1.0, lng=2.0)])
ONE_RESULT = (
    b'{"status": "OK", "results": '
    b'[{"elevation": 12.5, "location": {"lat": 1.0, "lng": 2.0}, "resolution": 9.5}]}'
)


def _response(status_code: int, body: bytes) -> HTTPResponse:
    return HTTPResponse(status_code=status_code, body=body)


class TestStatusMapping:
    def test_ok_decodes_results(self) -> None:
        results = decode_response(_response(200, ONE_RESULT), LOCATIONS_REQUEST)

        assert results == [
            ElevationResult(location=LatLng(lat=1.0, lng=2.0), elevation=12.5, resolution=9.5)
        ]

    def test_ok_with_empty_results(self) -> None:
        body = b'{"status": "OK", "results": []}'

        assert decode_response(_response(200, body), LOCATIONS_REQUEST) == []

    def test_zero_results_is_empty(self) -> None:
        body = b'{"status": "ZERO_RESULTS"}'

        assert decode_response(_response(200, body), LOCATIONS_REQUEST) == []

    def test_zero_results_for_single_result_operation_is_none(self) -> None:
        request = TimezoneRequest(location=LatLng(lat=1.0, lng=2.0))

        assert decode_response(_response(200, b'{"status": "ZERO_RESULTS"}'), request) is None

    @pytest.mark.parametrize("status", ["OVER_QUERY_LIMIT", "UNKNOWN_ERROR"])
    def test_transient_statuses_are_retryable(self, status: str) -> None:
        body = f'{{"status": "{status}"}}'.encode()

        with pytest.raises(RetryableServiceError) as exc_info:
            decode_response(_response(200, body), LOCATIONS_REQUEST)

        assert exc_info.value.status == status

    @pytest.mark.parametrize("status", ["INVALID_REQUEST", "REQUEST_DENIED", "NOT_FOUND"])
    def test_other_statuses_are_terminal(self, status: str) -> None:
        body = f'{{"status": "{status}", "error_message": "nope"}}'.encode()

        with pytest.raises(ServiceError) as exc_info:
            decode_response(_response(200, body), LOCATIONS_REQUEST)

        assert not isinstance(exc_info.value, RetryableServiceError)
        assert exc_info.value.status == status
        assert exc_info.value.error_message == "nope"
        assert str(exc_info.value) == f"{status}: nope"

    def test_service_status_on_client_error_response(self) -> None:
        body = b'{"status": "REQUEST_DENIED"}'

        with pytest.raises(ServiceError) as exc_info:
            decode_response(_response(403, body), LOCATIONS_REQUEST)

        assert exc_info.value.error_message is None


class TestHttpFailures:
    @pytest.mark.parametrize("status_code", [500, 502, 503, 429])
    def test_server_errors_are_retryable(self, status_code: int) -> None:
        with pytest.raises(TransportError) as exc_info:
            decode_response(_response(status_code, b'{"status": "ERROR"}'), LOCATIONS_REQUEST)

        assert exc_info.value.retryable
        assert exc_info.value.status_code == status_code

    def test_client_error_with_unparsable_body_is_terminal(self) -> None:
        with pytest.raises(TransportError) as exc_info:
            decode_response(_response(404, b"<html>Not Found</html>"), LOCATIONS_REQUEST)

        assert not exc_info.value.retryable
        assert exc_info.value.status_code == 404


class TestStrictDecoding:
    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"[]",
            b'{"results": []}',
        ],
    )
    def test_malformed_envelope(self, body: bytes) -> None:
        with pytest.raises(DecodeError):
            decode_response(_response(200, body), LOCATIONS_REQUEST)

    def test_results_must_be_a_list(self) -> None:
        body = b'{"status": "OK", "results": {"elevation": 1.0}}'

        with pytest.raises(DecodeError, match="array"):
            decode_response(_response(200, body), LOCATIONS_REQUEST)

    def test_missing_result_field(self) -> None:
        body = b'{"status": "OK", "results": [{"location": {"lat": 1.0, "lng": 2.0}}]}'

        with pytest.raises(DecodeError, match="elevation payload"):
            decode_response(_response(200, body), LOCATIONS_REQUEST)

    def test_out_of_range_location(self) -> None:
        body = b'{"status": "OK", "results": [{"elevation": 1.0, "location": {"lat": 100.0, "lng": 2.0}}]}'

        with pytest.raises(DecodeError, match="Invalid latitude"):
            decode_response(_response(200, body), LOCATIONS_REQUEST)

    @pytest.mark.parametrize(
        "body",
        [
            b'{"status": "OK", "results": [{"elevation": "1608.6", "location": {"lat": 1.0, "lng": 2.0}}]}',
            b'{"status": "OK", "results": [{"elevation": 1.0, "location": {"lat": "1.0", "lng": "2.0"}}]}',
            b'{"status": "OK", "results": [{"elevation": 1.0, "resolution": "9.5", "location": {"lat": 1.0, "lng": 2.0}}]}',
        ],
    )
    def test_numeric_strings_are_rejected(self, body: bytes) -> None:
        with pytest.raises(DecodeError, match="elevation payload"):
            decode_response(_response(200, body), LOCATIONS_REQUEST)

    def test_timezone_offsets_must_be_numbers(self) -> None:
        body = (
            b'{"status": "OK", "dstOffset": "0", "rawOffset": -28800, '
            b'"timeZoneId": "America/Los_Angeles", "timeZoneName": "Pacific Standard Time"}'
        )
        request = TimezoneRequest(location=LatLng(lat=39.6, lng=-119.7))

        with pytest.raises(DecodeError, match="timezone payload"):
            decode_response(_response(200, body), request)

    def test_integral_elevation_is_accepted(self) -> None:
        body = b'{"status": "OK", "results": [{"elevation": 1608, "location": {"lat": 39, "lng": -105}}]}'

        (result,) = decode_response(_response(200, body), LOCATIONS_REQUEST)

        assert result.elevation == 1608.0
        assert result.location == LatLng(lat=39.0, lng=-105.0)

    def test_decoded_floats_come_straight_from_json(self) -> None:
        body = (
            b'{"status": "OK", "results": [{"elevation": -84.61699676513672, '
            b'"location": {"lat": 36.41150289067028, "lng": -117.5602607523847}}]}'
        )

        (result,) = decode_response(_response(200, body), LOCATIONS_REQUEST)

        assert result.location == LatLng(lat=36.41150289067028, lng=-117.5602607523847)
        assert result.elevation == -84.61699676513672
        assert result.resolution is None
