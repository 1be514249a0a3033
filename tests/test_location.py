"""Tests for the user location providers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from waypoint.services.location import (
    IpGeolocationService,
    LocationErrorReason,
    LocationFailure,
    LocationSuccess,
    StaticLocationService,
)


def http_response(status_code, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload or {}
    return response


class TestStaticLocationService:

    @pytest.mark.asyncio
    async def test_configured_position(self):
        result = await StaticLocationService(52.2297, 21.0122).get_current_location()

        assert result == LocationSuccess(52.2297, 21.0122)

    @pytest.mark.asyncio
    async def test_missing_position_is_unsupported(self):
        result = await StaticLocationService(None, 21.0).get_current_location()

        assert isinstance(result, LocationFailure)
        assert result.reason is LocationErrorReason.UNSUPPORTED


class TestIpGeolocationService:

    @pytest.mark.asyncio
    async def test_success(self):
        payload = {"status": "success", "lat": 52.23, "lon": 21.01}
        with patch("waypoint.services.location.requests.get", return_value=http_response(200, payload)):
            result = await IpGeolocationService(url="http://geo").get_current_location()

        assert result == LocationSuccess(52.23, 21.01, IpGeolocationService.APPROXIMATE_ACCURACY_M)

    @pytest.mark.parametrize(
        "response, reason",
        [
            (http_response(403), LocationErrorReason.PERMISSION_DENIED),
            (http_response(500), LocationErrorReason.FAILED),
            (http_response(200, {"status": "fail", "message": "private range"}), LocationErrorReason.NOT_FOUND),
        ],
    )
    def test_failures(self, response, reason):
        with patch("waypoint.services.location.requests.get", return_value=response):
            result = IpGeolocationService(url="http://geo")._lookup()

        assert isinstance(result, LocationFailure)
        assert result.reason is reason

    def test_network_error(self):
        with patch(
            "waypoint.services.location.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            result = IpGeolocationService(url="http://geo")._lookup()

        assert result.reason is LocationErrorReason.FAILED
        assert result.message == "Failed to get location: unreachable"
