"""Tests for the Open-Meteo weather client."""

from unittest.mock import MagicMock

import pytest
import requests

from waypoint.services.weather_api import (
    LocationNotFoundError,
    WeatherApiService,
    WeatherServiceError,
    weather_code_to_condition,
)

GEOCODING = {
    "results": [
        {"name": "Warsaw", "admin1": "Masovia", "country": "Poland", "latitude": 52.22977, "longitude": 21.01178}
    ]
}
FORECAST = {
    "current": {
        "temperature_2m": 18.5,
        "relative_humidity_2m": 65,
        "weather_code": 3,
        "wind_speed_10m": 12.3,
    }
}


def json_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def make_service(*responses):
    session = MagicMock()
    session.get.side_effect = list(responses)
    return WeatherApiService(geocoding_url="https://geo", weather_url="https://wx", timeout=3, session=session), session


class TestWeatherApiService:

    @pytest.mark.asyncio
    async def test_geocodes_then_fetches_current_weather(self):
        service, session = make_service(json_response(GEOCODING), json_response(FORECAST))

        forecast = await service.get_weather("Warsaw")

        assert forecast.location == "Warsaw, Masovia, Poland"
        assert forecast.temperature == 18.5
        assert forecast.condition == "Partly cloudy"
        assert forecast.humidity == 65
        assert forecast.wind_speed == 12.3

        geocode_call, weather_call = session.get.call_args_list
        assert geocode_call.args[0] == "https://geo"
        assert geocode_call.kwargs["params"]["name"] == "Warsaw"
        assert weather_call.kwargs["params"]["latitude"] == 52.22977
        assert weather_call.kwargs["timeout"] == 3

    def test_unknown_location(self):
        service, session = make_service(json_response({"results": []}))

        with pytest.raises(LocationNotFoundError, match="Atlantis"):
            service.get_weather_sync("Atlantis")
        assert session.get.call_count == 1

    def test_http_failure(self):
        failing = MagicMock()
        failing.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        service, _ = make_service(failing)

        with pytest.raises(WeatherServiceError, match="503"):
            service.get_weather_sync("Warsaw")

    def test_malformed_forecast(self):
        service, _ = make_service(json_response(GEOCODING), json_response({"current": {}}))

        with pytest.raises(WeatherServiceError, match="Unexpected forecast response"):
            service.get_weather_sync("Warsaw")

    def test_condition_codes(self):
        assert weather_code_to_condition(0) == "Clear sky"
        assert weather_code_to_condition(3) == "Partly cloudy"
        assert weather_code_to_condition(95) == "Thunderstorm"
        assert weather_code_to_condition(12345) == "Unknown"
