import asyncio
import logging
from typing import Optional, Tuple

import requests

from waypoint.config import settings
from waypoint.models.domain import WeatherForecast

logger = logging.getLogger(__name__)


class WeatherServiceError(Exception):
    """Open-Meteo call or response failure."""


class LocationNotFoundError(WeatherServiceError):
    """Geocoding returned no result for the requested location."""


# WMO weather interpretation codes used by Open-Meteo
_CONDITIONS = {
    0: "Clear sky",
    1: "Partly cloudy", 2: "Partly cloudy", 3: "Partly cloudy",
    45: "Foggy", 48: "Foggy",
    51: "Drizzle", 53: "Drizzle", 55: "Drizzle",
    56: "Freezing drizzle", 57: "Freezing drizzle",
    61: "Rain", 63: "Rain", 65: "Rain",
    66: "Freezing rain", 67: "Freezing rain",
    71: "Snow", 73: "Snow", 75: "Snow",
    77: "Snow grains",
    80: "Rain showers", 81: "Rain showers", 82: "Rain showers",
    85: "Snow showers", 86: "Snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail", 99: "Thunderstorm with hail",
}


def weather_code_to_condition(code: int) -> str:
    return _CONDITIONS.get(code, "Unknown")


class WeatherApiService:
    """
    Current weather for a free-text location via the Open-Meteo geocoding and forecast APIs.
    """

    def __init__(
        self,
        geocoding_url: str = settings.GEOCODING_URL,
        weather_url: str = settings.WEATHER_URL,
        timeout: float = settings.HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.geocoding_url = geocoding_url
        self.weather_url = weather_url
        self.timeout = timeout
        self.session = session or requests.Session()

    async def get_weather(self, location: str) -> WeatherForecast:
        # requests is blocking; keep it off the event loop
        return await asyncio.to_thread(self.get_weather_sync, location)

    def get_weather_sync(self, location: str) -> WeatherForecast:
        name, latitude, longitude = self._geocode(location)

        data = self._get_json(
            self.weather_url,
            {
                "latitude": latitude,
                "longitude": longitude,
                "current": "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m",
            },
        )
        try:
            current = data["current"]
            forecast = WeatherForecast(
                location=name,
                temperature=float(current["temperature_2m"]),
                condition=weather_code_to_condition(int(current["weather_code"])),
                humidity=int(current["relative_humidity_2m"]),
                wind_speed=float(current["wind_speed_10m"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherServiceError(f"Unexpected forecast response: {e}") from e

        logger.info(f"Weather for '{location}': {forecast.temperature}°C, {forecast.condition}")
        return forecast

    def _geocode(self, location: str) -> Tuple[str, float, float]:
        data = self._get_json(
            self.geocoding_url,
            {"name": location, "count": 1, "language": "en", "format": "json"},
        )
        results = data.get("results") or []
        if not results:
            raise LocationNotFoundError(f"Location not found: {location}")

        result = results[0]
        parts = [result["name"]]
        for key in ("admin1", "country"):
            if result.get(key):
                parts.append(result[key])
        return ", ".join(parts), float(result["latitude"]), float(result["longitude"])

    def _get_json(self, url: str, params: dict) -> dict:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise WeatherServiceError(f"Weather service request failed: {e}") from e
        except ValueError as e:
            raise WeatherServiceError(f"Weather service returned invalid JSON: {e}") from e
