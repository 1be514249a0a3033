"""
User location providers.

Device GPS is out of reach for a server process, so two providers stand in
for it: a fixed position from configuration and an IP geolocation lookup.
Both report failures as a LocationFailure value rather than raising.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import requests

from waypoint.config import settings

logger = logging.getLogger(__name__)


class LocationErrorReason(str, Enum):
    UNSUPPORTED = "unsupported"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    FAILED = "failed"


@dataclass(frozen=True)
class LocationSuccess:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class LocationFailure:
    reason: LocationErrorReason
    detail: str = ""

    @property
    def message(self) -> str:
        if self.reason is LocationErrorReason.UNSUPPORTED:
            return "Location services not supported on this device"
        if self.reason is LocationErrorReason.NOT_FOUND:
            return "Could not determine location"
        if self.reason is LocationErrorReason.PERMISSION_DENIED:
            return "Location permission denied. Please grant location permission in Settings."
        return f"Failed to get location: {self.detail}"


LocationResult = Union[LocationSuccess, LocationFailure]


class LocationService:
    async def get_current_location(self) -> LocationResult:
        raise NotImplementedError


class StaticLocationService(LocationService):
    """Always reports the configured position (or UNSUPPORTED when none is configured)."""

    def __init__(self, latitude: Optional[float], longitude: Optional[float], accuracy: Optional[float] = None):
        self.latitude = latitude
        self.longitude = longitude
        self.accuracy = accuracy

    async def get_current_location(self) -> LocationResult:
        if self.latitude is None or self.longitude is None:
            return LocationFailure(LocationErrorReason.UNSUPPORTED)
        return LocationSuccess(self.latitude, self.longitude, self.accuracy)


class IpGeolocationService(LocationService):
    """Approximate position of the server's public IP (ip-api.com response format)."""

    # city-level resolution
    APPROXIMATE_ACCURACY_M = 5000.0

    def __init__(self, url: str = settings.IP_GEOLOCATION_URL, timeout: float = settings.HTTP_TIMEOUT):
        self.url = url
        self.timeout = timeout

    async def get_current_location(self) -> LocationResult:
        return await asyncio.to_thread(self._lookup)

    def _lookup(self) -> LocationResult:
        try:
            response = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"IP geolocation request failed: {e}")
            return LocationFailure(LocationErrorReason.FAILED, str(e))

        if response.status_code in (401, 403):
            return LocationFailure(LocationErrorReason.PERMISSION_DENIED)
        if response.status_code != 200:
            return LocationFailure(LocationErrorReason.FAILED, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            return LocationFailure(LocationErrorReason.FAILED, f"invalid response: {e}")

        if data.get("status") == "fail" or "lat" not in data or "lon" not in data:
            return LocationFailure(LocationErrorReason.NOT_FOUND)

        return LocationSuccess(float(data["lat"]), float(data["lon"]), self.APPROXIMATE_ACCURACY_M)


def create_location_service() -> LocationService:
    if settings.LOCATION_PROVIDER == "ip":
        return IpGeolocationService()
    return StaticLocationService(settings.DEFAULT_LATITUDE, settings.DEFAULT_LONGITUDE)
