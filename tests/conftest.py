"""Pytest configuration and shared fixtures.

Provides in-memory stores, service doubles and the local
tool set wired to a fresh event bus.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from waypoint.agent.registry import LocalTools
from waypoint.models.domain import WeatherForecast
from waypoint.services.chat_store import InMemoryChatStore
from waypoint.services.location import StaticLocationService
from waypoint.utils.event_bus import EventBus
from waypoint.utils.marker_store import MarkerStore


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def warsaw_forecast() -> WeatherForecast:
    return WeatherForecast(
        location="Warsaw, Masovia, Poland",
        temperature=18.5,
        condition="Partly cloudy",
        humidity=65,
        wind_speed=12.3,
    )


@pytest.fixture
def event_bus() -> EventBus:
    """A bus large enough that awaited publishes never wait in tests."""
    return EventBus(buffer_size=256)


@pytest.fixture
def chat_store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture
def marker_store(chat_store) -> MarkerStore:
    return MarkerStore(chat_store)


@pytest.fixture
def weather_service(warsaw_forecast) -> MagicMock:
    service = MagicMock()
    service.get_weather = AsyncMock(return_value=warsaw_forecast)
    return service


@pytest.fixture
def location_service() -> StaticLocationService:
    return StaticLocationService(52.2297, 21.0122, accuracy=15.0)


@pytest.fixture
def local_tools(event_bus, marker_store, weather_service, location_service) -> LocalTools:
    return LocalTools.create(
        event_bus=event_bus,
        marker_store=marker_store,
        weather_service=weather_service,
        location_service=location_service,
    )
