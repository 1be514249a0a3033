"""
Services package
- Open-Meteo weather client
- User location providers
- Chat / marker persistence
"""

from .weather_api import WeatherApiService, WeatherServiceError, LocationNotFoundError
from .location import (
    LocationService,
    LocationResult,
    LocationSuccess,
    LocationFailure,
    LocationErrorReason,
    StaticLocationService,
    IpGeolocationService,
    create_location_service,
)
from .chat_store import (
    ChatScreen,
    ChatStore,
    ChatStoreError,
    InMemoryChatStore,
    JsonFileChatStore,
    create_chat_store,
)

__all__ = [
    "WeatherApiService",
    "WeatherServiceError",
    "LocationNotFoundError",
    "LocationService",
    "LocationResult",
    "LocationSuccess",
    "LocationFailure",
    "LocationErrorReason",
    "StaticLocationService",
    "IpGeolocationService",
    "create_location_service",
    "ChatScreen",
    "ChatStore",
    "ChatStoreError",
    "InMemoryChatStore",
    "JsonFileChatStore",
    "create_chat_store",
]
