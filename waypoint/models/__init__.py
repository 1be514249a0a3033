"""
Models package
- Domain models (places, markers, routes, chat messages, weather)
- Agent events
- API schemas
"""

from .domain import (
    AgentKind,
    ChatMessage,
    LatLng,
    MapMarker,
    Place,
    PlaceCategory,
    TripRoute,
    WeatherForecast,
)
from .events import (
    AgentEvent,
    Error,
    MarkerAdded,
    PlacesFound,
    Processing,
    RouteCreated,
    StreamingChunk,
    StreamingComplete,
    WeatherReceived,
)
from .schemas import ChatRequest, ChatResponse, ChatHistoryResponse, MapStateResponse


__all__ = [
    "AgentKind",
    "ChatMessage",
    "LatLng",
    "MapMarker",
    "Place",
    "PlaceCategory",
    "TripRoute",
    "WeatherForecast",
    "AgentEvent",
    "Error",
    "MarkerAdded",
    "PlacesFound",
    "Processing",
    "RouteCreated",
    "StreamingChunk",
    "StreamingComplete",
    "WeatherReceived",
    "ChatRequest",
    "ChatResponse",
    "ChatHistoryResponse",
    "MapStateResponse",
]
