"""
Agent events

Side-effect notifications published by tools and the agent on the event bus.
Every variant carries a `type` literal so a subscriber can dispatch on it and
the HTTP event stream can serialise the union directly.
"""

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field

from waypoint.models.domain import MapMarker, Place, TripRoute, WeatherForecast


class WeatherReceived(BaseModel):
    type: Literal["weather_received"] = "weather_received"
    forecast: WeatherForecast


class PlacesFound(BaseModel):
    type: Literal["places_found"] = "places_found"
    places: List[Place]


class MarkerAdded(BaseModel):
    type: Literal["marker_added"] = "marker_added"
    marker: MapMarker


class RouteCreated(BaseModel):
    type: Literal["route_created"] = "route_created"
    route: TripRoute


class Processing(BaseModel):
    type: Literal["processing"] = "processing"
    is_processing: bool


class Error(BaseModel):
    type: Literal["error"] = "error"
    message: str


class StreamingChunk(BaseModel):
    type: Literal["streaming_chunk"] = "streaming_chunk"
    message_id: str
    text: str


class StreamingComplete(BaseModel):
    type: Literal["streaming_complete"] = "streaming_complete"
    message_id: str


AgentEvent = Annotated[
    Union[
        WeatherReceived,
        PlacesFound,
        MarkerAdded,
        RouteCreated,
        Processing,
        Error,
        StreamingChunk,
        StreamingComplete,
    ],
    Field(discriminator="type"),
]
