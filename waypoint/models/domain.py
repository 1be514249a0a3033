from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PlaceCategory(str, Enum):
    RESTAURANT = "RESTAURANT"
    MUSEUM = "MUSEUM"
    PARK = "PARK"
    LANDMARK = "LANDMARK"
    ENTERTAINMENT = "ENTERTAINMENT"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PlaceCategory"]:
        """Case-insensitive lookup, None when the value is not a known category."""
        if not value:
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class LatLng(BaseModel):
    latitude: float
    longitude: float


class Place(BaseModel):
    """
    A point of interest. Immutable once created.
    """
    id: str
    name: str
    description: str
    latitude: float
    longitude: float
    category: PlaceCategory = PlaceCategory.OTHER

    model_config = {"frozen": True}


class MapMarker(BaseModel):
    """
    A place shown on the map. The marker id is the place id.
    """
    id: str
    place: Place
    is_selected: bool = False

    @classmethod
    def from_place(cls, place: Place) -> "MapMarker":
        return cls(id=place.id, place=place)

    def to_lat_lng(self) -> LatLng:
        return LatLng(latitude=self.place.latitude, longitude=self.place.longitude)


class TripRoute(BaseModel):
    """
    Ordered stops plus the straight-line polyline between them.
    """
    markers: List[MapMarker]
    polyline: List[LatLng] = Field(default_factory=list)


class WeatherForecast(BaseModel):
    location: str
    temperature: float
    condition: str
    humidity: int
    wind_speed: float


class ChatMessage(BaseModel):
    """
    A single chat bubble. Content is mutable while is_streaming is True.
    """
    id: str
    content: str
    is_from_user: bool
    timestamp: int
    is_streaming: bool = False


class AgentKind(str, Enum):
    WEATHER = "weather"
    TRIP_PLAN = "trip_plan"
