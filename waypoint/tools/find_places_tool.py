import logging
import uuid
from typing import List, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from waypoint.models.domain import Place, PlaceCategory
from waypoint.models.events import PlacesFound
from waypoint.tools.geo import approximate_distance
from waypoint.utils.event_bus import EventBus

logger = logging.getLogger(__name__)

# Results are limited to this range whatever radius the model asks for
MAX_SEARCH_RADIUS_M = 5000.0
MAX_RESULTS = 5

# (name, description, latitude, longitude, category)
WARSAW_PLACES = [
    ("Palace of Culture and Science", "Iconic Stalin-era skyscraper, the tallest building in Poland",
     52.2319, 21.0067, PlaceCategory.LANDMARK),
    ("Old Town Market Square", "Historic heart of Warsaw, UNESCO World Heritage Site",
     52.2496, 21.0122, PlaceCategory.LANDMARK),
    ("Łazienki Park", "Beautiful royal park with the Palace on the Isle",
     52.2152, 21.0355, PlaceCategory.PARK),
    ("Warsaw Uprising Museum", "Museum dedicated to the Warsaw Uprising of 1944",
     52.2324, 20.9810, PlaceCategory.MUSEUM),
    ("POLIN Museum", "Museum of the History of Polish Jews",
     52.2496, 20.9932, PlaceCategory.MUSEUM),
    ("Copernicus Science Centre", "Interactive science museum with planetarium",
     52.2418, 21.0285, PlaceCategory.ENTERTAINMENT),
    ("Złote Tarasy", "Modern shopping and entertainment complex",
     52.2298, 21.0023, PlaceCategory.ENTERTAINMENT),
    ("Zapiecek", "Traditional Polish restaurant famous for pierogi",
     52.2501, 21.0118, PlaceCategory.RESTAURANT),
    ("U Fukiera", "Historic restaurant in Old Town, Polish cuisine",
     52.2494, 21.0124, PlaceCategory.RESTAURANT),
    ("Saxon Garden", "Beautiful baroque garden in central Warsaw",
     52.2406, 21.0119, PlaceCategory.PARK),
]


class FindPlacesInput(BaseModel):
    latitude: float = Field(description="Latitude of the center point to search from")
    longitude: float = Field(description="Longitude of the center point to search from")
    radius: int = Field(default=1000, description="Search radius in meters (default 1000)")
    category: Optional[str] = Field(
        default=None,
        description="Optional category filter: RESTAURANT, MUSEUM, PARK, LANDMARK, ENTERTAINMENT, OTHER",
    )


def search_places(latitude: float, longitude: float, category: Optional[str] = None) -> List[Place]:
    """
    Filter the place corpus by category and distance from the given point.
    An unrecognised category means no category filter.
    """
    wanted = PlaceCategory.parse(category)
    places = []
    for name, description, lat, lon, place_category in WARSAW_PLACES:
        if wanted is not None and place_category != wanted:
            continue
        if approximate_distance(latitude, longitude, lat, lon) > MAX_SEARCH_RADIUS_M:
            continue
        places.append(Place(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            latitude=lat,
            longitude=lon,
            category=place_category,
        ))
        if len(places) == MAX_RESULTS:
            break
    return places


def create_find_places_tool(event_bus: EventBus) -> StructuredTool:
    async def find_places(
        latitude: float,
        longitude: float,
        radius: int = 1000,
        category: Optional[str] = None,
    ) -> str:
        places = search_places(latitude, longitude, category)
        logger.info(f"find_places({latitude}, {longitude}, category={category}) -> {len(places)} places")

        await event_bus.publish(PlacesFound(places=places))

        if not places:
            return "No places found matching your criteria."

        lines = [f"Found {len(places)} places:"]
        for place in places:
            lines.append(f"- {place.name} ({place.category.value}): {place.description}")
            lines.append(f"  Location: {place.latitude}, {place.longitude}")
        return "\n".join(lines)

    return StructuredTool.from_function(
        coroutine=find_places,
        name="find_places",
        description="Find interesting places near a location. Returns a list of places with their details.",
        args_schema=FindPlacesInput,
    )
