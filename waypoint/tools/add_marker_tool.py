import logging
import uuid

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from waypoint.models.domain import MapMarker, Place, PlaceCategory
from waypoint.models.events import MarkerAdded
from waypoint.utils.event_bus import EventBus
from waypoint.utils.marker_store import MarkerStore

logger = logging.getLogger(__name__)


class AddMarkerInput(BaseModel):
    name: str = Field(description="Name of the place")
    description: str = Field(description="Description of the place")
    latitude: float = Field(description="Latitude coordinate")
    longitude: float = Field(description="Longitude coordinate")
    category: str = Field(
        default="OTHER",
        description="Category: RESTAURANT, MUSEUM, PARK, LANDMARK, ENTERTAINMENT, OTHER",
    )


def create_add_marker_tool(event_bus: EventBus, marker_store: MarkerStore) -> StructuredTool:
    """
    The marker is written to the store before the tool returns, so a
    create_route call later in the same turn already sees it.
    """

    async def add_marker(
        name: str,
        description: str,
        latitude: float,
        longitude: float,
        category: str = "OTHER",
    ) -> str:
        place = Place(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            latitude=latitude,
            longitude=longitude,
            category=PlaceCategory.parse(category) or PlaceCategory.OTHER,
        )
        marker = MapMarker.from_place(place)

        marker_store.add(marker)
        await event_bus.publish(MarkerAdded(marker=marker))
        logger.info(f"Marker '{name}' placed at ({latitude}, {longitude}) as {place.category.value}")

        return f"Added marker for '{name}' (id: {marker.id}) at coordinates ({latitude}, {longitude})"

    return StructuredTool.from_function(
        coroutine=add_marker,
        name="add_marker",
        description="Add a marker to the map for a place. Use this after finding places to show them on the map.",
        args_schema=AddMarkerInput,
    )
