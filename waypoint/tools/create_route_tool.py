import logging
from typing import List

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from waypoint.models.domain import TripRoute
from waypoint.models.events import RouteCreated
from waypoint.tools.geo import format_distance, format_duration, path_distance, walking_minutes
from waypoint.utils.event_bus import EventBus
from waypoint.utils.marker_store import MarkerStore

logger = logging.getLogger(__name__)


class CreateRouteInput(BaseModel):
    marker_ids: List[str] = Field(
        description="List of marker IDs to include in the route, in visiting order"
    )


def create_route_tool(event_bus: EventBus, marker_store: MarkerStore) -> StructuredTool:
    async def create_route(marker_ids: List[str]) -> str:
        if not marker_ids:
            return "Please provide at least one marker ID to create a route."

        # read the live list, not a copy taken when the tool was built
        markers_by_id = {m.id: m for m in marker_store.snapshot()}

        route_markers = [markers_by_id[i] for i in marker_ids if i in markers_by_id]
        missing_ids = [i for i in marker_ids if i not in markers_by_id]

        if not route_markers:
            available = ", ".join(markers_by_id) or "none"
            return f"No valid markers found. Available marker IDs: {available}"

        polyline = [m.to_lat_lng() for m in route_markers]
        route = TripRoute(markers=route_markers, polyline=polyline)

        marker_store.set_route(route)
        await event_bus.publish(RouteCreated(route=route))

        distance = path_distance(polyline)
        minutes = walking_minutes(distance)
        logger.info(f"Route created: {len(route_markers)} stops, {distance:.0f} m, missing={missing_ids}")

        lines = []
        if missing_ids:
            lines.append(
                f"Some markers not found: {', '.join(missing_ids)}. Creating route with available markers."
            )
        lines.append(f"Route created with {len(route_markers)} stops:")
        for index, marker in enumerate(route_markers, 1):
            lines.append(f"{index}. {marker.place.name}")
        lines.append("")
        lines.append(f"Estimated walking distance: {format_distance(distance)}")
        lines.append(f"Estimated walking time: {format_duration(minutes)}")
        return "\n".join(lines)

    return StructuredTool.from_function(
        coroutine=create_route,
        name="create_route",
        description="Create a route between markers on the map. Provide marker IDs in the order you want to visit them.",
        args_schema=CreateRouteInput,
    )
