import logging

from langchain_core.tools import StructuredTool
from pydantic import BaseModel

from waypoint.services.location import LocationService, LocationSuccess

logger = logging.getLogger(__name__)


class UserLocationInput(BaseModel):
    """No arguments."""


def create_user_location_tool(location_service: LocationService) -> StructuredTool:
    async def get_user_location() -> str:
        try:
            result = await location_service.get_current_location()
        except Exception as e:
            logger.exception("Location service raised")
            return f"Unable to get user location: Location error: {e}"

        if not isinstance(result, LocationSuccess):
            logger.info(f"User location unavailable: {result.reason.value}")
            return f"Unable to get user location: {result.message}"

        lines = [
            "User's current location:",
            f"- Latitude: {result.latitude}",
            f"- Longitude: {result.longitude}",
        ]
        if result.accuracy is not None:
            lines.append(f"- Accuracy: {int(result.accuracy)} meters")
        return "\n".join(lines)

    return StructuredTool.from_function(
        coroutine=get_user_location,
        name="get_user_location",
        description=(
            "Get the user's current GPS location. Returns latitude, longitude, and accuracy in meters. "
            "Use this to find places near the user."
        ),
        args_schema=UserLocationInput,
    )
