import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from langchain_core.tools import BaseTool

from waypoint.services.location import LocationService
from waypoint.services.weather_api import WeatherApiService
from waypoint.tools import (
    RemoteToolProvider,
    create_add_marker_tool,
    create_find_places_tool,
    create_route_tool,
    create_user_location_tool,
    create_weather_tool,
)
from waypoint.utils.event_bus import EventBus
from waypoint.utils.marker_store import MarkerStore

logger = logging.getLogger(__name__)


class ToolRegistryError(Exception):
    """Invalid registry contents (e.g. two tools with the same name)."""


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    args_schema: Dict[str, Any]


class ToolRegistry:
    """
    Name -> tool lookup for one agent session. Names are unique; unknown
    names resolve to None so the caller can report "not available".
    """

    def __init__(self, tools: Iterable[BaseTool] = ()):
        self._tools: Dict[str, BaseTool] = {}
        for tool in tools:
            self.add(tool)

    def add(self, tool: BaseTool) -> None:
        if tool.name in self._tools:
            raise ToolRegistryError(f"Duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[BaseTool]:
        return self._tools.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def tools(self) -> List[BaseTool]:
        return list(self._tools.values())

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def descriptors(self) -> List[ToolDescriptor]:
        descriptors = []
        for tool in self._tools.values():
            schema = tool.tool_call_schema
            args_schema = dict(schema) if isinstance(schema, dict) else schema.model_json_schema()
            descriptors.append(ToolDescriptor(tool.name, tool.description, args_schema))
        return descriptors

    def describe(self) -> str:
        """Human-readable tool list for the system prompt."""
        lines = ["AVAILABLE TOOLS:", ""]
        for index, tool in enumerate(self._tools.values(), 1):
            lines.append(f"{index}. {tool.name}")
            lines.append(f"   {tool.description}")
            lines.append("")
        return "\n".join(lines)


@dataclass
class LocalTools:
    """Local tools shared by every session; built once per application."""
    weather: BaseTool
    user_location: BaseTool
    find_places: BaseTool
    add_marker: BaseTool
    create_route: BaseTool

    @classmethod
    def create(
        cls,
        event_bus: EventBus,
        marker_store: MarkerStore,
        weather_service: WeatherApiService,
        location_service: LocationService,
    ) -> "LocalTools":
        return cls(
            weather=create_weather_tool(weather_service, event_bus),
            user_location=create_user_location_tool(location_service),
            find_places=create_find_places_tool(event_bus),
            add_marker=create_add_marker_tool(event_bus, marker_store),
            create_route=create_route_tool(event_bus, marker_store),
        )


def build_weather_registry(local: LocalTools) -> ToolRegistry:
    return ToolRegistry([local.weather])


async def build_trip_registry(local: LocalTools, remote: Optional[RemoteToolProvider]) -> ToolRegistry:
    """
    Local trip tools plus whatever the remote provider offers. A remote tool
    whose name collides with a local one is skipped.
    """
    registry = ToolRegistry([
        local.weather,
        local.user_location,
        local.find_places,
        local.add_marker,
        local.create_route,
    ])

    remote_tools = await remote.get_tools() if remote is not None else []
    for tool in remote_tools:
        if tool.name in registry:
            logger.warning(f"Remote tool '{tool.name}' shadows a local tool, skipping it")
            continue
        registry.add(tool)

    if remote_tools:
        logger.info(f"Trip registry: {registry.names}")
    else:
        logger.warning("Remote map tools NOT available - only local tools will work")
    return registry
