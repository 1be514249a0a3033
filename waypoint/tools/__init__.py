"""
Tools package
- LangChain tools exposed to the agents
- Remote (MCP) tool discovery
"""

from .weather_tool import create_weather_tool
from .location_tool import create_user_location_tool
from .find_places_tool import create_find_places_tool
from .add_marker_tool import create_add_marker_tool
from .create_route_tool import create_route_tool
from .mcp_tools import RemoteToolProvider, ConnectionState

__all__ = [
    "create_weather_tool",
    "create_user_location_tool",
    "create_find_places_tool",
    "create_add_marker_tool",
    "create_route_tool",
    "RemoteToolProvider",
    "ConnectionState",
]
