"""Tests for tool registry assembly."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.tools import StructuredTool

from waypoint.agent.registry import ToolRegistry, ToolRegistryError, build_trip_registry, build_weather_registry

LOCAL_TRIP_TOOLS = ["get_weather", "get_user_location", "find_places", "add_marker", "create_route"]


def remote_tool(name: str) -> StructuredTool:
    async def call(**arguments) -> str:
        return f"{name} called"

    return StructuredTool(
        name=name,
        description=f"Remote {name}",
        args_schema={"type": "object", "properties": {"query": {"type": "string"}}},
        coroutine=call,
    )


def remote_provider(*tools, available: bool = True) -> MagicMock:
    provider = MagicMock()
    provider.get_tools = AsyncMock(return_value=list(tools))
    provider.available = available
    return provider


class TestToolRegistry:

    def test_rejects_duplicate_names(self, local_tools):
        registry = ToolRegistry([local_tools.weather])

        with pytest.raises(ToolRegistryError, match="get_weather"):
            registry.add(local_tools.weather)

    def test_lookup(self, local_tools):
        registry = ToolRegistry([local_tools.weather, local_tools.add_marker])

        assert registry.get("add_marker") is local_tools.add_marker
        assert registry.get("teleport") is None
        assert "get_weather" in registry
        assert len(registry) == 2

    def test_describe_numbers_tools(self, local_tools):
        text = ToolRegistry([local_tools.weather, local_tools.create_route]).describe()

        assert text.startswith("AVAILABLE TOOLS:")
        assert "1. get_weather" in text
        assert "2. create_route" in text
        assert local_tools.create_route.description in text

    def test_descriptors_carry_argument_schema(self, local_tools):
        (descriptor,) = ToolRegistry([local_tools.weather]).descriptors()

        assert descriptor.name == "get_weather"
        assert "location" in descriptor.args_schema["properties"]


class TestBuilders:

    def test_weather_registry_has_only_weather(self, local_tools):
        assert build_weather_registry(local_tools).names == ["get_weather"]

    @pytest.mark.asyncio
    async def test_trip_registry_without_remote(self, local_tools):
        registry = await build_trip_registry(local_tools, None)

        assert registry.names == LOCAL_TRIP_TOOLS

    @pytest.mark.asyncio
    async def test_trip_registry_merges_remote_tools(self, local_tools):
        provider = remote_provider(remote_tool("maps_search_places"), remote_tool("maps_geocode"))

        registry = await build_trip_registry(local_tools, provider)

        assert registry.names == LOCAL_TRIP_TOOLS + ["maps_search_places", "maps_geocode"]

    @pytest.mark.asyncio
    async def test_local_tool_wins_name_clash(self, local_tools):
        provider = remote_provider(remote_tool("add_marker"), remote_tool("maps_search_places"))

        registry = await build_trip_registry(local_tools, provider)

        assert registry.get("add_marker") is local_tools.add_marker
        assert registry.names.count("add_marker") == 1
        assert "maps_search_places" in registry
