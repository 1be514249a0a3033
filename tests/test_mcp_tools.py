"""Tests for remote (MCP) tool discovery."""

import asyncio
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from waypoint.tools.mcp_tools import ConnectionState, RemoteToolProvider

SEARCH_TOOL = SimpleNamespace(
    name="maps_search_places",
    description="Search for places using Google Places API",
    inputSchema={
        "type": "object",
        "properties": {"query": {"type": "string"}},
        "required": ["query"],
    },
)


def text_result(text: str, is_error: bool = False):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)], isError=is_error)


class FakeSession:
    def __init__(self, tools):
        self.list_tools = AsyncMock(return_value=SimpleNamespace(tools=tools))
        self.call_tool = AsyncMock(return_value=text_result('{"places": []}'))


def recording_connector(session, endpoints):
    @asynccontextmanager
    async def connect(endpoint):
        endpoints.append(endpoint)
        yield session

    return connect


def failing_connector(endpoints):
    @asynccontextmanager
    async def connect(endpoint):
        endpoints.append(endpoint)
        raise ConnectionRefusedError("connection refused")
        yield

    return connect


def hanging_connector():
    @asynccontextmanager
    async def connect(endpoint):
        await asyncio.sleep(3600)
        yield

    return connect


class TestRemoteToolProvider:

    @pytest.mark.asyncio
    async def test_discovers_and_wraps_tools(self):
        session = FakeSession([SEARCH_TOOL])
        endpoints = []
        provider = RemoteToolProvider("http://mcp/sse", connector=recording_connector(session, endpoints))

        try:
            tools = await provider.get_tools()

            assert provider.state is ConnectionState.CONNECTED
            assert provider.available
            assert [t.name for t in tools] == ["maps_search_places"]
            assert tools[0].description == SEARCH_TOOL.description

            result = await tools[0].ainvoke({"query": "pizza in Warsaw"})
            assert result == '{"places": []}'
            session.call_tool.assert_awaited_once_with(
                "maps_search_places", arguments={"query": "pizza in Warsaw"}
            )
        finally:
            await provider.aclose()

        assert endpoints == ["http://mcp/sse"]

    @pytest.mark.asyncio
    async def test_connects_only_once(self):
        endpoints = []
        provider = RemoteToolProvider("http://mcp/sse", connector=recording_connector(FakeSession([SEARCH_TOOL]), endpoints))

        try:
            await provider.get_tools()
            await provider.get_tools()
        finally:
            await provider.aclose()

        assert len(endpoints) == 1

    @pytest.mark.asyncio
    async def test_remote_error_is_returned_as_text(self):
        session = FakeSession([SEARCH_TOOL])
        session.call_tool.return_value = text_result("quota exceeded", is_error=True)
        provider = RemoteToolProvider("http://mcp/sse", connector=recording_connector(session, []))

        try:
            (tool,) = await provider.get_tools()
            result = await tool.ainvoke({"query": "museums"})
        finally:
            await provider.aclose()

        assert result == "quota exceeded"

    @pytest.mark.asyncio
    async def test_failed_connection_stays_degraded(self):
        endpoints = []
        provider = RemoteToolProvider("http://mcp/sse", connector=failing_connector(endpoints))

        assert await provider.get_tools() == []
        assert await provider.get_tools() == []

        assert provider.state is ConnectionState.FAILED
        assert not provider.available
        assert "connection refused" in provider.last_error
        assert len(endpoints) == 1

    @pytest.mark.asyncio
    async def test_connect_timeout(self):
        provider = RemoteToolProvider("http://mcp/sse", connector=hanging_connector(), connect_timeout=0.05)

        assert await provider.get_tools() == []
        assert provider.state is ConnectionState.FAILED

    @pytest.mark.asyncio
    async def test_reconnect_returns_fresh_provider(self):
        endpoints = []
        failed = RemoteToolProvider("http://mcp/sse", connector=failing_connector(endpoints))
        await failed.get_tools()

        fresh = failed.reconnect()

        assert fresh is not failed
        assert fresh.state is ConnectionState.UNCONNECTED
        assert fresh.endpoint == failed.endpoint
        await fresh.get_tools()
        assert len(endpoints) == 2
