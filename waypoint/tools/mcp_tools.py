"""
Remote map tools discovered from an MCP server over SSE.

A RemoteToolProvider connects at most once. Its connection state is
explicit: UNCONNECTED until the first get_tools() call, then CONNECTED with
a cached tool list, or FAILED. A failed provider stays degraded (returns no
tools) until a new provider is created with reconnect().
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncContextManager, AsyncIterator, Callable, List, Optional

from langchain_core.tools import BaseTool, StructuredTool, ToolException
from mcp import ClientSession
from mcp.client.sse import sse_client

from waypoint.config import settings

logger = logging.getLogger(__name__)

Connector = Callable[[str], AsyncContextManager[Any]]


class ConnectionState(str, Enum):
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    FAILED = "failed"


@asynccontextmanager
async def open_mcp_session(endpoint: str) -> AsyncIterator[ClientSession]:
    async with sse_client(endpoint, timeout=settings.MCP_CONNECT_TIMEOUT) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            yield session


def _result_text(result: Any) -> str:
    return "\n".join(
        content.text for content in (result.content or []) if getattr(content, "type", None) == "text"
    )


class RemoteToolProvider:
    def __init__(
        self,
        endpoint: str,
        connector: Connector = open_mcp_session,
        connect_timeout: float = settings.MCP_CONNECT_TIMEOUT,
    ):
        self.endpoint = endpoint
        self.connect_timeout = connect_timeout
        self.state = ConnectionState.UNCONNECTED
        self.last_error: Optional[str] = None
        self._connector = connector
        self._tools: List[BaseTool] = []
        self._lock = asyncio.Lock()
        self._runner: Optional[asyncio.Task] = None
        self._shutdown: Optional[asyncio.Event] = None

    @property
    def available(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def get_tools(self) -> List[BaseTool]:
        """Connect on first use; later calls reuse the cached result (or stay empty after a failure)."""
        async with self._lock:
            if self.state is ConnectionState.UNCONNECTED:
                await self._connect()
        return list(self._tools)

    def reconnect(self) -> "RemoteToolProvider":
        """A fresh, unconnected provider for the same endpoint."""
        return RemoteToolProvider(self.endpoint, self._connector, self.connect_timeout)

    async def aclose(self) -> None:
        if self._shutdown is not None:
            self._shutdown.set()
        if self._runner is not None:
            try:
                await self._runner
            except asyncio.CancelledError:
                pass
            self._runner = None

    async def _connect(self) -> None:
        loop = asyncio.get_running_loop()
        ready: asyncio.Future = loop.create_future()
        self._shutdown = asyncio.Event()
        self._runner = asyncio.create_task(self._hold_connection(ready))

        try:
            tools = await asyncio.wait_for(ready, self.connect_timeout)
        except Exception as e:
            self.state = ConnectionState.FAILED
            self.last_error = str(e) or type(e).__name__
            self._runner.cancel()
            logger.warning(f"Failed to connect to MCP server at {self.endpoint}: {self.last_error}")
            return

        self._tools = tools
        self.state = ConnectionState.CONNECTED
        logger.info(f"MCP tools connected at {self.endpoint}: {[t.name for t in tools]}")

    async def _hold_connection(self, ready: asyncio.Future) -> None:
        # The connection context is entered and exited in this task only.
        try:
            async with self._connector(self.endpoint) as session:
                listing = await session.list_tools()
                tools = [self._wrap(session, remote_tool) for remote_tool in listing.tools]
                if not ready.done():
                    ready.set_result(tools)
                await self._shutdown.wait()
        except Exception as e:
            if not ready.done():
                ready.set_exception(e)
            else:
                logger.warning(f"MCP connection to {self.endpoint} closed: {e}")

    @staticmethod
    def _wrap(session: Any, remote_tool: Any) -> StructuredTool:
        name = remote_tool.name

        async def call_remote(**arguments: Any) -> str:
            try:
                result = await session.call_tool(name, arguments=arguments)
            except Exception as e:
                raise ToolException(f"Remote tool '{name}' failed: {e}") from e
            text = _result_text(result)
            if getattr(result, "isError", False):
                raise ToolException(text or f"Remote tool '{name}' reported an error")
            return text

        return StructuredTool(
            name=name,
            description=remote_tool.description or "",
            args_schema=remote_tool.inputSchema or {"type": "object", "properties": {}},
            coroutine=call_remote,
            handle_tool_error=True,
        )
