import logging
from typing import Any, Callable, Optional, Sequence

from waypoint.agent.callbacks import ToolTimingCallbackHandler
from waypoint.agent.registry import LocalTools, build_trip_registry, build_weather_registry
from waypoint.agent.session import AgentSession
from waypoint.config import settings
from waypoint.models.domain import AgentKind, ChatMessage
from waypoint.models.events import Error, Processing
from waypoint.tools.mcp_tools import RemoteToolProvider
from waypoint.utils.event_bus import EventBus
from waypoint.utils.tool_timings import pop_tool_timings

logger = logging.getLogger(__name__)


class AgentRepository:
    """
    Entry point for both assistants.

    Every chat() call runs a fresh AgentSession. The remote tool provider is
    owned here and shared by all trip-planning turns, so a failed connection
    leaves the trip assistant on local tools until reconnect_remote_tools().
    Streaming text reaches subscribers through the event bus; the final reply
    is also returned.
    """

    def __init__(
        self,
        event_bus: EventBus,
        local_tools: LocalTools,
        llm_factory: Callable[[], Any],
        remote_tools: Optional[RemoteToolProvider] = None,
        weather_max_iterations: int = settings.WEATHER_MAX_ITERATIONS,
        trip_max_iterations: int = settings.TRIP_MAX_ITERATIONS,
    ):
        self.event_bus = event_bus
        self.local_tools = local_tools
        self.llm_factory = llm_factory
        self.remote_tools = remote_tools
        self.weather_max_iterations = weather_max_iterations
        self.trip_max_iterations = trip_max_iterations
        self._llm = None
        self._timing_handler = ToolTimingCallbackHandler()

    @property
    def llm(self):
        if self._llm is None:
            self._llm = self.llm_factory()
        return self._llm

    async def reconnect_remote_tools(self) -> Optional[RemoteToolProvider]:
        """Close the current provider and replace it with a fresh, unconnected one."""
        old = self.remote_tools
        if old is None:
            return None
        self.remote_tools = old.reconnect()
        await old.aclose()
        logger.info(f"Remote tools will reconnect to {old.endpoint} on the next trip turn")
        return self.remote_tools

    async def create_session(self, kind: AgentKind) -> AgentSession:
        if kind is AgentKind.WEATHER:
            return AgentSession(
                kind=kind,
                llm=self.llm,
                registry=build_weather_registry(self.local_tools),
                event_bus=self.event_bus,
                max_iterations=self.weather_max_iterations,
                callbacks=[self._timing_handler],
            )

        registry = await build_trip_registry(self.local_tools, self.remote_tools)
        return AgentSession(
            kind=kind,
            llm=self.llm,
            registry=registry,
            event_bus=self.event_bus,
            max_iterations=self.trip_max_iterations,
            remote_tools_available=self.remote_tools is not None and self.remote_tools.available,
            callbacks=[self._timing_handler],
        )

    async def chat(
        self,
        message: str,
        kind: AgentKind,
        message_id: str,
        history: Sequence[ChatMessage] = (),
    ) -> str:
        """Run one turn. Never raises: faults become an Error event plus an apology reply."""
        self.event_bus.try_publish(Processing(is_processing=True))
        try:
            session = await self.create_session(kind)
            result = await session.run(message, message_id, history)
            logger.info(
                f"[{kind.value}] turn done in {result.iterations} iteration(s), tools={result.tool_calls}"
                + (" (iteration limit)" if result.hit_iteration_limit else "")
            )
            return result.text
        except Exception as e:
            logger.exception(f"[{kind.value}] agent error")
            detail = str(e) or type(e).__name__
            await self.event_bus.publish(Error(message=detail))
            return f"Sorry, I encountered an error: {detail}"
        finally:
            await self.event_bus.publish(Processing(is_processing=False))
            timings = pop_tool_timings(message_id)
            if timings:
                summary = ", ".join(f"{t['tool']}={t['duration']:.2f}s" for t in timings)
                logger.info(f"[{kind.value}] tool timings: {summary}")
