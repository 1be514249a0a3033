"""
Application wiring.

One AppContainer per process holds the event bus, stores, tools, agent
repository and the two screen controllers. Routers reach it through
get_container(), which tests replace with app.dependency_overrides.
"""

import logging
from functools import lru_cache
from typing import Any, Callable, Optional

from waypoint.agent.registry import LocalTools
from waypoint.agent.repository import AgentRepository
from waypoint.config import settings
from waypoint.controllers import ChatController, TripPlanController
from waypoint.services.chat_store import ChatScreen, ChatStore, create_chat_store
from waypoint.services.location import LocationService, create_location_service
from waypoint.services.weather_api import WeatherApiService
from waypoint.tools.mcp_tools import RemoteToolProvider
from waypoint.utils.conversation_memory import ChatRepository
from waypoint.utils.event_bus import EventBus
from waypoint.utils.marker_store import MarkerStore

logger = logging.getLogger(__name__)


class AppContainer:
    def __init__(
        self,
        llm_factory: Callable[[], Any],
        store: Optional[ChatStore] = None,
        weather_service: Optional[WeatherApiService] = None,
        location_service: Optional[LocationService] = None,
        remote_tools: Optional[RemoteToolProvider] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.event_bus = event_bus or EventBus(settings.EVENT_BUFFER_SIZE)
        self.store = store if store is not None else create_chat_store(settings.DATA_DIR)
        self.marker_store = MarkerStore(self.store)
        self.chat_repository = ChatRepository(self.store)

        self.local_tools = LocalTools.create(
            event_bus=self.event_bus,
            marker_store=self.marker_store,
            weather_service=weather_service or WeatherApiService(),
            location_service=location_service or create_location_service(),
        )
        self.agent_repository = AgentRepository(
            event_bus=self.event_bus,
            local_tools=self.local_tools,
            llm_factory=llm_factory,
            remote_tools=remote_tools,
        )

        self.weather_controller = ChatController(self.agent_repository, self.chat_repository, self.event_bus)
        self.trip_controller = TripPlanController(
            self.agent_repository, self.chat_repository, self.event_bus, self.marker_store
        )

    def controller(self, screen: ChatScreen) -> ChatController:
        if screen is ChatScreen.WEATHER:
            return self.weather_controller
        return self.trip_controller

    async def startup(self) -> None:
        self.weather_controller.start()
        self.trip_controller.start()
        logger.info("Controllers listening on the event bus")

    async def shutdown(self) -> None:
        await self.weather_controller.stop()
        await self.trip_controller.stop()
        if self.agent_repository.remote_tools is not None:
            await self.agent_repository.remote_tools.aclose()
        logger.info("Application container shut down")


@lru_cache()
def get_container() -> AppContainer:
    from waypoint.models.chat_models import get_llm

    return AppContainer(
        llm_factory=get_llm,
        remote_tools=RemoteToolProvider(f"{settings.MCP_HOST}/sse"),
    )
