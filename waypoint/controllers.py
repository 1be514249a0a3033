"""
Screen controllers

Headless state holders for the two chat screens. A controller owns the
screen's single-flight send path and a background listener that applies
bus events (streamed text, errors, markers, routes) to the repositories.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from waypoint.agent.repository import AgentRepository
from waypoint.models.domain import AgentKind
from waypoint.models.events import (
    AgentEvent,
    Error,
    MarkerAdded,
    Processing,
    RouteCreated,
    StreamingChunk,
    StreamingComplete,
)
from waypoint.services.chat_store import ChatScreen
from waypoint.utils.conversation_memory import ChatRepository
from waypoint.utils.event_bus import EventBus, Subscription
from waypoint.utils.marker_store import MarkerStore

logger = logging.getLogger(__name__)


@dataclass
class ChatTurn:
    message_id: str
    content: str


class ChatController:
    screen = ChatScreen.WEATHER
    kind = AgentKind.WEATHER

    def __init__(
        self,
        agent_repository: AgentRepository,
        chat_repository: ChatRepository,
        event_bus: EventBus,
    ):
        self.agent_repository = agent_repository
        self.chat_repository = chat_repository
        self.event_bus = event_bus
        self.is_loading = False
        self._in_flight = False
        self.error: Optional[str] = None
        self._subscription: Optional[Subscription] = None
        self._listener: Optional[asyncio.Task] = None

    @property
    def messages(self):
        return self.chat_repository.get_messages(self.screen)

    def start(self) -> None:
        if self._listener is not None:
            return
        self._subscription = self.event_bus.subscribe()
        self._listener = asyncio.create_task(self._listen(self._subscription))

    async def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            self._listener = None

    async def _listen(self, subscription: Subscription) -> None:
        async for event in subscription:
            try:
                self.handle_event(event)
            except Exception:
                logger.exception(f"[{self.screen.value}] failed to apply {event.type}")

    async def send_message(self, text: str) -> Optional[ChatTurn]:
        """Send one user message. Returns None for blank input or while a turn is already running."""
        text = text.strip()
        if not text or self._in_flight:
            return None

        # history is taken before the new message is added
        history = [m for m in self.chat_repository.get_messages(self.screen) if not m.is_streaming]
        self._in_flight = True
        self.is_loading = True
        self.error = None

        self.chat_repository.add_message(self.screen, text, is_from_user=True)
        placeholder = self.chat_repository.add_streaming_message(self.screen)

        try:
            reply = await self.agent_repository.chat(text, self.kind, placeholder.id, history)
        except Exception as e:
            logger.exception(f"[{self.screen.value}] chat failed")
            self.error = str(e)
            reply = f"Sorry, something went wrong: {e}"
        finally:
            self._in_flight = False
            self.is_loading = False

        self.chat_repository.update_message(self.screen, placeholder.id, reply, append=False, is_streaming=False)
        return ChatTurn(message_id=placeholder.id, content=reply)

    @property
    def busy(self) -> bool:
        return self._in_flight

    def clear_error(self) -> None:
        self.error = None

    def clear_chat(self) -> None:
        self.chat_repository.clear_messages(self.screen)

    def handle_event(self, event: AgentEvent) -> None:
        if isinstance(event, StreamingChunk):
            self.chat_repository.append_chunk(self.screen, event.message_id, event.text)
        elif isinstance(event, StreamingComplete):
            self.chat_repository.complete_streaming(self.screen, event.message_id)
        elif isinstance(event, Processing):
            self.is_loading = event.is_processing
        elif isinstance(event, Error):
            self.error = event.message


class TripPlanController(ChatController):
    screen = ChatScreen.TRIP_PLAN
    kind = AgentKind.TRIP_PLAN

    def __init__(
        self,
        agent_repository: AgentRepository,
        chat_repository: ChatRepository,
        event_bus: EventBus,
        marker_store: MarkerStore,
    ):
        super().__init__(agent_repository, chat_repository, event_bus)
        self.marker_store = marker_store

    def handle_event(self, event: AgentEvent) -> None:
        if isinstance(event, MarkerAdded):
            # the tool already wrote it; add() ignores known ids
            self.marker_store.add(event.marker)
        elif isinstance(event, RouteCreated):
            self.marker_store.set_route(event.route)
        else:
            super().handle_event(event)

    def select_marker(self, marker_id: str) -> None:
        self.marker_store.select(marker_id)

    def clear_selection(self) -> None:
        self.marker_store.clear_selection()

    def clear_markers(self) -> None:
        self.marker_store.clear()
        self.marker_store.clear_route()
