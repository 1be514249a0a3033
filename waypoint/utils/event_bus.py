"""In-memory broadcast event bus.

Tools and the agent publish AgentEvents here; screen controllers and the
HTTP event stream subscribe. Every subscriber owns a bounded queue, so one
slow subscriber never blocks delivery to the others beyond its own buffer.

Two publish policies are offered, chosen at each publish site:
- ``publish``: awaited, never dropped. Waits for buffer room in every open
  subscriber queue. Closing a subscription releases a publisher waiting on it.
  Used where delivery is part of a guaranteed sequence (marker added, route
  created, streaming complete).
- ``try_publish``: fire-and-forget. Subscribers with a full buffer miss the
  event. Used for streaming chunks and other best-effort events.

Delivery order to a given subscriber matches publish order. Nothing is
guaranteed across subscribers.

Example:
    bus = EventBus(buffer_size=64)

    async with bus.subscribe() as events:
        async for event in events:
            handle(event)

    await bus.publish(MarkerAdded(marker=marker))
    bus.try_publish(StreamingChunk(message_id="m1", text="Hel"))
"""

import asyncio
import logging
from typing import Optional, Set

from waypoint.models.events import AgentEvent

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 64


class Subscription:
    """One subscriber's queue. Iterate it to receive events; close it to detach."""

    def __init__(self, bus: "EventBus", buffer_size: int) -> None:
        self._bus = bus
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=buffer_size)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> AgentEvent:
        return await self._queue.get()

    def get_nowait(self) -> Optional[AgentEvent]:
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def close(self) -> None:
        if not self.closed:
            self._closed.set()
            self._bus._detach(self)

    async def _put(self, event: AgentEvent) -> None:
        """Wait for buffer room, giving up as soon as the subscription is closed."""
        if self.closed:
            return
        try:
            self._queue.put_nowait(event)
            return
        except asyncio.QueueFull:
            pass

        put = asyncio.ensure_future(self._queue.put(event))
        closed = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({put, closed}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            put.cancel()
            closed.cancel()

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> AgentEvent:
        if self.closed:
            raise StopAsyncIteration
        return await self._queue.get()

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class EventBus:
    """Bounded broadcast channel for a single asyncio loop."""

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self.buffer_size = buffer_size
        self._subscribers: Set[Subscription] = set()
        self._dropped = 0
        logger.debug(f"EventBus initialized (buffer_size={buffer_size})")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def dropped_count(self) -> int:
        """Number of (event, subscriber) deliveries lost to full buffers."""
        return self._dropped

    def subscribe(self) -> Subscription:
        """Attach a new subscriber. Only events published afterwards are seen."""
        subscription = Subscription(self, self.buffer_size)
        self._subscribers.add(subscription)
        logger.debug(f"Subscriber attached (total={len(self._subscribers)})")
        return subscription

    def _detach(self, subscription: Subscription) -> None:
        self._subscribers.discard(subscription)
        logger.debug(f"Subscriber detached (total={len(self._subscribers)})")

    async def publish(self, event: AgentEvent) -> None:
        """Deliver to every open subscriber, waiting for buffer room where needed."""
        for subscription in list(self._subscribers):
            await subscription._put(event)

    def try_publish(self, event: AgentEvent) -> bool:
        """Deliver without waiting. False if at least one full buffer dropped the event."""
        delivered = True
        for subscription in list(self._subscribers):
            if subscription.closed:
                continue
            try:
                subscription._queue.put_nowait(event)
            except asyncio.QueueFull:
                delivered = False
                self._dropped += 1
                logger.debug(f"Dropped {event.type} for a full subscriber buffer")
        return delivered
