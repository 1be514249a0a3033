"""Tests for the broadcast event bus."""

import asyncio

import pytest

from waypoint.models.events import Processing, StreamingChunk, StreamingComplete
from waypoint.utils.event_bus import EventBus

from tests.fakes import drain


class TestPublish:
    """Awaited, never-dropping delivery."""

    @pytest.mark.asyncio
    async def test_every_subscriber_receives_events_in_order(self):
        bus = EventBus(buffer_size=8)
        first = bus.subscribe()
        second = bus.subscribe()

        for text in ("a", "b", "c"):
            await bus.publish(StreamingChunk(message_id="m1", text=text))

        assert [e.text for e in drain(first)] == ["a", "b", "c"]
        assert [e.text for e in drain(second)] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_subscriber_only_sees_later_events(self):
        bus = EventBus()
        await bus.publish(Processing(is_processing=True))

        subscription = bus.subscribe()
        await bus.publish(Processing(is_processing=False))

        assert drain(subscription) == [Processing(is_processing=False)]

    @pytest.mark.asyncio
    async def test_publish_waits_for_buffer_room(self):
        bus = EventBus(buffer_size=1)
        subscription = bus.subscribe()
        await bus.publish(StreamingComplete(message_id="m1"))

        pending = asyncio.create_task(bus.publish(StreamingComplete(message_id="m2")))
        await asyncio.sleep(0)
        assert not pending.done()

        assert (await subscription.get()).message_id == "m1"
        await asyncio.wait_for(pending, 1)
        assert (await subscription.get()).message_id == "m2"

    @pytest.mark.asyncio
    async def test_closing_full_subscription_releases_publisher(self):
        bus = EventBus(buffer_size=1)
        stalled = bus.subscribe()
        healthy = bus.subscribe()
        await bus.publish(StreamingComplete(message_id="m1"))
        drain(healthy)

        pending = asyncio.create_task(bus.publish(StreamingComplete(message_id="m2")))
        await asyncio.sleep(0)
        assert not pending.done()

        stalled.close()
        await asyncio.wait_for(pending, 1)

        assert [e.message_id for e in drain(healthy)] == ["m2"]
        assert stalled.pending == 1

    @pytest.mark.asyncio
    async def test_closed_subscription_is_detached(self):
        bus = EventBus()
        subscription = bus.subscribe()
        assert bus.subscriber_count == 1

        subscription.close()
        await bus.publish(Processing(is_processing=True))

        assert bus.subscriber_count == 0
        assert subscription.pending == 0

    @pytest.mark.asyncio
    async def test_context_manager_closes_subscription(self):
        bus = EventBus()
        async with bus.subscribe() as subscription:
            assert bus.subscriber_count == 1
        assert subscription.closed
        assert bus.subscriber_count == 0


class TestTryPublish:
    """Fire-and-forget delivery."""

    @pytest.mark.asyncio
    async def test_drops_for_full_buffer_only(self):
        bus = EventBus(buffer_size=1)
        slow = bus.subscribe()
        fast = bus.subscribe()

        assert bus.try_publish(StreamingChunk(message_id="m1", text="a")) is True
        drain(fast)
        assert bus.try_publish(StreamingChunk(message_id="m1", text="b")) is False

        assert [e.text for e in drain(slow)] == ["a"]
        assert [e.text for e in drain(fast)] == ["b"]
        assert bus.dropped_count == 1

    def test_rejects_empty_buffer(self):
        with pytest.raises(ValueError):
            EventBus(buffer_size=0)
