import asyncio
import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from waypoint.dependencies import AppContainer, get_container
from waypoint.utils.event_bus import Subscription

logger = logging.getLogger(__name__)

router = APIRouter()


async def event_stream(subscription: Subscription) -> AsyncIterator[str]:
    """Server-sent event frames, one per AgentEvent, until the client disconnects."""
    try:
        async for event in subscription:
            yield f"data: {event.model_dump_json()}\n\n"
    except asyncio.CancelledError:
        # client went away
        return
    finally:
        subscription.close()


@router.get("/events")
async def agent_events(container: AppContainer = Depends(get_container)):
    """
    SSE stream of agent events (streaming chunks, markers, routes, errors).
    Only events published after the connection opens are sent.
    """
    subscription = container.event_bus.subscribe()
    logger.info(f"Event stream opened ({container.event_bus.subscriber_count} subscribers)")
    return StreamingResponse(event_stream(subscription), media_type="text/event-stream")
