import logging

from fastapi import APIRouter, Depends, HTTPException

from waypoint.dependencies import AppContainer, get_container

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/tools/reconnect")
async def reconnect_remote_tools(container: AppContainer = Depends(get_container)):
    """Drop the current map tool connection; the next trip turn connects again."""
    provider = await container.agent_repository.reconnect_remote_tools()
    if provider is None:
        raise HTTPException(status_code=404, detail="No remote tool server is configured")
    return {"endpoint": provider.endpoint, "state": provider.state.value}
