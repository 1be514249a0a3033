import logging

from fastapi import APIRouter, Depends, HTTPException

from waypoint.dependencies import AppContainer, get_container
from waypoint.models.schemas import ChatHistoryResponse, ChatRequest, ChatResponse
from waypoint.services.chat_store import ChatScreen

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat/{screen}", response_model=ChatResponse)
async def chat(screen: ChatScreen, request: ChatRequest, container: AppContainer = Depends(get_container)):
    """Run one assistant turn for the screen and return the final reply."""
    controller = container.controller(screen)

    if not request.message.strip():
        raise HTTPException(status_code=422, detail="Message must not be empty")
    if controller.busy:
        raise HTTPException(status_code=409, detail=f"A {screen.value} turn is already in progress")

    logger.info(f"=== Chat request: {screen.value} ===")
    logger.info(f"Message: {request.message}")

    turn = await controller.send_message(request.message)
    if turn is None:
        raise HTTPException(status_code=409, detail=f"A {screen.value} turn is already in progress")

    return ChatResponse(screen=screen.value, message_id=turn.message_id, content=turn.content)


@router.get("/chat/{screen}/messages", response_model=ChatHistoryResponse)
async def get_messages(screen: ChatScreen, container: AppContainer = Depends(get_container)):
    return ChatHistoryResponse(screen=screen.value, messages=container.controller(screen).messages)


@router.delete("/chat/{screen}/messages", status_code=204)
async def clear_messages(screen: ChatScreen, container: AppContainer = Depends(get_container)):
    controller = container.controller(screen)
    if controller.busy:
        raise HTTPException(status_code=409, detail=f"A {screen.value} turn is already in progress")
    controller.clear_chat()
