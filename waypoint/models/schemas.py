from pydantic import BaseModel, Field
from typing import List, Optional
from waypoint.models.domain import ChatMessage, MapMarker, TripRoute


class ChatRequest(BaseModel):
    message: str = Field(..., description="User message")


class ChatResponse(BaseModel):
    screen: str = Field(..., description="Chat screen (weather/trip_plan)")
    message_id: str = Field(..., description="Id of the assistant message that was streamed")
    content: str = Field(..., description="Final assistant reply")


class ChatHistoryResponse(BaseModel):
    screen: str
    messages: List[ChatMessage]


class MapStateResponse(BaseModel):
    markers: List[MapMarker] = Field(default_factory=list)
    route: Optional[TripRoute] = Field(None, description="Active route, if any")
