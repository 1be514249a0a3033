"""Test doubles shared by the test modules."""

import json
from typing import Any, Dict, List, Optional

from langchain_core.messages import AIMessageChunk


def text_reply(*parts: str) -> List[AIMessageChunk]:
    """A model turn that streams plain text in the given fragments."""
    return [AIMessageChunk(content=part) for part in parts]


def tool_reply(name: str, args: Dict[str, Any], call_id: str = "call_1", index: int = 0) -> List[AIMessageChunk]:
    """A model turn that requests a single tool call."""
    return [
        AIMessageChunk(
            content="",
            tool_call_chunks=[{"name": name, "args": json.dumps(args), "id": call_id, "index": index}],
        )
    ]


class ScriptedChatModel:
    """Stand-in for a tool-calling chat model.

    Each astream() call consumes the next scripted turn (a list of chunks).
    Every message list the model was called with is kept in ``calls``.
    """

    def __init__(self, turns: List[List[AIMessageChunk]], error: Optional[Exception] = None):
        self.turns = list(turns)
        self.error = error
        self.calls: List[list] = []
        self.bound_tools: List[str] = []

    def bind_tools(self, tools, **kwargs):
        self.bound_tools = [tool.name for tool in tools]
        return self

    async def astream(self, messages, config=None, **kwargs):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        if not self.turns:
            raise AssertionError("Model called more times than scripted")
        for chunk in self.turns.pop(0):
            yield chunk


def drain(subscription) -> list:
    """All events currently buffered for a subscription."""
    events = []
    while True:
        event = subscription.get_nowait()
        if event is None:
            return events
        events.append(event)
