"""
Agent session: one conversational turn.

IDLE -> PROMPTING -> AWAITING_MODEL -> (TOOL_DISPATCH <-> AWAITING_MODEL)* -> STREAMING -> COMPLETED
FAILED is entered from any state when an unexpected exception escapes.

The model is streamed; every text fragment is forwarded to the event bus as a
StreamingChunk tagged with the caller's message id, and the chunks are
aggregated to recover tool calls. Tool calls run one at a time, in the order
the model issued them, and each result is fed back before the next model call.
The number of model <-> tool round trips is bounded; reaching the bound ends
the turn normally with the last text the model produced.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage, ToolMessage
from pydantic import ValidationError

from waypoint.agent.prompts import build_system_prompt, build_user_message
from waypoint.agent.registry import ToolRegistry
from waypoint.models.domain import AgentKind, ChatMessage
from waypoint.models.events import StreamingChunk, StreamingComplete
from waypoint.utils.event_bus import EventBus

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    PROMPTING = "prompting"
    AWAITING_MODEL = "awaiting_model"
    TOOL_DISPATCH = "tool_dispatch"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


class AgentSessionError(Exception):
    """The model produced something the session cannot interpret."""


@dataclass
class SessionResult:
    text: str
    iterations: int
    hit_iteration_limit: bool = False
    tool_calls: List[str] = field(default_factory=list)


def message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class AgentSession:
    def __init__(
        self,
        kind: AgentKind,
        llm: Any,
        registry: ToolRegistry,
        event_bus: EventBus,
        max_iterations: int,
        remote_tools_available: bool = False,
        callbacks: Optional[List[BaseCallbackHandler]] = None,
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.kind = kind
        self.llm = llm
        self.registry = registry
        self.event_bus = event_bus
        self.max_iterations = max_iterations
        self.remote_tools_available = remote_tools_available
        self.callbacks = callbacks or []
        self.state = SessionState.IDLE

    def _transition(self, state: SessionState) -> None:
        logger.debug(f"[{self.kind.value}] {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, message: str, message_id: str, history: Sequence[ChatMessage] = ()) -> SessionResult:
        if self.state is not SessionState.IDLE:
            raise RuntimeError("An AgentSession runs a single turn")

        try:
            return await self._run(message, message_id, history)
        except Exception:
            self._transition(SessionState.FAILED)
            raise

    async def _run(self, message: str, message_id: str, history: Sequence[ChatMessage]) -> SessionResult:
        self._transition(SessionState.PROMPTING)
        system_prompt = build_system_prompt(self.kind, self.registry.describe(), self.remote_tools_available)
        messages: List[BaseMessage] = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=build_user_message(message, history)),
        ]
        model = self.llm.bind_tools(self.registry.tools) if len(self.registry) else self.llm

        last_text = ""
        called: List[str] = []
        for iteration in range(1, self.max_iterations + 1):
            self._transition(SessionState.AWAITING_MODEL)
            response = await self._stream_model(model, messages, message_id)
            messages.append(response)

            text = message_text(response)
            if text:
                last_text = text

            if not response.tool_calls and not response.invalid_tool_calls:
                self._transition(SessionState.STREAMING)
                await self.event_bus.publish(StreamingComplete(message_id=message_id))
                self._transition(SessionState.COMPLETED)
                return SessionResult(text=text or last_text, iterations=iteration, tool_calls=called)

            self._transition(SessionState.TOOL_DISPATCH)
            for call in response.tool_calls:
                called.append(call["name"])
                output = await self._dispatch(call["name"], call["args"], message_id)
                messages.append(ToolMessage(content=output, tool_call_id=call["id"], name=call["name"]))
            for call in response.invalid_tool_calls:
                logger.warning(f"Malformed tool call from model: {call.get('name')} ({call.get('error')})")
                messages.append(ToolMessage(
                    content=f"Invalid arguments for tool '{call.get('name')}': could not parse {call.get('args')!r}",
                    tool_call_id=call.get("id") or "",
                    name=call.get("name") or "",
                ))

        logger.warning(f"[{self.kind.value}] iteration limit ({self.max_iterations}) reached, ending turn")
        self._transition(SessionState.STREAMING)
        await self.event_bus.publish(StreamingComplete(message_id=message_id))
        self._transition(SessionState.COMPLETED)
        return SessionResult(
            text=last_text,
            iterations=self.max_iterations,
            hit_iteration_limit=True,
            tool_calls=called,
        )

    async def _stream_model(self, model: Any, messages: List[BaseMessage], message_id: str) -> BaseMessage:
        aggregate = None
        async for chunk in model.astream(messages):
            text = message_text(chunk)
            if text:
                self.event_bus.try_publish(StreamingChunk(message_id=message_id, text=text))
            aggregate = chunk if aggregate is None else aggregate + chunk

        if aggregate is None:
            raise AgentSessionError("Model returned an empty response")
        return aggregate

    async def _dispatch(self, name: str, args: dict, message_id: str) -> str:
        tool = self.registry.get(name)
        if tool is None:
            logger.warning(f"Model requested unknown tool '{name}'")
            return f"Tool '{name}' is not available. Available tools: {', '.join(self.registry.names)}"

        logger.info(f"Calling tool: {name} with args: {args}")
        try:
            result = await tool.ainvoke(
                args,
                config={
                    "callbacks": self.callbacks,
                    "metadata": {"message_id": message_id, "agent": self.kind.value},
                },
            )
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {name}: {e}")
            return f"Invalid arguments for tool '{name}': {e}"

        return result if isinstance(result, str) else str(result)
