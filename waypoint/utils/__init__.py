"""
Utils package
- Event bus
- Shared marker state
- Chat history repository
- Tool timing buffer
"""

from .event_bus import EventBus, Subscription
from .marker_store import MarkerStore
from .conversation_memory import ChatRepository
from .tool_timings import get_tool_timings, pop_tool_timings, record_tool_timing

__all__ = [
    "EventBus",
    "Subscription",
    "MarkerStore",
    "ChatRepository",
    "get_tool_timings",
    "pop_tool_timings",
    "record_tool_timing",
]
