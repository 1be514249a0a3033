from .chat import router as chat_router
from .markers import router as markers_router
from .events import router as events_router
from .remote_tools import router as remote_tools_router

__all__ = ["chat_router", "markers_router", "events_router", "remote_tools_router"]
