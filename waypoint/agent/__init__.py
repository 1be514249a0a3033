"""
Agent package
- Tool registry assembly
- Agent session (model <-> tool loop)
- Repository facade used by the screens and the HTTP layer
"""

from .registry import ToolRegistry, ToolRegistryError, ToolDescriptor, LocalTools, build_weather_registry, build_trip_registry
from .session import AgentSession, AgentSessionError, SessionResult, SessionState
from .repository import AgentRepository

__all__ = [
    "ToolRegistry",
    "ToolRegistryError",
    "ToolDescriptor",
    "LocalTools",
    "build_weather_registry",
    "build_trip_registry",
    "AgentSession",
    "AgentSessionError",
    "SessionResult",
    "SessionState",
    "AgentRepository",
]
