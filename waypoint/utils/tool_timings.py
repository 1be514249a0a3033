"""Simple in-process tool timing recorder. Keeps the most recent records only."""

import time
import threading
from collections import deque
from typing import Deque, Dict, Any, List, Optional

MAX_RECORDS = 500

_lock = threading.Lock()
_records: Deque[Dict[str, Any]] = deque(maxlen=MAX_RECORDS)


def clear_tool_timings():
    with _lock:
        _records.clear()


def record_tool_timing(tool: str, duration: float, message_id: Optional[str] = None, error: bool = False):
    """Store a single timing record."""
    with _lock:
        _records.append({
            "tool": tool,
            "duration": duration,
            "message_id": message_id,
            "error": error,
            "timestamp": time.time(),
        })


def get_tool_timings(message_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """Return recorded timings (optionally for one streamed message) without clearing them."""
    with _lock:
        return [r for r in _records if message_id is None or r["message_id"] == message_id]


def pop_tool_timings(message_id: str) -> List[Dict[str, Any]]:
    """Return and remove the timings recorded for one streamed message."""
    with _lock:
        taken = [r for r in _records if r["message_id"] == message_id]
        kept = [r for r in _records if r["message_id"] != message_id]
        _records.clear()
        _records.extend(kept)
        return taken
