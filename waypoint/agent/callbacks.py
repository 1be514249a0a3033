import time
import logging
from langchain_core.callbacks import BaseCallbackHandler
from waypoint.utils.tool_timings import record_tool_timing

logger = logging.getLogger(__name__)


class ToolTimingCallbackHandler(BaseCallbackHandler):
    """Record start/end timestamps for each tool call."""

    # keep start/end bookkeeping on the event loop thread
    run_inline = True

    def __init__(self):
        super().__init__()
        self._starts = {}

    def on_tool_start(self, serialized, input_str, **kwargs):
        run_id = kwargs.get("run_id")
        tool_name = serialized.get("name") if isinstance(serialized, dict) else None
        message_id = (kwargs.get("metadata") or {}).get("message_id")
        self._starts[run_id] = (time.monotonic(), tool_name, message_id)
        logger.debug(f"[ToolTiming] start tool={tool_name} run_id={run_id} message={message_id}")

    def on_tool_end(self, output, **kwargs):
        self._finish(kwargs.get("run_id"), error=False)

    def on_tool_error(self, error, **kwargs):
        self._finish(kwargs.get("run_id"), error=True)

    def _finish(self, run_id, error: bool):
        start, tool_name, message_id = self._starts.pop(run_id, (None, None, None))
        if start is None:
            return
        duration = time.monotonic() - start
        record_tool_timing(tool=tool_name or "unknown_tool", duration=duration, message_id=message_id, error=error)
        logger.debug(f"[ToolTiming] end tool={tool_name} run_id={run_id} message={message_id} duration={duration:.3f}s")
