"""
Key-value persistence for chat histories and map markers.

Only message-boundary writes land here (new message, finalised reply,
cleared history); streaming chunks stay in memory.
"""

import json
import logging
import os
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from waypoint.models.domain import ChatMessage, MapMarker

logger = logging.getLogger(__name__)

MARKERS_KEY = "map_markers"

_messages_adapter = TypeAdapter(List[ChatMessage])
_markers_adapter = TypeAdapter(List[MapMarker])


class ChatScreen(str, Enum):
    WEATHER = "weather"
    TRIP_PLAN = "trip_plan"

    @property
    def storage_key(self) -> str:
        if self is ChatScreen.WEATHER:
            return "weather_chat_history"
        return "trip_chat_history"


class ChatStoreError(Exception):
    """Persistence read/write failure."""


class ChatStore:
    """Base store. Subclasses implement raw key access (_read / _write / _clear)."""

    def _read(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def _clear(self) -> None:
        raise NotImplementedError

    def load(self, screen: ChatScreen) -> List[ChatMessage]:
        raw = self._read(screen.storage_key)
        if raw is None:
            return []
        try:
            return _messages_adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable chat history for {screen.value}: {e}")
            return []

    def save(self, screen: ChatScreen, messages: List[ChatMessage]) -> None:
        self._write(screen.storage_key, _messages_adapter.dump_python(messages, mode="json"))

    def load_markers(self) -> List[MapMarker]:
        raw = self._read(MARKERS_KEY)
        if raw is None:
            return []
        try:
            return _markers_adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable marker list: {e}")
            return []

    def save_markers(self, markers: List[MapMarker]) -> None:
        self._write(MARKERS_KEY, _markers_adapter.dump_python(markers, mode="json"))

    def clear_all(self) -> None:
        self._clear()


class InMemoryChatStore(ChatStore):
    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _read(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._data.get(key)

    def _write(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def _clear(self) -> None:
        with self._lock:
            self._data.clear()


class JsonFileChatStore(ChatStore):
    """One JSON document per key under `directory`, replaced atomically on write."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                logger.warning(f"Corrupt store file {path}, ignoring: {e}")
                return None
            except OSError as e:
                raise ChatStoreError(f"Cannot read {path}: {e}") from e

    def _write(self, key: str, value: Any) -> None:
        path = self._path(key)
        with self._lock:
            tmp_name = None
            try:
                fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False)
                os.replace(tmp_name, path)
            except OSError as e:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise ChatStoreError(f"Cannot write {path}: {e}") from e

    def _clear(self) -> None:
        with self._lock:
            for path in self.directory.glob("*.json"):
                path.unlink()


def create_chat_store(data_dir: str) -> ChatStore:
    if data_dir:
        logger.info(f"Persisting chats and markers under {data_dir}")
        return JsonFileChatStore(data_dir)
    return InMemoryChatStore()
