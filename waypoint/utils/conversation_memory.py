import logging
import threading
import time
import uuid
from typing import Dict, List, Optional

from waypoint.models.domain import ChatMessage
from waypoint.services.chat_store import ChatScreen, ChatStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChatRepository:
    """
    Chat histories per screen.

    Streaming chunks only touch the in-memory copy; the store is written at
    message boundaries (new message, finished reply, cleared history).
    """

    def __init__(self, store: ChatStore):
        self._store = store
        self._lock = threading.Lock()
        self._histories: Dict[ChatScreen, List[ChatMessage]] = {
            screen: store.load(screen) for screen in ChatScreen
        }
        for screen, messages in self._histories.items():
            # a reply interrupted by a restart would otherwise stay "streaming" forever
            if any(m.is_streaming for m in messages):
                self._histories[screen] = [m.model_copy(update={"is_streaming": False}) for m in messages]
                self._persist(screen)
            logger.info(f"Loaded chat history: {screen.value} ({len(messages)} messages)")

    def get_messages(self, screen: ChatScreen) -> List[ChatMessage]:
        with self._lock:
            return list(self._histories[screen])

    def get_message(self, screen: ChatScreen, message_id: str) -> Optional[ChatMessage]:
        with self._lock:
            return next((m for m in self._histories[screen] if m.id == message_id), None)

    def add_message(self, screen: ChatScreen, content: str, is_from_user: bool) -> ChatMessage:
        message = ChatMessage(
            id=str(uuid.uuid4()),
            content=content,
            is_from_user=is_from_user,
            timestamp=_now_ms(),
        )
        self._append(screen, message)
        logger.info(f"Message added: {screen.value} - {'user' if is_from_user else 'assistant'}: {content[:100]}")
        return message

    def add_streaming_message(self, screen: ChatScreen) -> ChatMessage:
        """Empty assistant placeholder that streaming chunks are appended to."""
        message = ChatMessage(
            id=str(uuid.uuid4()),
            content="",
            is_from_user=False,
            timestamp=_now_ms(),
            is_streaming=True,
        )
        self._append(screen, message)
        return message

    def append_chunk(self, screen: ChatScreen, message_id: str, text: str) -> bool:
        """Append streamed text in memory. Returns False if the message is unknown or already finished."""
        with self._lock:
            messages = self._histories[screen]
            for index, message in enumerate(messages):
                if message.id == message_id:
                    if not message.is_streaming:
                        return False
                    messages[index] = message.model_copy(update={"content": message.content + text})
                    return True
        return False

    def complete_streaming(self, screen: ChatScreen, message_id: str) -> bool:
        """Mark a streaming message finished, keeping the streamed content."""
        with self._lock:
            messages = self._histories[screen]
            for index, message in enumerate(messages):
                if message.id == message_id:
                    if not message.is_streaming:
                        return False
                    messages[index] = message.model_copy(update={"is_streaming": False})
                    break
            else:
                return False
        self._persist(screen)
        return True

    def update_message(
        self,
        screen: ChatScreen,
        message_id: str,
        content: str,
        append: bool = False,
        is_streaming: bool = False,
    ) -> bool:
        with self._lock:
            messages = self._histories[screen]
            for index, message in enumerate(messages):
                if message.id == message_id:
                    messages[index] = message.model_copy(update={
                        "content": message.content + content if append else content,
                        "is_streaming": is_streaming,
                    })
                    break
            else:
                return False
        if not is_streaming:
            self._persist(screen)
        return True

    def clear_messages(self, screen: ChatScreen):
        with self._lock:
            self._histories[screen] = []
        self._persist(screen)
        logger.info(f"Chat cleared: {screen.value}")

    def _append(self, screen: ChatScreen, message: ChatMessage):
        with self._lock:
            self._histories[screen].append(message)
        self._persist(screen)

    def _persist(self, screen: ChatScreen):
        with self._lock:
            snapshot = list(self._histories[screen])
        self._store.save(screen, snapshot)
