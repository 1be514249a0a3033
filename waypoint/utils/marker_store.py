"""Shared map marker state.

One MarkerStore instance is handed to both the trip-planning screen
controller and the route tool. Writes are serialised and applied in
program order, so a snapshot taken after a completed write always
includes it.
"""

import logging
import threading
from typing import List, Optional, Tuple

from waypoint.models.domain import MapMarker, TripRoute
from waypoint.services.chat_store import ChatStore

logger = logging.getLogger(__name__)


class MarkerStore:
    def __init__(self, store: Optional[ChatStore] = None):
        self._lock = threading.Lock()
        self._store = store
        self._markers: Tuple[MapMarker, ...] = tuple(store.load_markers()) if store else ()
        self._route: Optional[TripRoute] = None
        if self._markers:
            logger.info(f"Restored {len(self._markers)} persisted markers")

    # reads

    def snapshot(self) -> Tuple[MapMarker, ...]:
        """Latest marker list. The tuple is immutable; later writes replace it."""
        return self._markers

    def get(self, marker_id: str) -> Optional[MapMarker]:
        return next((m for m in self._markers if m.id == marker_id), None)

    @property
    def ids(self) -> List[str]:
        return [m.id for m in self._markers]

    @property
    def current_route(self) -> Optional[TripRoute]:
        return self._route

    # writes

    def add(self, marker: MapMarker) -> bool:
        """Append a marker. Returns False (and changes nothing) if the id is already present."""
        with self._lock:
            if any(m.id == marker.id for m in self._markers):
                return False
            self._replace(self._markers + (marker,), persist=True)
        logger.debug(f"Marker added: {marker.id} ({marker.place.name})")
        return True

    def remove(self, marker_id: str) -> None:
        with self._lock:
            self._replace(tuple(m for m in self._markers if m.id != marker_id), persist=True)

    def update(self, marker: MapMarker) -> None:
        with self._lock:
            self._replace(
                tuple(marker if m.id == marker.id else m for m in self._markers),
                persist=True,
            )

    def select(self, marker_id: str) -> None:
        with self._lock:
            self._replace(
                tuple(m.model_copy(update={"is_selected": m.id == marker_id}) for m in self._markers),
                persist=False,
            )

    def clear_selection(self) -> None:
        with self._lock:
            self._replace(
                tuple(m.model_copy(update={"is_selected": False}) for m in self._markers),
                persist=False,
            )

    def clear(self) -> None:
        with self._lock:
            self._replace((), persist=True)

    def set_route(self, route: Optional[TripRoute]) -> None:
        with self._lock:
            self._route = route

    def clear_route(self) -> None:
        self.set_route(None)

    def _replace(self, markers: Tuple[MapMarker, ...], persist: bool) -> None:
        # caller holds the lock
        self._markers = markers
        if persist and self._store is not None:
            self._store.save_markers(list(markers))
