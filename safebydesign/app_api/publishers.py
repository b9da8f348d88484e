"""EventPublisher implementations that do not need a network transport."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from safebydesign.core.session.events import OutboundEvent

logger = logging.getLogger(__name__)


class RecordingPublisher:
    """Keeps every published event in order; used by CLIs and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.published: list[tuple[str, OutboundEvent]] = []

    def publish(self, game_id: str, event: OutboundEvent) -> None:
        with self._lock:
            self.published.append((game_id, event))

    def names(self, game_id: Optional[str] = None) -> list[str]:
        with self._lock:
            return [e.name for g, e in self.published if game_id is None or g == game_id]

    def last(self, name: str) -> Optional[OutboundEvent]:
        with self._lock:
            for _, event in reversed(self.published):
                if event.name == name:
                    return event
        return None


class CallbackPublisher:
    """Forwards events to a transport callback; callback faults are logged, not raised."""

    def __init__(self, callback: Callable[[str, OutboundEvent], None]) -> None:
        self._callback = callback

    def publish(self, game_id: str, event: OutboundEvent) -> None:
        try:
            self._callback(game_id, event)
        except Exception:
            logger.exception("publish failed game_id=%s event=%s", game_id, event.name)
