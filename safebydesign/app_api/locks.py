"""Per-game mutual exclusion.

All mutations for one game id run under that game's lock; different games
proceed in parallel.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class GameLockRegistry:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, game_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[game_id] = lock
            return lock

    @contextmanager
    def hold(self, game_id: str) -> Iterator[None]:
        lock = self.lock_for(game_id)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
