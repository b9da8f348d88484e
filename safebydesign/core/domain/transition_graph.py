"""Allowed game status transitions for the session state machine.

Responsibilities:
  - Define legal next statuses per current status.
  - Session guardrails must respect this graph.

Invariants:
  - Must remain stable for auditability; persisted games rely on it.
  - ENDED is terminal.
"""

from __future__ import annotations

from .enums import GameStatus

ALLOWED_TRANSITIONS: dict[GameStatus, set[GameStatus]] = {
    GameStatus.LOBBY: {GameStatus.IN_CYCLE},
    GameStatus.IN_CYCLE: {GameStatus.RESULTS},
    GameStatus.RESULTS: {GameStatus.IN_CYCLE, GameStatus.ENDED},
    GameStatus.ENDED: set(),
}
