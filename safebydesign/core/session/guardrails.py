"""Status guardrails for session commands.

Responsibilities:
  - Enforce the allowed status graph before a transition is applied.
  - Reject commands issued in the wrong phase with a ValidationError.

Invariants:
  - Must be deterministic; never mutates state.
"""

from __future__ import annotations

from ..domain.enums import GameStatus
from ..domain.transition_graph import ALLOWED_TRANSITIONS
from ..errors import ValidationError


def check_transition(current: GameStatus, target: GameStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise ValidationError(f"Cannot move game from {current.value} to {target.value}")


def require_status(current: GameStatus, expected: GameStatus, message: str) -> None:
    if current != expected:
        raise ValidationError(message)
