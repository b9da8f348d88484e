"""Domain errors raised by the session machine and the application facade.

GameError is the common base so transport adapters can map one family of
exceptions to user-facing messages.
"""

from __future__ import annotations


class GameError(Exception):
    """Base for all game rule failures."""


class ValidationError(GameError):
    """User-correctable command rejection; no state was changed."""


class NotFoundError(GameError):
    """Unknown game code, game id, team id or cycle brief."""


class ResolutionError(GameError):
    """Score computation failed; the resolution attempt was rolled back."""

    def __init__(self, game_id: str, cycle: int, cause: BaseException) -> None:
        super().__init__(f"cycle resolution failed game_id={game_id} cycle={cycle}: {cause!r}")
        self.game_id = game_id
        self.cycle = cycle
        self.cause = cause
