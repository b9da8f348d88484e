"""Port definitions for app-level dependencies.

Responsibilities:
  - Define interface contracts for persistence and outbound publishing.
Must not:
  - Implement logic; interfaces only.
"""

from __future__ import annotations

from typing import Optional, Protocol

from safebydesign.core.domain.models import CycleResult, DecisionSubmission, Game, Team
from safebydesign.core.session.events import OutboundEvent


class GameStore(Protocol):
    def upsert(self, game: Game) -> None:
        ...

    def get(self, game_id: str) -> Optional[Game]:
        ...

    def get_by_code(self, code: str) -> Optional[Game]:
        ...

    def code_exists(self, code: str) -> bool:
        ...


class TeamStore(Protocol):
    def upsert(self, team: Team) -> None:
        ...

    def get(self, team_id: str) -> Optional[Team]:
        ...

    def list_for_game(self, game_id: str) -> list[Team]:
        ...


class SubmissionStore(Protocol):
    def upsert(self, submission: DecisionSubmission) -> None:
        ...

    def list_for_game(self, game_id: str) -> list[DecisionSubmission]:
        ...


class ResultStore(Protocol):
    def insert(self, result: CycleResult) -> None:
        ...

    def list_for_game(self, game_id: str) -> list[CycleResult]:
        ...


class ResolutionStore(Protocol):
    def mark_resolved(self, game_id: str, cycle: int, resolved_at: str) -> None:
        ...

    def is_resolved(self, game_id: str, cycle: int) -> bool:
        ...

    def resolved_cycles(self, game_id: str) -> frozenset[int]:
        ...


class EventPublisher(Protocol):
    def publish(self, game_id: str, event: OutboundEvent) -> None:
        ...
