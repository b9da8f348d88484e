"""DTO definitions for app-level data exchange.

Responsibilities:
  - Define stable, typed structures for app inputs/outputs.
Must not:
  - Implement business logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class CreateGameSpec:
    number_of_teams: int
    facilitator_name: Optional[str] = None
    scenario_seed: Optional[int] = None

    def validate(self) -> None:
        if isinstance(self.number_of_teams, bool) or not isinstance(self.number_of_teams, int):
            raise ValueError("number_of_teams must be int")

        if self.scenario_seed is not None and self.scenario_seed < 0:
            raise ValueError("scenario_seed must be >= 0")

        if self.facilitator_name is not None:
            stripped = self.facilitator_name.strip()
            object.__setattr__(self, "facilitator_name", stripped or None)


@dataclass(frozen=True)
class JoinTeamSpec:
    game_code: str
    team_name: str
    role_assignments: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        if not self.game_code.strip():
            raise ValueError("game_code must be non-empty")
        object.__setattr__(self, "game_code", self.game_code.strip().upper())
        for role, person in self.role_assignments.items():
            if not role.strip() or not person.strip():
                raise ValueError("role_assignments contain empty value")


@dataclass(frozen=True)
class GameSnapshot:
    game: dict[str, Any]
    teams: list[dict[str, Any]]
    leaderboard: list[dict[str, Any]]
