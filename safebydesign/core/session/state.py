"""Immutable snapshot of one game's records."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Iterable, Optional

from ..domain.models import CycleResult, DecisionSubmission, Game, Team


@dataclass(frozen=True)
class GameState:
    game: Game
    teams: tuple[Team, ...] = ()
    submissions: tuple[DecisionSubmission, ...] = ()
    results: tuple[CycleResult, ...] = ()
    resolved_cycles: frozenset[int] = frozenset()

    def team(self, team_id: str) -> Optional[Team]:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def submission(self, team_id: str, cycle: int) -> Optional[DecisionSubmission]:
        for submission in self.submissions:
            if submission.team_id == team_id and submission.cycle == cycle:
                return submission
        return None

    def submissions_for(self, cycle: int) -> list[DecisionSubmission]:
        return [s for s in self.submissions if s.cycle == cycle]

    def results_for(self, cycle: int) -> list[CycleResult]:
        return [r for r in self.results if r.cycle == cycle]

    def team_results(self, team_id: str) -> list[CycleResult]:
        return sorted((r for r in self.results if r.team_id == team_id), key=lambda r: r.cycle)

    def is_resolved(self, cycle: int) -> bool:
        return cycle in self.resolved_cycles

    def with_game(self, **changes: object) -> GameState:
        return dataclasses.replace(self, game=dataclasses.replace(self.game, **changes))

    def with_submission(self, submission: DecisionSubmission) -> GameState:
        kept = tuple(
            s
            for s in self.submissions
            if not (s.team_id == submission.team_id and s.cycle == submission.cycle)
        )
        return dataclasses.replace(self, submissions=kept + (submission,))

    def with_teams(self, teams: Iterable[Team]) -> GameState:
        return dataclasses.replace(self, teams=tuple(teams))
