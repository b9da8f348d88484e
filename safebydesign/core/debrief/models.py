"""Debrief data carriers.

Responsibilities:
  - Define trigger results, question bank entries and the prompt payloads
    published to the facilitator.

Invariants:
  - TriggerResult intensity is always within [0, 1].
  - TriggerResult is recomputed on demand and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..domain.enums import QuestionScope, QuestionTheme, TriggerType
from ..domain.models import CycleResult, Decision, ScoreBreakdown


@dataclass(frozen=True)
class TriggerResult:
    type: TriggerType
    fired: bool
    intensity: float
    context: str
    cycles: tuple[int, ...] = ()

    @classmethod
    def of(
        cls,
        trigger_type: TriggerType,
        fired: bool,
        intensity: float,
        context: str,
        cycles: Iterable[int] = (),
    ) -> TriggerResult:
        return cls(
            type=trigger_type,
            fired=bool(fired),
            intensity=max(0.0, min(1.0, float(intensity))),
            context=context,
            cycles=tuple(cycles),
        )


@dataclass(frozen=True)
class DebriefQuestion:
    id: str
    text: str
    theme: QuestionTheme
    triggers: tuple[TriggerType, ...]
    priority: int
    scope: QuestionScope
    follow_up: Optional[str] = None
    min_cycle: Optional[int] = None
    max_cycle: Optional[int] = None

    def eligible_for(self, cycle: int, end_of_game: bool) -> bool:
        if self.min_cycle is not None and cycle < self.min_cycle:
            return False
        # max_cycle is waived at the end of the game
        if not end_of_game and self.max_cycle is not None and cycle > self.max_cycle:
            return False
        return True


@dataclass(frozen=True)
class TeamContext:
    team_id: str
    team_name: str
    current_cycle: int
    results: tuple[CycleResult, ...]
    # (cycle, resolved decisions) in cycle order
    decisions: tuple[tuple[int, tuple[Decision, ...]], ...]
    cumulative_score: ScoreBreakdown


@dataclass(frozen=True)
class GameContext:
    total_teams: int
    current_cycle: int
    leader_by_cycle: tuple[str, ...]
    teams: tuple[TeamContext, ...]


@dataclass(frozen=True)
class TeamAnalysis:
    team_id: str
    team_name: str
    triggers: tuple[TriggerResult, ...]
    key_observations: tuple[str, ...]
    suggested_questions: tuple[DebriefQuestion, ...]


@dataclass(frozen=True)
class FacilitatorPrompts:
    game_narrative: str
    all_teams: tuple[DebriefQuestion, ...]
    per_team: tuple[TeamAnalysis, ...]


@dataclass(frozen=True)
class CyclePrompts:
    cycle: int
    per_team: tuple[TeamAnalysis, ...]
    all_teams: tuple[DebriefQuestion, ...]
