"""Facilitator prompt generation.

Responsibilities:
  - Run trigger detection per team and assemble observations and questions.
  - Provide the end-of-game mode (narrative, max_cycle waived) and the per-cycle
    mode (only triggers relevant to the current cycle).

Inputs/Outputs:
  - Inputs: GameContext (teams and leader history), cycle, question bank, detector.
  - Outputs: FacilitatorPrompts or CyclePrompts.

Invariants:
  - Room questions never share a theme; team questions hold at most two per theme.
  - Must not raise on teams without results; they only carry first_cycle.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .models import (
    CyclePrompts,
    DebriefQuestion,
    FacilitatorPrompts,
    GameContext,
    TeamAnalysis,
    TeamContext,
    TriggerResult,
)
from .narrative import generate_game_narrative
from .selection import select_room_questions, select_team_questions
from .triggers import TriggerDetector

END_OF_GAME_OBSERVATIONS = 4
CYCLE_OBSERVATIONS = 3
CYCLE_TEAM_QUESTIONS = 2
CYCLE_ROOM_QUESTIONS = 2


def _observations(triggers: Sequence[TriggerResult], limit: int) -> tuple[str, ...]:
    ranked = sorted(triggers, key=lambda t: t.intensity, reverse=True)
    return tuple(t.context for t in ranked[:limit])


def _relevant_to_cycle(trigger: TriggerResult, cycle: int) -> bool:
    return not trigger.cycles or cycle in trigger.cycles


def analyze_team(
    team: TeamContext,
    game: GameContext,
    cycle: int,
    bank: Sequence[DebriefQuestion],
    detector: TriggerDetector,
) -> TeamAnalysis:
    fired = detector.fired(team, game)
    questions = select_team_questions(bank, fired, cycle, end_of_game=True)
    return TeamAnalysis(
        team_id=team.team_id,
        team_name=team.team_name,
        triggers=tuple(fired),
        key_observations=_observations(fired, END_OF_GAME_OBSERVATIONS),
        suggested_questions=tuple(questions),
    )


def generate_facilitator_prompts(
    game: GameContext,
    cycle: int,
    bank: Sequence[DebriefQuestion],
    detector: Optional[TriggerDetector] = None,
) -> FacilitatorPrompts:
    detector = detector or TriggerDetector()
    analyses = [analyze_team(team, game, cycle, bank, detector) for team in game.teams]
    room = select_room_questions(bank, [a.triggers for a in analyses], cycle, end_of_game=True)
    return FacilitatorPrompts(
        game_narrative=generate_game_narrative(analyses, game.leader_by_cycle),
        all_teams=tuple(room),
        per_team=tuple(analyses),
    )


def generate_cycle_prompts(
    game: GameContext,
    cycle: int,
    bank: Sequence[DebriefQuestion],
    detector: Optional[TriggerDetector] = None,
) -> CyclePrompts:
    detector = detector or TriggerDetector()
    per_team: list[TeamAnalysis] = []
    for team in game.teams:
        recent = [t for t in detector.fired(team, game) if _relevant_to_cycle(t, cycle)]
        questions = select_team_questions(bank, recent, cycle, end_of_game=False)
        per_team.append(
            TeamAnalysis(
                team_id=team.team_id,
                team_name=team.team_name,
                triggers=tuple(recent),
                key_observations=_observations(recent, CYCLE_OBSERVATIONS),
                suggested_questions=tuple(questions[:CYCLE_TEAM_QUESTIONS]),
            )
        )
    room = select_room_questions(bank, [a.triggers for a in per_team], cycle, end_of_game=False)
    return CyclePrompts(
        cycle=cycle,
        per_team=tuple(per_team),
        all_teams=tuple(room[:CYCLE_ROOM_QUESTIONS]),
    )
