"""Assemble debrief contexts from stored game records."""

from __future__ import annotations

from typing import Mapping, Sequence

from ..domain.models import CycleResult, Decision, DecisionSubmission, Team
from .leaders import leader_by_cycle
from .models import GameContext, TeamContext


def resolve_history(
    submissions: Sequence[DecisionSubmission],
    catalog: Mapping[str, Decision],
) -> tuple[tuple[int, tuple[Decision, ...]], ...]:
    """Resolved decisions per cycle in cycle order; unknown ids are dropped."""
    history = []
    for submission in sorted(submissions, key=lambda s: s.cycle):
        chosen = tuple(catalog[d] for d in submission.decision_ids if d in catalog)
        history.append((submission.cycle, chosen))
    return tuple(history)


def build_game_context(
    teams: Sequence[Team],
    results: Sequence[CycleResult],
    submissions: Sequence[DecisionSubmission],
    catalog: Mapping[str, Decision],
    current_cycle: int,
) -> GameContext:
    team_contexts = []
    for team in teams:
        own_results = tuple(sorted((r for r in results if r.team_id == team.id), key=lambda r: r.cycle))
        resolved_cycles = {r.cycle for r in own_results}
        # only decisions that produced results count as history
        own_submissions = [
            s for s in submissions if s.team_id == team.id and s.cycle in resolved_cycles
        ]
        team_contexts.append(
            TeamContext(
                team_id=team.id,
                team_name=team.name,
                current_cycle=current_cycle,
                results=own_results,
                decisions=resolve_history(own_submissions, catalog),
                cumulative_score=team.cumulative_score,
            )
        )
    return GameContext(
        total_teams=len(teams),
        current_cycle=current_cycle,
        leader_by_cycle=leader_by_cycle(teams, results),
        teams=tuple(team_contexts),
    )
