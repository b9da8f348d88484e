"""Leader history derived from resolved cycle results."""

from __future__ import annotations

from typing import Sequence

from ..domain.models import CycleResult, Team


def leader_by_cycle(teams: Sequence[Team], results: Sequence[CycleResult]) -> tuple[str, ...]:
    """Team id with the highest cumulative total after each resolved cycle.

    Ties go to the team that joined first.
    """
    if not teams:
        return ()
    ordered = sorted(enumerate(teams), key=lambda pair: (pair[1].joined_at, pair[0]))
    join_rank = {team.id: rank for rank, (_, team) in enumerate(ordered)}
    running = {team.id: 0.0 for team in teams}

    leaders: list[str] = []
    for cycle in sorted({r.cycle for r in results}):
        for result in results:
            if result.cycle == cycle and result.team_id in running:
                running[result.team_id] += result.scores.total
        leader = max(running, key=lambda team_id: (running[team_id], -join_rank[team_id]))
        leaders.append(leader)
    return tuple(leaders)
