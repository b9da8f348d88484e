"""Triggers: lifecycle and game position.

Category:
  - Lifecycle (first_cycle) and leaderboard position.

Contract:
  - Inputs: team context plus the per-cycle leader history of the game.
  - Output: TriggerResult per evaluated trigger, fired or not.

Trigger summary:
  - first_cycle fires in cycles 1-2; full intensity in cycle 1.
  - leading_team fires when the latest recorded leader is this team.
  - struggling_team fires when this team holds the lowest cumulative total
    among two or more teams and someone is ahead of it.
  - comeback / early_lead_lost are only evaluated with 3+ results and 2+
    recorded leaders. comeback needs a self-relative dip (was_bottom) and the
    current lead; early_lead_lost needs a lead in the first two recorded cycles
    and no current lead.

Edge cases:
  - was_bottom compares the team's minimum total to its own mean, not to other teams.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..domain.bounds import round1
from ..domain.enums import TriggerType
from ..domain.models import CycleResult
from .models import GameContext, TeamContext, TriggerResult
from .thresholds import TriggerThresholds

EARLY_PHASE_LAST_CYCLE = 2
EARLY_PHASE_LATE_INTENSITY = 0.5
POSITION_MIN_RESULTS = 3
POSITION_MIN_LEADERS = 2
EARLY_LEADER_WINDOW = 2
POSITION_INTENSITY = 0.9
STRUGGLING_INTENSITY = 0.7


def eval_first_cycle(cycle: int) -> TriggerResult:
    return TriggerResult.of(
        TriggerType.FIRST_CYCLE,
        fired=cycle <= EARLY_PHASE_LAST_CYCLE,
        intensity=1.0 if cycle == 1 else EARLY_PHASE_LATE_INTENSITY,
        context="First cycle of the game" if cycle == 1 else "Early game phase",
        cycles=[cycle],
    )


def is_current_leader(team: TeamContext, game: GameContext) -> bool:
    return bool(game.leader_by_cycle) and game.leader_by_cycle[-1] == team.team_id


def was_bottom(results: Sequence[CycleResult], ratio: float) -> bool:
    if len(results) < 2:
        return False
    totals = [r.scores.total for r in results]
    mean_total = math.fsum(totals) / len(totals)
    return min(totals) < mean_total * ratio


def eval_leading(team: TeamContext, game: GameContext) -> TriggerResult:
    leader = is_current_leader(team, game)
    return TriggerResult.of(
        TriggerType.LEADING_TEAM,
        fired=leader,
        intensity=1.0 if leader else 0.0,
        context="Currently leading" if leader else f"Total score: {round1(team.cumulative_score.total)}",
    )


def eval_struggling(team: TeamContext, game: GameContext) -> TriggerResult:
    totals = [t.cumulative_score.total for t in game.teams]
    own = team.cumulative_score.total
    struggling = len(totals) >= 2 and own == min(totals) and max(totals) > own
    return TriggerResult.of(
        TriggerType.STRUGGLING_TEAM,
        fired=struggling,
        intensity=STRUGGLING_INTENSITY if struggling else 0.0,
        context="Lowest cumulative score" if struggling else "Not at the bottom",
    )


def eval_comeback_and_lead_lost(
    team: TeamContext, game: GameContext, th: TriggerThresholds
) -> list[TriggerResult]:
    if len(team.results) < POSITION_MIN_RESULTS or len(game.leader_by_cycle) < POSITION_MIN_LEADERS:
        return []
    leader = is_current_leader(team, game)
    early_leader = team.team_id in game.leader_by_cycle[:EARLY_LEADER_WINDOW]
    comeback = was_bottom(team.results, th.was_bottom_ratio) and leader
    lead_lost = early_leader and not leader
    return [
        TriggerResult.of(
            TriggerType.COMEBACK,
            fired=comeback,
            intensity=POSITION_INTENSITY if comeback else 0.0,
            context="Staged a comeback to lead" if comeback else "No major comeback",
        ),
        TriggerResult.of(
            TriggerType.EARLY_LEAD_LOST,
            fired=lead_lost,
            intensity=POSITION_INTENSITY if lead_lost else 0.0,
            context="Led early but fell behind" if lead_lost else "Maintained position",
        ),
    ]
