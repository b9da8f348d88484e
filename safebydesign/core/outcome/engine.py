"""Outcome engine for a single team and cycle.

Responsibilities:
  - Sequence pillar scoring, metrics, incident count and incident descriptions
    over one seeded stream.
  - Produce a CycleResult ready for persistence.

Inputs/Outputs:
  - Inputs: OutcomeContext (team, game, cycle, scenario seed, selected decisions,
    prior selections for delayed effects).
  - Outputs: CycleResult.

Invariants:
  - For fixed inputs (and a fixed calculated_at) the result is identical on every call.
  - Pillars are in [0, 100] and total is their exact sum.
  - Must not validate budgets or filter unknown ids; callers resolve decisions first.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ..domain.enums import Metric, Pillar
from ..domain.models import CycleResult, Decision, OperationalMetrics, ScoreBreakdown
from ..rng import outcome_seed, seeded_stream
from .baselines import baseline_metrics, baseline_pillars, cycle_index
from .incidents import describe_incidents, incident_count
from .metrics import compute_metrics, neonatal_admissions
from .scoring import score_pillars

_DEBUG_FN: Callable[[str], None] | None = None


def set_outcome_debug(fn: Callable[[str], None] | None) -> None:
    global _DEBUG_FN
    _DEBUG_FN = fn


@dataclass(frozen=True)
class OutcomeContext:
    team_id: str
    game_id: str
    cycle: int
    scenario_seed: int
    selected_decisions: Sequence[Decision]
    # (cycle, decisions) for earlier cycles; drives delayed effects
    prior_selections: Sequence[tuple[int, Sequence[Decision]]] = field(default_factory=tuple)
    previous_result: Optional[CycleResult] = None
    calculated_at: Optional[str] = None


def result_id(game_id: str, team_id: str, cycle: int) -> str:
    return f"{game_id}-{team_id}-{cycle}"


def calculate_cycle_results(ctx: OutcomeContext) -> CycleResult:
    idx = cycle_index(ctx.cycle)
    rand = seeded_stream(outcome_seed(ctx.scenario_seed, ctx.team_id, ctx.cycle))

    pillars = score_pillars(
        base=baseline_pillars(ctx.cycle),
        cycle=ctx.cycle,
        selected=ctx.selected_decisions,
        prior_selections=ctx.prior_selections,
        rand=rand,
    )
    scores = ScoreBreakdown.from_pillars(
        safety=pillars[Pillar.SAFETY],
        equity=pillars[Pillar.EQUITY],
        staff=pillars[Pillar.STAFF],
        resilience=pillars[Pillar.RESILIENCE],
    )

    metric_values = compute_metrics(baseline_metrics(ctx.cycle), ctx.selected_decisions, rand)
    count = incident_count(ctx.cycle, ctx.selected_decisions, rand)
    admissions = neonatal_admissions(idx, rand)
    metrics = OperationalMetrics(
        backlog=int(metric_values[Metric.BACKLOG]),
        dna_rate=metric_values[Metric.DNA_RATE],
        staff_sickness=metric_values[Metric.STAFF_SICKNESS],
        high_risk_share=metric_values[Metric.HIGH_RISK_SHARE],
        incidents=count,
        neonatal_admissions=admissions,
    )

    incidents = describe_incidents(ctx.cycle, count, pillars, metric_values, rand)

    calculated_at = ctx.calculated_at
    if calculated_at is None:
        calculated_at = datetime.datetime.now(datetime.timezone.utc).isoformat()

    if _DEBUG_FN is not None:
        _DEBUG_FN(
            "OUTCOME "
            f"game={ctx.game_id} team={ctx.team_id} cycle={ctx.cycle} "
            f"decisions={[d.id for d in ctx.selected_decisions]} total={scores.total:.2f} "
            f"incidents={count} described={len(incidents)}"
        )

    return CycleResult(
        id=result_id(ctx.game_id, ctx.team_id, ctx.cycle),
        game_id=ctx.game_id,
        cycle=ctx.cycle,
        team_id=ctx.team_id,
        scores=scores,
        metrics=metrics,
        incidents=incidents,
        calculated_at=calculated_at,
    )
