"""Triggers: incident history, decision patterns and staff sickness.

Category:
  - History-wide observations (all cycles so far, not only the latest).

Contract:
  - Inputs: a team's cycle results and resolved decision history.
  - Output: TriggerResult per evaluated trigger, fired or not.

Trigger summary:
  - incident_occurred: total incidents across all cycles reaches the threshold.
  - documentation_gap / access_barrier: incidents of that type appear in history.
  - Decision-pattern triggers: count cycles whose submission contains a decision
    carrying the catalog flag (exact membership, never id matching).
  - high_sickness: any cycle above the high threshold; burnout_risk: latest above critical.

Edge cases:
  - Empty history never reaches these evaluators; the detector returns early.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..domain.enums import DecisionFlag, TriggerType
from ..domain.models import CycleResult, Decision
from .models import TriggerResult
from .thresholds import TriggerThresholds

INCIDENT_SPAN = 3.0
INCIDENT_TYPE_SPAN = 2.0
SICKNESS_SCALE = 40.0


@dataclass(frozen=True)
class FlagTrigger:
    trigger: TriggerType
    flag: DecisionFlag
    divisor: float
    fired_context: str
    idle_context: str


FLAG_TRIGGERS: dict[TriggerType, FlagTrigger] = {
    t.trigger: t
    for t in (
        FlagTrigger(
            TriggerType.ESCALATION_IMPROVED,
            DecisionFlag.ESCALATION,
            3,
            "Invested in escalation/audit processes",
            "No escalation improvements",
        ),
        FlagTrigger(
            TriggerType.TRIAGE_TIGHTENED,
            DecisionFlag.TRIAGE,
            2,
            "Tightened triage criteria",
            "Standard triage",
        ),
        FlagTrigger(
            TriggerType.INTERPRETER_USED,
            DecisionFlag.INTERPRETER,
            2,
            "Invested in language support",
            "No language support",
        ),
        FlagTrigger(
            TriggerType.TRAINING_INVESTED,
            DecisionFlag.TRAINING,
            3,
            "Invested in staff development {count} time(s)",
            "No staff development investment",
        ),
        FlagTrigger(
            TriggerType.BANK_STAFF_USED,
            DecisionFlag.BANK_STAFF,
            2,
            "Used bank/agency staff",
            "Core staff only",
        ),
        FlagTrigger(
            TriggerType.GOVERNANCE_IMPROVED,
            DecisionFlag.GOVERNANCE,
            3,
            "Invested in governance/standards",
            "No governance investment",
        ),
    )
}


def eval_incidents(results: Sequence[CycleResult], th: TriggerThresholds) -> TriggerResult:
    total = sum(r.metrics.incidents for r in results)
    return TriggerResult.of(
        TriggerType.INCIDENT_OCCURRED,
        fired=total >= th.incident_count,
        intensity=total / INCIDENT_SPAN,
        context=f"{total} incident(s) occurred" if total > 0 else "No incidents",
        cycles=[r.cycle for r in results if r.metrics.incidents > 0],
    )


def eval_incident_type(
    results: Sequence[CycleResult], trigger: TriggerType, incident_type: str, label: str
) -> TriggerResult:
    cycles = [r.cycle for r in results if any(i.type == incident_type for i in r.incidents)]
    count = sum(1 for r in results for i in r.incidents if i.type == incident_type)
    return TriggerResult.of(
        trigger,
        fired=count > 0,
        intensity=count / INCIDENT_TYPE_SPAN,
        context=f"{label} reported {count} time(s)" if count > 0 else f"No {label.lower()} reported",
        cycles=cycles,
    )


def eval_decision_flag(
    decisions: Sequence[tuple[int, Sequence[Decision]]], spec: FlagTrigger
) -> TriggerResult:
    cycles = [cycle for cycle, chosen in decisions if any(d.has_flag(spec.flag) for d in chosen)]
    count = len(cycles)
    return TriggerResult.of(
        spec.trigger,
        fired=count > 0,
        intensity=count / spec.divisor,
        context=spec.fired_context.format(count=count) if count > 0 else spec.idle_context,
        cycles=cycles,
    )


def eval_sickness(
    results: Sequence[CycleResult], th: TriggerThresholds, cycle: int
) -> list[TriggerResult]:
    high_cycles = [r for r in results if r.metrics.staff_sickness > th.high_sickness]
    peak = max(r.metrics.staff_sickness for r in results)
    latest = results[-1].metrics.staff_sickness
    critical = latest > th.critical_sickness
    if high_cycles:
        high_context = f"Staff sickness hit {max(r.metrics.staff_sickness for r in high_cycles)}%"
    else:
        high_context = "Staff sickness manageable"
    return [
        TriggerResult.of(
            TriggerType.HIGH_SICKNESS,
            fired=bool(high_cycles),
            intensity=peak / SICKNESS_SCALE,
            context=high_context,
            cycles=[r.cycle for r in high_cycles],
        ),
        TriggerResult.of(
            TriggerType.BURNOUT_RISK,
            fired=critical,
            intensity=latest / SICKNESS_SCALE,
            context=f"Critical staff sickness at {latest}%" if critical else "Staff sickness under control",
            cycles=[cycle],
        ),
    ]
