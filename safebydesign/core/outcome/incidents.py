"""Incident count and incident descriptions.

Category:
  - Safety outcomes.

Contract:
  - incident_count: cycle baseline, plus one on a coin flip when no selected
    decision carries the safety_mechanism flag from the third cycle on.
  - describe_incidents: each rule whose condition holds draws one coin; the list
    is truncated to the count. The count is authoritative, so the list may be
    shorter than the count but never longer.

Edge cases:
  - A zero count returns no descriptions and consumes no draws.
  - Rule draws only happen when the rule's condition holds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from ..domain.enums import DecisionFlag, IncidentSeverity, Metric, Pillar
from ..domain.models import Decision, Incident
from ..rng import RandomStream
from .baselines import INCIDENT_BASELINE, cycle_index

UNMITIGATED_FROM_INDEX = 2
UNMITIGATED_COIN = 0.5


@dataclass(frozen=True)
class IncidentRule:
    incident_type: str
    severity: IncidentSeverity
    description: str
    draw_above: float
    condition: Callable[[int, dict[Pillar, float], dict[Metric, float]], bool]


INCIDENT_RULES: tuple[IncidentRule, ...] = (
    IncidentRule(
        incident_type="documentation_gap",
        severity=IncidentSeverity.MEDIUM,
        description="Escalation pathway not followed for woman with deteriorating glucose control",
        draw_above=0.5,
        condition=lambda cycle, scores, metrics: scores[Pillar.SAFETY] < 65,
    ),
    IncidentRule(
        incident_type="missed_appointment",
        severity=IncidentSeverity.MEDIUM,
        description="Woman missed consecutive appointments and presented in DKA at 34 weeks",
        draw_above=0.6,
        condition=lambda cycle, scores, metrics: metrics[Metric.DNA_RATE] > 20,
    ),
    IncidentRule(
        incident_type="handover_failure",
        severity=IncidentSeverity.HIGH,
        description="Critical information not handed over due to staff absence and workload pressure",
        draw_above=0.7,
        condition=lambda cycle, scores, metrics: metrics[Metric.STAFF_SICKNESS] > 20,
    ),
    IncidentRule(
        incident_type="access_barrier",
        severity=IncidentSeverity.MEDIUM,
        description="Language barrier resulted in misunderstanding about insulin administration",
        draw_above=0.7,
        condition=lambda cycle, scores, metrics: cycle >= 4 and scores[Pillar.EQUITY] < 60,
    ),
)


def incident_count(cycle: int, selected: Sequence[Decision], rand: RandomStream) -> int:
    idx = cycle_index(cycle)
    count = INCIDENT_BASELINE[idx]
    mitigated = any(d.has_flag(DecisionFlag.SAFETY_MECHANISM) for d in selected)
    if not mitigated and idx >= UNMITIGATED_FROM_INDEX:
        if rand() > UNMITIGATED_COIN:
            count += 1
    return count


def describe_incidents(
    cycle: int,
    count: int,
    scores: dict[Pillar, float],
    metrics: dict[Metric, float],
    rand: RandomStream,
) -> tuple[Incident, ...]:
    if count == 0:
        return ()
    incidents: list[Incident] = []
    for rule in INCIDENT_RULES:
        if rule.condition(cycle, scores, metrics) and rand() > rule.draw_above:
            incidents.append(
                Incident(type=rule.incident_type, severity=rule.severity, description=rule.description)
            )
    return tuple(incidents[:count])
