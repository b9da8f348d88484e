"""Per-team cycle summary published with results.

Contract:
  - Inputs: the team's result for this cycle, its previous result (if any) and
    the decisions it chose.
  - Output: up to SUMMARY_LINES "what happened" lines and any notable trade-offs.

Trade-off notes are driven by catalog data (flags, categories, declared
trade-off rules), never by decision ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..domain.enums import DecisionCategory, DecisionFlag, Metric, Pillar
from ..domain.models import CycleResult, Decision
from ..domain.bounds import round_half_up

SUMMARY_LINES = 3
PILLAR_CHANGE = 5.0
BACKLOG_JUMP = 10
DNA_JUMP = 3.0
SICKNESS_JUMP = 5.0
STRONG_DROP = 8.0
SHORT_TERM_BACKLOG = 30

PILLAR_LABELS: dict[Pillar, tuple[str, str, str]] = {
    Pillar.SAFETY: ("Safety", "improved", "declined"),
    Pillar.EQUITY: ("Equity", "improved", "declined"),
    Pillar.STAFF: ("Staff wellbeing", "improved", "declined"),
    Pillar.RESILIENCE: ("System resilience", "increased", "decreased"),
}


@dataclass(frozen=True)
class CycleSummary:
    team_id: str
    cycle: int
    what_happened: tuple[str, ...]
    notable_tradeoffs: tuple[str, ...]


def _delta(current: CycleResult, previous: CycleResult, pillar: Pillar) -> float:
    return current.scores.pillar(pillar) - previous.scores.pillar(pillar)


def _what_happened(
    current: CycleResult, previous: Optional[CycleResult], decisions: Sequence[Decision]
) -> list[str]:
    lines: list[str] = []
    if previous is not None:
        for pillar, (label, up, down) in PILLAR_LABELS.items():
            delta = _delta(current, previous, pillar)
            if abs(delta) > PILLAR_CHANGE:
                lines.append(
                    f"{label} {up if delta > 0 else down} by {abs(round_half_up(delta))} points "
                    f"to {round_half_up(current.scores.pillar(pillar))}"
                )
        cur, prev = current.metrics, previous.metrics
        if cur.backlog > prev.backlog + BACKLOG_JUMP:
            lines.append(f"Backlog increased significantly to {cur.backlog} women waiting")
        if cur.dna_rate > prev.dna_rate + DNA_JUMP:
            lines.append(f"DNA rate rose to {cur.dna_rate}%")
        if cur.staff_sickness > prev.staff_sickness + SICKNESS_JUMP:
            lines.append(f"Staff sickness increased to {cur.staff_sickness}%")

    if current.incidents:
        lines.append(f"{len(current.incidents)} incident(s) occurred this cycle")

    categories: list[str] = []
    for decision in decisions:
        label = decision.category.value.replace("_", " ")
        if label not in categories:
            categories.append(label)
    if categories:
        lines.append(f"Team focused investments in: {', '.join(categories)}")
    return lines[:SUMMARY_LINES]


def _notable_tradeoffs(
    current: CycleResult, previous: Optional[CycleResult], decisions: Sequence[Decision]
) -> list[str]:
    if previous is None:
        return []
    notes: list[str] = []
    safety = _delta(current, previous, Pillar.SAFETY)
    equity = _delta(current, previous, Pillar.EQUITY)
    staff = _delta(current, previous, Pillar.STAFF)
    resilience = _delta(current, previous, Pillar.RESILIENCE)

    if safety > PILLAR_CHANGE and equity < -PILLAR_CHANGE:
        notes.append("Safety improved but at the cost of equitable access - some groups were likely deprioritised")
    elif equity > PILLAR_CHANGE and safety < -PILLAR_CHANGE:
        notes.append("Access expanded but safety mechanisms may have been compromised")

    if staff < -STRONG_DROP and current.metrics.backlog < previous.metrics.backlog:
        notes.append("Reduced backlog but team wellbeing suffered - sustainable?")

    for decision in decisions:
        if resilience < -STRONG_DROP and decision.has_flag(DecisionFlag.BANK_STAFF):
            notes.append(f"{decision.name} provided immediate capacity but reduced resilience and continuity")
        capacity_cost = decision.metric_deltas.get(Metric.BACKLOG, 0.0) > 0
        if (
            decision.has_flag(DecisionFlag.TRAINING)
            and capacity_cost
            and current.metrics.backlog > SHORT_TERM_BACKLOG
        ):
            notes.append(f"{decision.name} invested in long-term capability but increased short-term waiting")
        staff_drag = any(r.target == Pillar.STAFF.value and r.delta < 0 for r in decision.tradeoffs)
        if decision.category == DecisionCategory.DIGITAL_MONITORING and staff_drag and staff < -PILLAR_CHANGE:
            notes.append(f"{decision.name} rollout consumed staff energy during implementation phase")
    return notes


def summarize_cycle(
    current: CycleResult,
    previous: Optional[CycleResult],
    decisions: Sequence[Decision],
) -> CycleSummary:
    return CycleSummary(
        team_id=current.team_id,
        cycle=current.cycle,
        what_happened=tuple(_what_happened(current, previous, decisions)),
        notable_tradeoffs=tuple(_notable_tradeoffs(current, previous, decisions)),
    )
