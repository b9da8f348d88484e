"""Triggers: operational metric thresholds.

Category:
  - Performance (backlog, DNA rate, high-risk caseload, neonatal admissions).

Trigger summary:
  - backlog_growing above high_backlog; backlog_reduced below low_backlog.
  - dna_rate_high above high_dna_rate; dna_rate_improved when the latest rate
    fell by at least dna_improvement versus the previous cycle.
  - high_risk_proportion above its threshold; neonatal_admissions_high at or above.
"""

from __future__ import annotations

from typing import Sequence

from ..domain.bounds import round1
from ..domain.enums import TriggerType
from ..domain.models import CycleResult
from .models import TriggerResult
from .thresholds import TriggerThresholds

BACKLOG_SCALE = 100.0
DNA_SCALE = 30.0
DNA_IMPROVEMENT_SCALE = 10.0
HIGH_RISK_SCALE = 50.0
NEONATAL_SCALE = 8.0


def eval_metrics(results: Sequence[CycleResult], th: TriggerThresholds, cycle: int) -> list[TriggerResult]:
    latest = results[-1].metrics
    triggers = [
        TriggerResult.of(
            TriggerType.BACKLOG_GROWING,
            fired=latest.backlog > th.high_backlog,
            intensity=latest.backlog / BACKLOG_SCALE,
            context=f"Backlog at {latest.backlog} patients",
            cycles=[r.cycle for r in results if r.metrics.backlog > th.high_backlog],
        ),
        TriggerResult.of(
            TriggerType.BACKLOG_REDUCED,
            fired=latest.backlog < th.low_backlog,
            intensity=1 - latest.backlog / th.high_backlog,
            context=f"Backlog reduced to {latest.backlog} patients",
            cycles=[cycle],
        ),
        TriggerResult.of(
            TriggerType.DNA_RATE_HIGH,
            fired=latest.dna_rate > th.high_dna_rate,
            intensity=latest.dna_rate / DNA_SCALE,
            context=f"DNA rate at {latest.dna_rate}%",
            cycles=[r.cycle for r in results if r.metrics.dna_rate > th.high_dna_rate],
        ),
    ]
    if len(results) >= 2:
        drop = results[-2].metrics.dna_rate - latest.dna_rate
        improved = drop >= th.dna_improvement
        triggers.append(
            TriggerResult.of(
                TriggerType.DNA_RATE_IMPROVED,
                fired=improved,
                intensity=drop / DNA_IMPROVEMENT_SCALE,
                context=f"DNA rate fell by {round1(drop)} points" if improved else "DNA rate steady",
                cycles=[cycle],
            )
        )
    triggers.append(
        TriggerResult.of(
            TriggerType.HIGH_RISK_PROPORTION,
            fired=latest.high_risk_share > th.high_risk_proportion,
            intensity=latest.high_risk_share / HIGH_RISK_SCALE,
            context=f"High-risk proportion at {latest.high_risk_share}%",
            cycles=[cycle],
        )
    )
    triggers.append(
        TriggerResult.of(
            TriggerType.NEONATAL_ADMISSIONS_HIGH,
            fired=latest.neonatal_admissions >= th.high_neonatal,
            intensity=latest.neonatal_admissions / NEONATAL_SCALE,
            context=f"{latest.neonatal_admissions} neonatal admissions",
            cycles=[cycle],
        )
    )
    return triggers
