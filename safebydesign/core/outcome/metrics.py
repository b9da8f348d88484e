"""Operational metrics for one team and cycle.

Draw order: catalog trade-offs targeting metrics, then backlog, DNA rate and
sickness jitter. Incident count and neonatal admissions are drawn afterwards by
the engine.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..domain.bounds import clamp_field, round1
from ..domain.enums import Metric
from ..domain.models import Decision
from ..rng import RandomStream
from .scoring import apply_tradeoffs

BACKLOG_JITTER = 10.0
DNA_JITTER = 3.0
SICKNESS_JITTER = 4.0


def compute_metrics(
    base: dict[Metric, float],
    selected: Sequence[Decision],
    rand: RandomStream,
) -> dict[Metric, float]:
    values = {metric.value: base[metric] for metric in Metric}
    for decision in selected:
        for metric, delta in decision.metric_deltas.items():
            values[metric.value] += delta
    values = apply_tradeoffs(values, selected, rand)

    backlog = values[Metric.BACKLOG.value] + math.floor((rand() - 0.5) * BACKLOG_JITTER)
    dna_rate = values[Metric.DNA_RATE.value] + (rand() - 0.5) * DNA_JITTER
    sickness = values[Metric.STAFF_SICKNESS.value] + (rand() - 0.5) * SICKNESS_JITTER

    return {
        Metric.BACKLOG: float(int(clamp_field("backlog", backlog))),
        Metric.DNA_RATE: round1(clamp_field("dna_rate", dna_rate)),
        Metric.STAFF_SICKNESS: round1(clamp_field("staff_sickness", sickness)),
        Metric.HIGH_RISK_SHARE: round1(values[Metric.HIGH_RISK_SHARE.value]),
    }


def neonatal_admissions(cycle_idx: int, rand: RandomStream) -> int:
    return int(math.floor(2 + cycle_idx + rand() * 3))
