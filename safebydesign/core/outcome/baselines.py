"""Cycle-indexed baseline tables.

Pressure rises through cycle 5 and eases slightly in cycle 6.
Index 0 is cycle 1.
"""

from __future__ import annotations

from ..domain.enums import Metric, Pillar

PILLAR_BASELINES: dict[Pillar, tuple[float, ...]] = {
    Pillar.SAFETY: (75, 73, 70, 68, 65, 67),
    Pillar.EQUITY: (70, 68, 65, 62, 60, 62),
    Pillar.STAFF: (80, 75, 70, 65, 60, 63),
    Pillar.RESILIENCE: (75, 72, 68, 64, 60, 62),
}

METRIC_BASELINES: dict[Metric, tuple[float, ...]] = {
    Metric.BACKLOG: (15, 25, 35, 45, 55, 50),
    Metric.DNA_RATE: (12, 15, 18, 22, 25, 23),
    Metric.STAFF_SICKNESS: (5, 8, 12, 18, 25, 22),
    Metric.HIGH_RISK_SHARE: (35, 40, 45, 50, 52, 50),
}

INCIDENT_BASELINE: tuple[int, ...] = (0, 0, 1, 1, 2, 1)

BASELINE_CYCLES = len(INCIDENT_BASELINE)


def cycle_index(cycle: int) -> int:
    if cycle < 1 or cycle > BASELINE_CYCLES:
        raise ValueError(f"cycle must be within 1..{BASELINE_CYCLES}, got {cycle}")
    return cycle - 1


def baseline_pillars(cycle: int) -> dict[Pillar, float]:
    idx = cycle_index(cycle)
    return {pillar: float(table[idx]) for pillar, table in PILLAR_BASELINES.items()}


def baseline_metrics(cycle: int) -> dict[Metric, float]:
    idx = cycle_index(cycle)
    return {metric: float(table[idx]) for metric, table in METRIC_BASELINES.items()}
