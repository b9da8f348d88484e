"""Tunable thresholds for trigger detection.

Defaults reflect the current game balance; a detector may be built with overrides.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.enums import Pillar


@dataclass(frozen=True)
class TriggerThresholds:
    low_safety: float = 55
    high_safety: float = 75
    low_equity: float = 55
    high_equity: float = 75
    low_staff: float = 55
    high_staff: float = 75
    low_resilience: float = 55
    high_resilience: float = 75
    incident_count: int = 1
    high_sickness: float = 15
    critical_sickness: float = 25
    high_backlog: float = 50
    low_backlog: float = 20
    high_dna_rate: float = 15
    dna_improvement: float = 3
    high_risk_proportion: float = 35
    high_neonatal: int = 5
    pillar_imbalance: float = 15
    single_focus_factor: float = 1.5
    was_bottom_ratio: float = 0.8

    def low(self, pillar: Pillar) -> float:
        return float(getattr(self, f"low_{pillar.value}"))

    def high(self, pillar: Pillar) -> float:
        return float(getattr(self, f"high_{pillar.value}"))

    def validate(self) -> None:
        for pillar in Pillar:
            if self.low(pillar) >= self.high(pillar):
                raise ValueError(f"low_{pillar.value} must be < high_{pillar.value}")
        if self.high_sickness > self.critical_sickness:
            raise ValueError("high_sickness must be <= critical_sickness")
        if self.low_backlog >= self.high_backlog:
            raise ValueError("low_backlog must be < high_backlog")
        if self.incident_count < 1:
            raise ValueError("incident_count must be >= 1")
        if self.pillar_imbalance <= 0:
            raise ValueError("pillar_imbalance must be > 0")
        if not 0 < self.was_bottom_ratio <= 1:
            raise ValueError("was_bottom_ratio must be within (0, 1]")


DEFAULT_THRESHOLDS = TriggerThresholds()
