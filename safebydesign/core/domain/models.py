"""Domain models for games, teams, decisions and cycle results.

Responsibilities:
  - Define immutable data carriers for catalog entries, game records and results.

Inputs/Outputs:
  - Game, Team, DecisionSubmission and CycleResult are persisted by infra layers.
  - Decision, CycleBrief and RandomEvent are loaded once from static content.

Invariants:
  - Models must be deterministic containers; arithmetic helpers return new objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .enums import (
    DecisionCategory,
    DecisionFlag,
    DecisionTiming,
    EffectTag,
    EventSeverity,
    GameStatus,
    IncidentSeverity,
    Metric,
    Pillar,
)


@dataclass(frozen=True)
class Budgets:
    capacity_points: int = 0
    staff_energy: int = 0
    cash_budget: int = 0

    def plus(self, other: Budgets) -> Budgets:
        return Budgets(
            capacity_points=self.capacity_points + other.capacity_points,
            staff_energy=self.staff_energy + other.staff_energy,
            cash_budget=self.cash_budget + other.cash_budget,
        )

    def overruns(self, allowance: Budgets) -> list[str]:
        """Return the names of dimensions where this spend exceeds the allowance."""
        over: list[str] = []
        if self.capacity_points > allowance.capacity_points:
            over.append("capacity_points")
        if self.staff_energy > allowance.staff_energy:
            over.append("staff_energy")
        if self.cash_budget > allowance.cash_budget:
            over.append("cash_budget")
        return over

    def to_dict(self) -> dict[str, int]:
        return {
            "capacity_points": self.capacity_points,
            "staff_energy": self.staff_energy,
            "cash_budget": self.cash_budget,
        }


@dataclass(frozen=True)
class TradeoffRule:
    # target is a Pillar or Metric value, e.g. "equity" or "backlog"
    target: str
    delta: float
    chance: float = 1.0


@dataclass(frozen=True)
class Decision:
    id: str
    name: str
    description: str
    category: DecisionCategory
    costs: Budgets
    effect_tags: tuple[EffectTag, ...]
    timing: DecisionTiming
    delayed_cycles: int = 1
    effect_adjustments: Mapping[Pillar, float] = field(default_factory=dict)
    tradeoffs: tuple[TradeoffRule, ...] = ()
    metric_deltas: Mapping[Metric, float] = field(default_factory=dict)
    flags: frozenset[DecisionFlag] = frozenset()

    def __post_init__(self) -> None:
        # Catalog entries are shared by every game; their maps are read-only copies.
        object.__setattr__(self, "effect_adjustments", MappingProxyType(dict(self.effect_adjustments)))
        object.__setattr__(self, "metric_deltas", MappingProxyType(dict(self.metric_deltas)))

    def has_flag(self, flag: DecisionFlag) -> bool:
        return flag in self.flags

    def applies_immediately(self) -> bool:
        return self.timing in (DecisionTiming.IMMEDIATE, DecisionTiming.BOTH)

    def applies_delayed(self) -> bool:
        return self.timing in (DecisionTiming.DELAYED, DecisionTiming.BOTH)


@dataclass(frozen=True)
class ScoreBreakdown:
    safety: float = 0.0
    equity: float = 0.0
    staff: float = 0.0
    resilience: float = 0.0
    total: float = 0.0

    @classmethod
    def from_pillars(cls, safety: float, equity: float, staff: float, resilience: float) -> ScoreBreakdown:
        return cls(
            safety=safety,
            equity=equity,
            staff=staff,
            resilience=resilience,
            total=safety + equity + staff + resilience,
        )

    def pillar(self, pillar: Pillar) -> float:
        return float(getattr(self, pillar.value))

    def plus(self, other: ScoreBreakdown) -> ScoreBreakdown:
        return ScoreBreakdown(
            safety=self.safety + other.safety,
            equity=self.equity + other.equity,
            staff=self.staff + other.staff,
            resilience=self.resilience + other.resilience,
            total=self.total + other.total,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "safety": self.safety,
            "equity": self.equity,
            "staff": self.staff,
            "resilience": self.resilience,
            "total": self.total,
        }


@dataclass(frozen=True)
class OperationalMetrics:
    backlog: int
    dna_rate: float
    staff_sickness: float
    high_risk_share: float
    incidents: int
    neonatal_admissions: int

    def to_dict(self) -> dict[str, float]:
        return {
            "backlog": self.backlog,
            "dna_rate": self.dna_rate,
            "staff_sickness": self.staff_sickness,
            "high_risk_share": self.high_risk_share,
            "incidents": self.incidents,
            "neonatal_admissions": self.neonatal_admissions,
        }


@dataclass(frozen=True)
class Incident:
    type: str
    severity: IncidentSeverity
    description: str


@dataclass(frozen=True)
class CycleResult:
    id: str
    game_id: str
    cycle: int
    team_id: str
    scores: ScoreBreakdown
    metrics: OperationalMetrics
    incidents: tuple[Incident, ...]
    calculated_at: str


@dataclass(frozen=True)
class Game:
    id: str
    code: str
    created_at: str
    status: GameStatus
    number_of_teams: int
    current_cycle: int
    scenario_seed: int
    facilitator_name: Optional[str] = None


@dataclass(frozen=True)
class Team:
    id: str
    game_id: str
    name: str
    joined_at: str
    cumulative_score: ScoreBreakdown = ScoreBreakdown()
    role_assignments: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DecisionSubmission:
    team_id: str
    game_id: str
    cycle: int
    decision_ids: tuple[str, ...]
    submitted_at: str
    budgets_used: Budgets


@dataclass(frozen=True)
class CycleBrief:
    cycle: int
    title: str
    description: str
    pressure_level: int
    signals: tuple[str, ...]


@dataclass(frozen=True)
class RandomEvent:
    id: str
    title: str
    description: str
    severity: EventSeverity
    effect: str
    # sparse deltas keyed by SystemState field name
    impacts: Mapping[str, float]
    cycle: Optional[int] = None
    min_cycle: Optional[int] = None
    max_cycle: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "impacts", MappingProxyType(dict(self.impacts)))

    def eligible_for(self, cycle: int) -> bool:
        if self.cycle is not None and self.cycle != cycle:
            return False
        if self.min_cycle is not None and cycle < self.min_cycle:
            return False
        if self.max_cycle is not None and cycle > self.max_cycle:
            return False
        return True


@dataclass(frozen=True)
class SystemState:
    backlog: float = 35
    dna_rate: float = 8
    staff_sickness: float = 12
    staff_morale: float = 72
    safety_risk: float = 0
    capacity_modifier: float = 1.0

    def to_dict(self) -> dict[str, float]:
        return {
            "backlog": self.backlog,
            "dna_rate": self.dna_rate,
            "staff_sickness": self.staff_sickness,
            "staff_morale": self.staff_morale,
            "safety_risk": self.safety_risk,
            "capacity_modifier": self.capacity_modifier,
        }
