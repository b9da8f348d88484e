"""Trigger detection for one team.

Responsibilities:
  - Evaluate every trigger family against a team's history and game position.
  - Keep a stable output order so ties in later ranking are deterministic.

Inputs/Outputs:
  - Inputs: TeamContext, GameContext, TriggerThresholds.
  - Outputs: list of TriggerResult (fired and not fired); each type at most once.

Invariants:
  - A team with zero results yields exactly one entry: first_cycle.
  - Intensities are within [0, 1].
"""

from __future__ import annotations

from typing import Optional

from ..domain.enums import Pillar, TriggerType
from .models import GameContext, TeamContext, TriggerResult
from .thresholds import DEFAULT_THRESHOLDS, TriggerThresholds
from .triggers_history import (
    FLAG_TRIGGERS,
    eval_decision_flag,
    eval_incident_type,
    eval_incidents,
    eval_sickness,
)
from .triggers_metrics import eval_metrics
from .triggers_pillars import (
    eval_balance,
    eval_pillar_focus,
    eval_pillar_neglect,
    eval_system_fragile,
)
from .triggers_position import (
    eval_comeback_and_lead_lost,
    eval_first_cycle,
    eval_leading,
    eval_struggling,
)


class TriggerDetector:
    def __init__(self, thresholds: Optional[TriggerThresholds] = None) -> None:
        self._th = thresholds or DEFAULT_THRESHOLDS
        self._th.validate()

    @property
    def thresholds(self) -> TriggerThresholds:
        return self._th

    def detect(self, team: TeamContext, game: GameContext) -> list[TriggerResult]:
        th = self._th
        cycle = team.current_cycle
        triggers = [eval_first_cycle(cycle)]
        if not team.results:
            return triggers

        results = team.results
        scores = results[-1].scores

        def flag(trigger: TriggerType) -> TriggerResult:
            return eval_decision_flag(team.decisions, FLAG_TRIGGERS[trigger])

        # safety
        triggers.append(eval_pillar_focus(scores, Pillar.SAFETY, th, cycle))
        triggers.append(eval_pillar_neglect(scores, Pillar.SAFETY, th, cycle))
        triggers.append(eval_incidents(results, th))
        triggers.append(flag(TriggerType.ESCALATION_IMPROVED))
        triggers.append(
            eval_incident_type(results, TriggerType.DOCUMENTATION_GAP, "documentation_gap", "Documentation gap")
        )
        # equity
        triggers.append(eval_pillar_focus(scores, Pillar.EQUITY, th, cycle))
        triggers.append(eval_pillar_neglect(scores, Pillar.EQUITY, th, cycle))
        triggers.append(flag(TriggerType.TRIAGE_TIGHTENED))
        triggers.append(flag(TriggerType.INTERPRETER_USED))
        triggers.append(
            eval_incident_type(results, TriggerType.ACCESS_BARRIER, "access_barrier", "Access barrier")
        )
        # staff
        triggers.append(eval_pillar_focus(scores, Pillar.STAFF, th, cycle))
        triggers.append(eval_pillar_neglect(scores, Pillar.STAFF, th, cycle))
        triggers.extend(eval_sickness(results, th, cycle))
        triggers.append(flag(TriggerType.TRAINING_INVESTED))
        triggers.append(flag(TriggerType.BANK_STAFF_USED))
        # resilience
        triggers.append(eval_pillar_focus(scores, Pillar.RESILIENCE, th, cycle))
        triggers.append(eval_pillar_neglect(scores, Pillar.RESILIENCE, th, cycle))
        triggers.append(flag(TriggerType.GOVERNANCE_IMPROVED))
        triggers.append(eval_system_fragile(scores, th, cycle))
        # performance
        triggers.extend(eval_metrics(results, th, cycle))
        # position
        triggers.extend(eval_balance(scores, th))
        triggers.append(eval_leading(team, game))
        triggers.append(eval_struggling(team, game))
        triggers.extend(eval_comeback_and_lead_lost(team, game, th))
        return triggers

    def fired(self, team: TeamContext, game: GameContext) -> list[TriggerResult]:
        return [t for t in self.detect(team, game) if t.fired]
