"""Triggers: pillar focus/neglect, system fragility and pillar balance.

Category:
  - Safety, equity, staff and resilience pillars; strategy shape.

Contract:
  - Inputs: latest ScoreBreakdown and thresholds.
  - Output: TriggerResult per evaluated trigger, fired or not.
  - Determinism: pure function of the latest scores.

Trigger summary:
  - Focus fires at or above the pillar's high threshold; intensity ramps from FOCUS_FLOOR.
  - Neglect fires below the pillar's low threshold; intensity ramps over NEGLECT_SPAN.
  - System fragile fires when at least two pillars are below their low threshold.
  - Balanced fires when the pillar spread is below the imbalance threshold;
    single focus fires at imbalance * single_focus_factor or more.

Edge cases:
  - Intensities are clamped to [0, 1], so a non-fired focus trigger reads 0.
"""

from __future__ import annotations

from ..domain.bounds import round1, round_half_up
from ..domain.enums import PILLARS, Pillar, TriggerType
from ..domain.models import ScoreBreakdown
from .models import TriggerResult
from .thresholds import TriggerThresholds

FOCUS_FLOOR = 60.0
FOCUS_SPAN = 40.0
NEGLECT_SPAN = 30.0
BALANCE_SPAN = 30.0
FRAGILE_MIN_PILLARS = 2

FOCUS_TRIGGER: dict[Pillar, TriggerType] = {
    Pillar.SAFETY: TriggerType.SAFETY_FOCUS,
    Pillar.EQUITY: TriggerType.EQUITY_FOCUS,
    Pillar.STAFF: TriggerType.STAFF_WELLBEING_FOCUS,
    Pillar.RESILIENCE: TriggerType.RESILIENCE_FOCUS,
}

NEGLECT_TRIGGER: dict[Pillar, TriggerType] = {
    Pillar.SAFETY: TriggerType.SAFETY_NEGLECT,
    Pillar.EQUITY: TriggerType.EQUITY_NEGLECT,
    Pillar.STAFF: TriggerType.STAFF_NEGLECT,
    Pillar.RESILIENCE: TriggerType.RESILIENCE_NEGLECT,
}


def eval_pillar_focus(
    scores: ScoreBreakdown, pillar: Pillar, th: TriggerThresholds, cycle: int
) -> TriggerResult:
    score = scores.pillar(pillar)
    return TriggerResult.of(
        FOCUS_TRIGGER[pillar],
        fired=score >= th.high(pillar),
        intensity=(score - FOCUS_FLOOR) / FOCUS_SPAN,
        context=f"{pillar.value.capitalize()} score at {round_half_up(score)}",
        cycles=[cycle],
    )


def eval_pillar_neglect(
    scores: ScoreBreakdown, pillar: Pillar, th: TriggerThresholds, cycle: int
) -> TriggerResult:
    score = scores.pillar(pillar)
    low = th.low(pillar)
    return TriggerResult.of(
        NEGLECT_TRIGGER[pillar],
        fired=score < low,
        intensity=(low - score) / NEGLECT_SPAN,
        context=f"{pillar.value.capitalize()} score dropped to {round_half_up(score)}",
        cycles=[cycle],
    )


def eval_system_fragile(scores: ScoreBreakdown, th: TriggerThresholds, cycle: int) -> TriggerResult:
    low_count = sum(1 for pillar in PILLARS if scores.pillar(pillar) < th.low(pillar))
    fired = low_count >= FRAGILE_MIN_PILLARS
    return TriggerResult.of(
        TriggerType.SYSTEM_FRAGILE,
        fired=fired,
        intensity=low_count / len(PILLARS),
        context=f"{low_count} pillars below threshold" if fired else "System stable",
        cycles=[cycle],
    )


def pillar_spread(scores: ScoreBreakdown) -> float:
    values = [scores.pillar(pillar) for pillar in PILLARS]
    return max(values) - min(values)


def eval_balance(scores: ScoreBreakdown, th: TriggerThresholds) -> list[TriggerResult]:
    spread = pillar_spread(scores)
    balanced = spread < th.pillar_imbalance
    focused = spread >= th.pillar_imbalance * th.single_focus_factor
    return [
        TriggerResult.of(
            TriggerType.BALANCED_APPROACH,
            fired=balanced,
            intensity=1 - spread / BALANCE_SPAN,
            context="Balanced approach across pillars" if balanced else "Focused approach",
        ),
        TriggerResult.of(
            TriggerType.SINGLE_FOCUS,
            fired=focused,
            intensity=spread / BALANCE_SPAN,
            context=(
                f"Strong focus on one pillar ({round1(spread)} point spread)"
                if focused
                else "Relatively balanced"
            ),
        ),
    ]
