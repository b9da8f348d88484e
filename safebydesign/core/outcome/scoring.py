"""Pillar scoring for one team and cycle.

Contract:
  - Inputs: cycle baseline, selected decisions, prior-cycle selections, seeded stream.
  - Output: clamped pillar values in [0, 100].
  - Determinism: all randomness comes from the supplied stream, in a fixed order.

Scoring summary:
  - Each effect tag matching a pillar adds EFFECT_PER_TAG; governance also feeds resilience.
  - Catalog effect_adjustments add to that per-pillar effect.
  - Immediate effects are jittered by one draw per (decision, pillar).
  - Delayed effects from earlier cycles inside the delay window are amplified, no jitter.
  - Catalog trade-off rules run after effects and before clamping.

Draw order:
  - decision order, then pillars safety, equity, staff, resilience; then trade-off draws.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..domain.bounds import clamp_pillar
from ..domain.enums import PILLARS, EffectTag, Pillar
from ..domain.models import Decision
from ..rng import RandomStream

EFFECT_PER_TAG = 4.0
JITTER_MIN = 0.8
JITTER_SPAN = 0.4
DELAYED_MULTIPLIER = 1.2

TAG_TO_PILLARS: dict[EffectTag, tuple[Pillar, ...]] = {
    EffectTag.SAFETY: (Pillar.SAFETY,),
    EffectTag.EQUITY: (Pillar.EQUITY,),
    EffectTag.STAFF: (Pillar.STAFF,),
    EffectTag.RESILIENCE: (Pillar.RESILIENCE,),
    EffectTag.GOVERNANCE: (Pillar.RESILIENCE,),
}


def pillar_effect(decision: Decision, pillar: Pillar) -> float:
    matches = sum(1 for tag in decision.effect_tags if pillar in TAG_TO_PILLARS.get(tag, ()))
    return matches * EFFECT_PER_TAG + decision.effect_adjustments.get(pillar, 0.0)


def in_delay_window(decision: Decision, chosen_cycle: int, cycle: int) -> bool:
    lag = cycle - chosen_cycle
    return decision.applies_delayed() and 0 < lag <= decision.delayed_cycles


def apply_tradeoffs(
    values: dict[str, float],
    decisions: Iterable[Decision],
    rand: RandomStream,
) -> dict[str, float]:
    """Apply catalog trade-off rules whose target is a key of ``values``.

    Targets are visited in ``values`` order, decisions in selection order.
    A rule with chance < 1 consumes one draw and applies when the draw exceeds 1 - chance.
    """
    decisions = list(decisions)
    result = dict(values)
    for target in values:
        for decision in decisions:
            for rule in decision.tradeoffs:
                if rule.target != target:
                    continue
                if rule.chance < 1.0 and not rand() > 1.0 - rule.chance:
                    continue
                result[target] += rule.delta
    return result


def score_pillars(
    base: dict[Pillar, float],
    cycle: int,
    selected: Sequence[Decision],
    prior_selections: Sequence[tuple[int, Sequence[Decision]]],
    rand: RandomStream,
) -> dict[Pillar, float]:
    values = {pillar: base[pillar] for pillar in PILLARS}

    for decision in selected:
        if not decision.applies_immediately():
            continue
        for pillar in PILLARS:
            values[pillar] += pillar_effect(decision, pillar) * (JITTER_MIN + rand() * JITTER_SPAN)

    for chosen_cycle, decisions in prior_selections:
        for decision in decisions:
            if not in_delay_window(decision, chosen_cycle, cycle):
                continue
            for pillar in PILLARS:
                values[pillar] += pillar_effect(decision, pillar) * DELAYED_MULTIPLIER

    adjusted = apply_tradeoffs({p.value: v for p, v in values.items()}, selected, rand)
    return {pillar: clamp_pillar(adjusted[pillar.value]) for pillar in PILLARS}
