from __future__ import annotations

import pytest

from safebydesign.core.domain.enums import (
    DecisionCategory,
    DecisionFlag,
    DecisionTiming,
    EffectTag,
    Metric,
    Pillar,
)
from safebydesign.core.domain.models import Budgets, Decision, TradeoffRule
from safebydesign.core.outcome.baselines import INCIDENT_BASELINE, baseline_pillars, cycle_index
from safebydesign.core.outcome.engine import OutcomeContext, calculate_cycle_results, result_id
from safebydesign.core.outcome.incidents import describe_incidents, incident_count
from safebydesign.core.outcome.metrics import compute_metrics, round1
from safebydesign.core.outcome.scoring import (
    DELAYED_MULTIPLIER,
    EFFECT_PER_TAG,
    apply_tradeoffs,
    in_delay_window,
    pillar_effect,
    score_pillars,
)
from safebydesign.core.rng import seeded_random_from_int, seeded_stream


def mk_decision(
    decision_id: str,
    tags=(EffectTag.SAFETY,),
    timing: DecisionTiming = DecisionTiming.IMMEDIATE,
    delayed_cycles: int = 1,
    flags=(),
    tradeoffs=(),
    metric_deltas=None,
    adjustments=None,
) -> Decision:
    return Decision(
        id=decision_id,
        name=decision_id.replace("_", " ").title(),
        description="test decision",
        category=DecisionCategory.CLINICAL_SAFETY,
        costs=Budgets(1, 1, 1),
        effect_tags=tuple(tags),
        timing=timing,
        delayed_cycles=delayed_cycles,
        effect_adjustments=dict(adjustments or {}),
        tradeoffs=tuple(tradeoffs),
        metric_deltas=dict(metric_deltas or {}),
        flags=frozenset(flags),
    )


def mk_ctx(cycle: int = 1, selected=(), prior=(), seed: int = 42, team_id: str = "team-a") -> OutcomeContext:
    return OutcomeContext(
        team_id=team_id,
        game_id="game-1",
        cycle=cycle,
        scenario_seed=seed,
        selected_decisions=list(selected),
        prior_selections=tuple(prior),
        calculated_at="2026-01-01T00:00:00+00:00",
    )


def test_same_inputs_give_identical_result():
    chosen = [mk_decision("audit", tags=(EffectTag.SAFETY, EffectTag.GOVERNANCE))]
    first = calculate_cycle_results(mk_ctx(cycle=3, selected=chosen))
    second = calculate_cycle_results(mk_ctx(cycle=3, selected=chosen))
    assert first == second
    assert first.id == result_id("game-1", "team-a", 3)


def test_pillars_bounded_and_total_is_exact_sum():
    heavy = [
        mk_decision(f"d{i}", tags=(EffectTag.SAFETY, EffectTag.STAFF), adjustments={Pillar.SAFETY: 30.0})
        for i in range(5)
    ]
    for seed in range(20):
        for cycle in range(1, 7):
            result = calculate_cycle_results(mk_ctx(cycle=cycle, selected=heavy, seed=seed))
            s = result.scores
            for value in (s.safety, s.equity, s.staff, s.resilience):
                assert 0.0 <= value <= 100.0
            assert s.total == s.safety + s.equity + s.staff + s.resilience


def test_no_decisions_scores_equal_baseline():
    result = calculate_cycle_results(mk_ctx(cycle=2))
    base = baseline_pillars(2)
    assert result.scores.safety == base[Pillar.SAFETY]
    assert result.scores.resilience == base[Pillar.RESILIENCE]


def test_first_cycle_without_decisions_is_pinned():
    result = calculate_cycle_results(mk_ctx(cycle=1, seed=12345, team_id="T1"))
    assert (result.scores.safety, result.scores.equity, result.scores.staff, result.scores.resilience) == (
        75.0,
        70.0,
        80.0,
        75.0,
    )
    assert result.scores.total == 300.0
    m = result.metrics
    assert m.backlog == 17
    assert m.dna_rate == 11.5
    assert m.staff_sickness == 6.8
    assert m.high_risk_share == 35.0
    assert m.neonatal_admissions == 4
    assert m.incidents == 0
    assert result.incidents == ()


def test_pillar_effect_counts_matching_tags_and_governance_feeds_resilience():
    decision = mk_decision("gov", tags=(EffectTag.GOVERNANCE, EffectTag.RESILIENCE, EffectTag.FLOW))
    assert pillar_effect(decision, Pillar.RESILIENCE) == 2 * EFFECT_PER_TAG
    assert pillar_effect(decision, Pillar.SAFETY) == 0.0


def test_immediate_effect_is_jittered_within_range():
    decision = mk_decision("safe")
    base = baseline_pillars(1)
    values = score_pillars(base, 1, [decision], (), seeded_stream("x"))
    gain = values[Pillar.SAFETY] - base[Pillar.SAFETY]
    assert EFFECT_PER_TAG * 0.8 <= gain <= EFFECT_PER_TAG * 1.2


def test_delayed_effect_lands_inside_window_only():
    delayed = mk_decision("later", timing=DecisionTiming.DELAYED, delayed_cycles=1)
    base = baseline_pillars(2)

    with_prior = score_pillars(base, 2, [], [(1, [delayed])], seeded_stream("s"))
    assert with_prior[Pillar.SAFETY] == pytest.approx(base[Pillar.SAFETY] + EFFECT_PER_TAG * DELAYED_MULTIPLIER)

    base3 = baseline_pillars(3)
    outside = score_pillars(base3, 3, [], [(1, [delayed])], seeded_stream("s"))
    assert outside[Pillar.SAFETY] == base3[Pillar.SAFETY]


def test_delay_window_bounds():
    delayed = mk_decision("later", timing=DecisionTiming.BOTH, delayed_cycles=2)
    immediate = mk_decision("now", timing=DecisionTiming.IMMEDIATE)
    assert not in_delay_window(delayed, 2, 2)
    assert in_delay_window(delayed, 1, 2)
    assert in_delay_window(delayed, 1, 3)
    assert not in_delay_window(delayed, 1, 4)
    assert not in_delay_window(immediate, 1, 2)


def test_delayed_only_decision_has_no_immediate_effect():
    delayed = mk_decision("later", timing=DecisionTiming.DELAYED)
    base = baseline_pillars(1)
    values = score_pillars(base, 1, [delayed], (), seeded_stream("s"))
    assert values[Pillar.SAFETY] == base[Pillar.SAFETY]


def test_tradeoff_chance_one_always_applies_and_zero_never():
    always = mk_decision("a", tradeoffs=(TradeoffRule(target="equity", delta=-5.0, chance=1.0),))
    never = mk_decision("b", tradeoffs=(TradeoffRule(target="equity", delta=-5.0, chance=0.0),))
    out = apply_tradeoffs({"equity": 50.0, "safety": 50.0}, [always, never], seeded_stream("t"))
    assert out == {"equity": 45.0, "safety": 50.0}


def test_metrics_are_clamped():
    overload = mk_decision(
        "overload",
        metric_deltas={Metric.DNA_RATE: 500.0, Metric.STAFF_SICKNESS: 500.0, Metric.BACKLOG: -1000.0},
    )
    base = {Metric.BACKLOG: 15.0, Metric.DNA_RATE: 12.0, Metric.STAFF_SICKNESS: 5.0, Metric.HIGH_RISK_SHARE: 35.0}
    metrics = compute_metrics(base, [overload], seeded_stream("m"))
    assert metrics[Metric.DNA_RATE] == 50.0
    assert metrics[Metric.STAFF_SICKNESS] == 40.0
    assert metrics[Metric.BACKLOG] == 0.0


def test_round1_rounds_half_up():
    assert round1(0.25) == 0.3
    assert round1(1.04) == 1.0
    assert round1(12.0) == 12.0


def test_safety_mechanism_suppresses_unmitigated_incident():
    mitigated = [mk_decision("audit", flags=(DecisionFlag.SAFETY_MECHANISM,))]
    for seed in range(30):
        rand = seeded_random_from_int(seed)
        assert incident_count(3, mitigated, rand) == INCIDENT_BASELINE[2]


def test_unmitigated_incident_count_only_adds_from_third_cycle():
    for seed in range(30):
        assert incident_count(1, [], seeded_random_from_int(seed)) == 0
        assert incident_count(2, [], seeded_random_from_int(seed)) == 0
        assert incident_count(3, [], seeded_random_from_int(seed)) in (1, 2)


def test_incident_descriptions_never_exceed_count():
    for seed in range(40):
        result = calculate_cycle_results(mk_ctx(cycle=5, seed=seed))
        assert len(result.incidents) <= result.metrics.incidents


def test_zero_count_describes_nothing_and_draws_nothing():
    calls = []

    def rand() -> float:
        calls.append(1)
        return 0.99

    scores = {p: 10.0 for p in Pillar}
    metrics = {Metric.DNA_RATE: 40.0, Metric.STAFF_SICKNESS: 30.0}
    assert describe_incidents(5, 0, scores, metrics, rand) == ()
    assert calls == []


def test_incident_rules_truncate_to_count():
    scores = {p: 10.0 for p in Pillar}
    metrics = {Metric.DNA_RATE: 40.0, Metric.STAFF_SICKNESS: 30.0}
    incidents = describe_incidents(5, 2, scores, metrics, lambda: 0.99)
    assert [i.type for i in incidents] == ["documentation_gap", "missed_appointment"]


def test_cycle_outside_baselines_raises():
    with pytest.raises(ValueError):
        cycle_index(0)
    with pytest.raises(ValueError):
        cycle_index(7)
