from __future__ import annotations

from collections import Counter

import pytest

from safebydesign.core.debrief.models import GameContext, TeamContext
from safebydesign.core.debrief.thresholds import TriggerThresholds
from safebydesign.core.debrief.triggers import TriggerDetector
from safebydesign.core.domain.enums import (
    DecisionCategory,
    DecisionFlag,
    DecisionTiming,
    EffectTag,
    IncidentSeverity,
    TriggerType,
)
from safebydesign.core.domain.models import (
    Budgets,
    CycleResult,
    Decision,
    Incident,
    OperationalMetrics,
    ScoreBreakdown,
)


def mk_result(
    team_id: str,
    cycle: int,
    pillars=(70.0, 70.0, 70.0, 70.0),
    backlog: int = 30,
    dna_rate: float = 10.0,
    sickness: float = 8.0,
    incidents: int = 0,
    incident_types=(),
) -> CycleResult:
    return CycleResult(
        id=f"g-{team_id}-{cycle}",
        game_id="g",
        cycle=cycle,
        team_id=team_id,
        scores=ScoreBreakdown.from_pillars(*pillars),
        metrics=OperationalMetrics(
            backlog=backlog,
            dna_rate=dna_rate,
            staff_sickness=sickness,
            high_risk_share=30.0,
            incidents=incidents,
            neonatal_admissions=3,
        ),
        incidents=tuple(Incident(type=t, severity=IncidentSeverity.MEDIUM, description=t) for t in incident_types),
        calculated_at="2026-01-01T00:00:00+00:00",
    )


def mk_decision(decision_id: str, flags=()) -> Decision:
    return Decision(
        id=decision_id,
        name=decision_id,
        description="",
        category=DecisionCategory.CLINICAL_SAFETY,
        costs=Budgets(1, 1, 1),
        effect_tags=(EffectTag.SAFETY,),
        timing=DecisionTiming.IMMEDIATE,
        flags=frozenset(flags),
    )


def mk_team(team_id: str, results=(), decisions=(), cycle: int = 1) -> TeamContext:
    total = sum(r.scores.total for r in results)
    return TeamContext(
        team_id=team_id,
        team_name=team_id.upper(),
        current_cycle=cycle,
        results=tuple(results),
        decisions=tuple(decisions),
        cumulative_score=ScoreBreakdown(total=total),
    )


def mk_game(teams, leaders=(), cycle: int = 1) -> GameContext:
    return GameContext(total_teams=len(teams), current_cycle=cycle, leader_by_cycle=tuple(leaders), teams=tuple(teams))


def fired_types(triggers) -> set[TriggerType]:
    return {t.type for t in triggers if t.fired}


def test_zero_results_yields_only_first_cycle():
    team = mk_team("a")
    triggers = TriggerDetector().detect(team, mk_game([team]))
    assert len(triggers) == 1
    assert triggers[0].type == TriggerType.FIRST_CYCLE
    assert triggers[0].fired
    assert triggers[0].intensity == 1.0


def test_first_cycle_not_fired_after_cycle_two():
    team = mk_team("a", cycle=3)
    triggers = TriggerDetector().detect(team, mk_game([team], cycle=3))
    assert not triggers[0].fired


def test_intensities_clamped_and_each_type_once():
    results = [
        mk_result("a", 1, pillars=(100.0, 0.0, 0.0, 100.0), backlog=400, dna_rate=50.0, sickness=40.0, incidents=9),
        mk_result("a", 2, pillars=(0.0, 100.0, 100.0, 0.0), backlog=0, dna_rate=0.0, sickness=40.0, incidents=9),
        mk_result("a", 3, pillars=(100.0, 0.0, 0.0, 0.0), backlog=500, dna_rate=50.0, sickness=40.0, incidents=9),
    ]
    team = mk_team("a", results, cycle=3)
    triggers = TriggerDetector().detect(team, mk_game([team], leaders=("a", "a", "a"), cycle=3))
    assert all(0.0 <= t.intensity <= 1.0 for t in triggers)
    counts = Counter(t.type for t in triggers)
    assert max(counts.values()) == 1


def test_pillar_focus_and_neglect():
    results = [mk_result("a", 1, pillars=(80.0, 40.0, 70.0, 70.0))]
    team = mk_team("a", results)
    fired = fired_types(TriggerDetector().detect(team, mk_game([team], leaders=("a",))))
    assert TriggerType.SAFETY_FOCUS in fired
    assert TriggerType.EQUITY_NEGLECT in fired
    assert TriggerType.STAFF_NEGLECT not in fired
    assert TriggerType.SINGLE_FOCUS in fired


def test_decision_flags_use_exact_membership():
    lookalike = mk_decision("escalation_audits_plus")
    flagged = mk_decision("audit", flags=(DecisionFlag.ESCALATION,))
    results = [mk_result("a", 1), mk_result("a", 2)]

    team = mk_team("a", results, decisions=((1, (lookalike,)), (2, (lookalike,))), cycle=2)
    assert TriggerType.ESCALATION_IMPROVED not in fired_types(TriggerDetector().detect(team, mk_game([team])))

    team = mk_team("a", results, decisions=((1, (lookalike,)), (2, (flagged,))), cycle=2)
    escalation = next(
        t for t in TriggerDetector().detect(team, mk_game([team])) if t.type == TriggerType.ESCALATION_IMPROVED
    )
    assert escalation.fired
    assert escalation.cycles == (2,)


def test_incident_history_and_incident_types():
    results = [mk_result("a", 1), mk_result("a", 2, incidents=2, incident_types=("documentation_gap",))]
    team = mk_team("a", results, cycle=2)
    triggers = {t.type: t for t in TriggerDetector().detect(team, mk_game([team]))}
    assert triggers[TriggerType.INCIDENT_OCCURRED].fired
    assert triggers[TriggerType.INCIDENT_OCCURRED].cycles == (2,)
    assert triggers[TriggerType.DOCUMENTATION_GAP].fired
    assert not triggers[TriggerType.ACCESS_BARRIER].fired


def test_sickness_high_and_burnout():
    results = [mk_result("a", 1, sickness=18.0), mk_result("a", 2, sickness=27.0)]
    team = mk_team("a", results, cycle=2)
    fired = fired_types(TriggerDetector().detect(team, mk_game([team])))
    assert {TriggerType.HIGH_SICKNESS, TriggerType.BURNOUT_RISK} <= fired


def test_dna_improvement_needs_two_results():
    one = mk_team("a", [mk_result("a", 1, dna_rate=20.0)])
    types = {t.type for t in TriggerDetector().detect(one, mk_game([one]))}
    assert TriggerType.DNA_RATE_IMPROVED not in types

    two = mk_team("a", [mk_result("a", 1, dna_rate=20.0), mk_result("a", 2, dna_rate=14.0)], cycle=2)
    assert TriggerType.DNA_RATE_IMPROVED in fired_types(TriggerDetector().detect(two, mk_game([two])))


def test_comeback_and_lead_lost_need_three_results():
    a = mk_team("a", [mk_result("a", 1), mk_result("a", 2)], cycle=2)
    types = {t.type for t in TriggerDetector().detect(a, mk_game([a], leaders=("b", "a")))}
    assert TriggerType.COMEBACK not in types
    assert TriggerType.EARLY_LEAD_LOST not in types


def test_comeback_fires_for_self_relative_dip_and_current_lead():
    a_results = [
        mk_result("a", 1, pillars=(25.0, 25.0, 25.0, 25.0)),
        mk_result("a", 2, pillars=(10.0, 10.0, 10.0, 10.0)),
        mk_result("a", 3, pillars=(25.0, 25.0, 25.0, 25.0)),
    ]
    b_results = [mk_result("b", c, pillars=(20.0, 20.0, 20.0, 20.0)) for c in (1, 2, 3)]
    a = mk_team("a", a_results, cycle=3)
    b = mk_team("b", b_results, cycle=3)
    game = mk_game([a, b], leaders=("b", "b", "a"), cycle=3)

    a_fired = fired_types(TriggerDetector().detect(a, game))
    b_fired = fired_types(TriggerDetector().detect(b, game))
    assert TriggerType.COMEBACK in a_fired
    assert TriggerType.LEADING_TEAM in a_fired
    assert TriggerType.EARLY_LEAD_LOST in b_fired
    assert TriggerType.COMEBACK not in b_fired


def test_struggling_team_needs_someone_ahead():
    a = mk_team("a", [mk_result("a", 1, pillars=(10.0, 10.0, 10.0, 10.0))])
    b = mk_team("b", [mk_result("b", 1)])
    game = mk_game([a, b], leaders=("b",))
    assert TriggerType.STRUGGLING_TEAM in fired_types(TriggerDetector().detect(a, game))
    assert TriggerType.STRUGGLING_TEAM not in fired_types(TriggerDetector().detect(b, game))

    tied = mk_team("c", [mk_result("c", 1)])
    game = mk_game([b, tied], leaders=("b",))
    assert TriggerType.STRUGGLING_TEAM not in fired_types(TriggerDetector().detect(tied, game))


def test_fired_filters_detect():
    team = mk_team("a", [mk_result("a", 1)])
    detector = TriggerDetector()
    game = mk_game([team], leaders=("a",))
    assert detector.fired(team, game) == [t for t in detector.detect(team, game) if t.fired]


def test_threshold_overrides_and_validation():
    results = [mk_result("a", 1, pillars=(70.0, 70.0, 70.0, 70.0))]
    team = mk_team("a", results)
    strict = TriggerDetector(TriggerThresholds(high_safety=65))
    assert TriggerType.SAFETY_FOCUS in fired_types(strict.detect(team, mk_game([team])))

    with pytest.raises(ValueError):
        TriggerDetector(TriggerThresholds(low_safety=80, high_safety=75))
    with pytest.raises(ValueError):
        TriggerThresholds(high_sickness=30, critical_sickness=25).validate()
