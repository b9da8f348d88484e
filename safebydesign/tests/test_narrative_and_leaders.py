from __future__ import annotations

from safebydesign.core.debrief.context import build_game_context, resolve_history
from safebydesign.core.debrief.engine import generate_cycle_prompts, generate_facilitator_prompts
from safebydesign.core.debrief.leaders import leader_by_cycle
from safebydesign.core.debrief.models import DebriefQuestion, TeamAnalysis, TriggerResult
from safebydesign.core.debrief.narrative import FALLBACK_NARRATIVE, generate_game_narrative
from safebydesign.core.domain.enums import (
    DecisionCategory,
    DecisionTiming,
    EffectTag,
    QuestionScope,
    QuestionTheme,
    TriggerType,
)
from safebydesign.core.domain.models import (
    Budgets,
    CycleResult,
    Decision,
    DecisionSubmission,
    OperationalMetrics,
    ScoreBreakdown,
    Team,
)


def mk_team(team_id: str, joined_at: str, total: float = 0.0) -> Team:
    return Team(id=team_id, game_id="g", name=f"Team {team_id}", joined_at=joined_at, cumulative_score=ScoreBreakdown(total=total))


def mk_result(team_id: str, cycle: int, total_each: float, sickness: float = 8.0) -> CycleResult:
    return CycleResult(
        id=f"g-{team_id}-{cycle}",
        game_id="g",
        cycle=cycle,
        team_id=team_id,
        scores=ScoreBreakdown.from_pillars(total_each, total_each, total_each, total_each),
        metrics=OperationalMetrics(
            backlog=30, dna_rate=10.0, staff_sickness=sickness, high_risk_share=30.0, incidents=0, neonatal_admissions=3
        ),
        incidents=(),
        calculated_at="2026-01-01T00:00:00+00:00",
    )


def mk_analysis(team_id: str, *types: TriggerType, intensity: float = 1.0) -> TeamAnalysis:
    return TeamAnalysis(
        team_id=team_id,
        team_name=f"Team {team_id}",
        triggers=tuple(TriggerResult.of(t, True, intensity, t.value) for t in types),
        key_observations=(),
        suggested_questions=(),
    )


def test_leader_ties_go_to_first_joined():
    teams = [mk_team("b", "2026-01-01T10:00:01"), mk_team("a", "2026-01-01T10:00:00")]
    results = [mk_result("a", 1, 10.0), mk_result("b", 1, 10.0)]
    assert leader_by_cycle(teams, results) == ("a",)


def test_leader_tracks_running_totals():
    teams = [mk_team("a", "t1"), mk_team("b", "t2")]
    results = [
        mk_result("a", 1, 20.0),
        mk_result("b", 1, 10.0),
        mk_result("a", 2, 5.0),
        mk_result("b", 2, 30.0),
    ]
    assert leader_by_cycle(teams, results) == ("a", "b")
    assert leader_by_cycle([], results) == ()


def test_fallback_narrative_when_nothing_stands_out():
    analyses = [mk_analysis("a"), mk_analysis("b")]
    assert generate_game_narrative(analyses, ("a", "b")) == FALLBACK_NARRATIVE


def test_narrative_sentences_in_fixed_order():
    analyses = [
        mk_analysis("a", TriggerType.INCIDENT_OCCURRED, TriggerType.BALANCED_APPROACH),
        mk_analysis("b", TriggerType.HIGH_SICKNESS, TriggerType.COMEBACK, TriggerType.SINGLE_FOCUS),
    ]
    narrative = generate_game_narrative(analyses, ("a", "a"))
    assert narrative == (
        "Team a maintained the lead throughout. "
        "Team a experienced significant safety incidents. "
        "Team b faced significant staffing challenges. "
        "Team b staged impressive comebacks. "
        "Teams took contrasting approaches - some balanced, others focused on specific pillars."
    )


def test_narrative_lead_changes_and_weak_incidents():
    analyses = [mk_analysis("a", TriggerType.INCIDENT_OCCURRED, intensity=0.3), mk_analysis("b"), mk_analysis("c")]
    narrative = generate_game_narrative(analyses, ("a", "b", "c"))
    assert narrative == "Lead changed hands multiple times throughout the game."


def test_resolve_history_drops_unknown_ids_and_orders_by_cycle():
    catalog = {
        "x": Decision(
            id="x",
            name="X",
            description="",
            category=DecisionCategory.PATHWAY_ACCESS,
            costs=Budgets(1, 1, 1),
            effect_tags=(EffectTag.FLOW,),
            timing=DecisionTiming.IMMEDIATE,
        )
    }
    subs = [
        DecisionSubmission("a", "g", 2, ("x", "gone"), "t", Budgets()),
        DecisionSubmission("a", "g", 1, ("gone",), "t", Budgets()),
    ]
    history = resolve_history(subs, catalog)
    assert [cycle for cycle, _ in history] == [1, 2]
    assert history[0][1] == ()
    assert [d.id for d in history[1][1]] == ["x"]


def test_game_context_counts_only_resolved_submissions():
    teams = [mk_team("a", "t1")]
    results = [mk_result("a", 1, 20.0)]
    subs = [
        DecisionSubmission("a", "g", 1, (), "t", Budgets()),
        DecisionSubmission("a", "g", 2, (), "t", Budgets()),
    ]
    context = build_game_context(teams, results, subs, {}, current_cycle=2)
    assert [cycle for cycle, _ in context.teams[0].decisions] == [1]
    assert context.leader_by_cycle == ("a",)


def test_prompts_without_results_do_not_raise():
    bank = [
        DebriefQuestion(
            id="intro",
            text="What was your plan?",
            theme=QuestionTheme.STRATEGY,
            triggers=(TriggerType.FIRST_CYCLE,),
            priority=5,
            scope=QuestionScope.TEAM,
        ),
        DebriefQuestion(
            id="room",
            text="What are you watching?",
            theme=QuestionTheme.SYSTEMS_THINKING,
            triggers=(TriggerType.FIRST_CYCLE,),
            priority=4,
            scope=QuestionScope.ALL,
        ),
    ]
    context = build_game_context([mk_team("a", "t1"), mk_team("b", "t2")], [], [], {}, current_cycle=1)

    cycle = generate_cycle_prompts(context, 1, bank)
    assert cycle.cycle == 1
    assert [a.team_id for a in cycle.per_team] == ["a", "b"]
    assert all(a.triggers[0].type == TriggerType.FIRST_CYCLE for a in cycle.per_team)
    assert [q.id for q in cycle.per_team[0].suggested_questions] == ["intro"]
    assert [q.id for q in cycle.all_teams] == ["room"]

    final = generate_facilitator_prompts(context, 1, bank)
    assert final.game_narrative == FALLBACK_NARRATIVE
    assert len(final.per_team) == 2
