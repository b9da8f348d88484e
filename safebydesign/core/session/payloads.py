"""Plain-dict payloads for outbound events.

Payloads carry only JSON-compatible values so any transport can frame them.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..debrief.models import CyclePrompts, DebriefQuestion, FacilitatorPrompts, TeamAnalysis
from ..debrief.summary import CycleSummary
from ..domain.enums import trigger_category, trigger_label
from ..domain.models import CycleBrief, CycleResult, Decision, Game, RandomEvent, SystemState, Team


def game_payload(game: Game) -> dict[str, Any]:
    return {
        "id": game.id,
        "code": game.code,
        "created_at": game.created_at,
        "status": game.status.value,
        "number_of_teams": game.number_of_teams,
        "current_cycle": game.current_cycle,
        "scenario_seed": game.scenario_seed,
        "facilitator_name": game.facilitator_name,
    }


def team_payload(team: Team) -> dict[str, Any]:
    return {
        "id": team.id,
        "game_id": team.game_id,
        "name": team.name,
        "joined_at": team.joined_at,
        "cumulative_score": team.cumulative_score.to_dict(),
        "role_assignments": dict(team.role_assignments),
    }


def decision_payload(decision: Decision) -> dict[str, Any]:
    return {
        "id": decision.id,
        "name": decision.name,
        "description": decision.description,
        "category": decision.category.value,
        "costs": decision.costs.to_dict(),
        "effect_tags": [tag.value for tag in decision.effect_tags],
        "timing": decision.timing.value,
        "delayed_cycles": decision.delayed_cycles,
    }


def result_payload(result: CycleResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "game_id": result.game_id,
        "cycle": result.cycle,
        "team_id": result.team_id,
        "scores": result.scores.to_dict(),
        "metrics": result.metrics.to_dict(),
        "incidents": [
            {"type": i.type, "severity": i.severity.value, "description": i.description}
            for i in result.incidents
        ],
        "calculated_at": result.calculated_at,
    }


def brief_payload(brief: CycleBrief) -> dict[str, Any]:
    return {
        "cycle": brief.cycle,
        "title": brief.title,
        "description": brief.description,
        "pressure_level": brief.pressure_level,
        "signals": list(brief.signals),
    }


def event_payload(event: RandomEvent) -> dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "severity": event.severity.value,
        "effect": event.effect,
        "impacts": dict(event.impacts),
    }


def cycle_started_payload(
    cycle: int,
    brief: CycleBrief,
    events: Sequence[RandomEvent],
    system_state: SystemState,
    decisions: Sequence[Decision] = (),
) -> dict[str, Any]:
    return {
        "cycle": cycle,
        "brief": brief_payload(brief),
        "events": [event_payload(e) for e in events],
        "system_state": system_state.to_dict(),
        "decisions": [decision_payload(d) for d in decisions],
    }


def leaderboard(teams: Sequence[Team]) -> list[dict[str, Any]]:
    """Teams ranked by cumulative total; equal totals keep join order."""
    ranked = sorted(teams, key=lambda t: -t.cumulative_score.total)
    return [
        {"team_id": t.id, "team_name": t.name, "score": t.cumulative_score.total, "rank": rank}
        for rank, t in enumerate(ranked, start=1)
    ]


def summary_payload(summary: CycleSummary) -> dict[str, Any]:
    return {
        "team_id": summary.team_id,
        "cycle": summary.cycle,
        "what_happened": list(summary.what_happened),
        "notable_tradeoffs": list(summary.notable_tradeoffs),
    }


def question_payload(question: DebriefQuestion) -> dict[str, Any]:
    return {
        "id": question.id,
        "text": question.text,
        "theme": question.theme.value,
        "priority": question.priority,
        "scope": question.scope.value,
        "follow_up": question.follow_up,
    }


def analysis_payload(analysis: TeamAnalysis) -> dict[str, Any]:
    return {
        "team_id": analysis.team_id,
        "team_name": analysis.team_name,
        "triggers": [
            {
                "type": t.type.value,
                "label": trigger_label(t.type),
                "category": trigger_category(t.type).value,
                "intensity": t.intensity,
                "context": t.context,
                "cycles": list(t.cycles),
            }
            for t in analysis.triggers
        ],
        "key_observations": list(analysis.key_observations),
        "suggested_questions": [question_payload(q) for q in analysis.suggested_questions],
    }


def cycle_prompts_payload(prompts: CyclePrompts) -> dict[str, Any]:
    return {
        "cycle": prompts.cycle,
        "per_team": [analysis_payload(a) for a in prompts.per_team],
        "all_teams": [question_payload(q) for q in prompts.all_teams],
    }


def facilitator_prompts_payload(prompts: FacilitatorPrompts) -> dict[str, Any]:
    return {
        "game_narrative": prompts.game_narrative,
        "per_team": [analysis_payload(a) for a in prompts.per_team],
        "all_teams": [question_payload(q) for q in prompts.all_teams],
    }
