"""End-of-game narrative.

A fixed sequence of checks over the team analyses; each appends one sentence.
"""

from __future__ import annotations

from typing import Sequence

from ..domain.enums import TriggerType
from .models import TeamAnalysis

INCIDENT_NARRATIVE_MIN_INTENSITY = 0.3
FALLBACK_NARRATIVE = "A competitive game with varied strategies across teams."


def _has(analysis: TeamAnalysis, *types: TriggerType, min_intensity: float | None = None) -> bool:
    for trigger in analysis.triggers:
        if trigger.type not in types:
            continue
        if min_intensity is None or trigger.intensity > min_intensity:
            return True
    return False


def _names(analyses: Sequence[TeamAnalysis]) -> str:
    return " and ".join(a.team_name for a in analyses)


def generate_game_narrative(analyses: Sequence[TeamAnalysis], leader_by_cycle: Sequence[str]) -> str:
    parts: list[str] = []

    unique_leaders = set(leader_by_cycle)
    if len(unique_leaders) > 2:
        parts.append("Lead changed hands multiple times throughout the game.")
    elif len(unique_leaders) == 1:
        leader = next((a for a in analyses if a.team_id == leader_by_cycle[0]), None)
        if leader is not None:
            parts.append(f"{leader.team_name} maintained the lead throughout.")

    incident_teams = [
        a
        for a in analyses
        if _has(a, TriggerType.INCIDENT_OCCURRED, min_intensity=INCIDENT_NARRATIVE_MIN_INTENSITY)
    ]
    if incident_teams:
        parts.append(f"{_names(incident_teams)} experienced significant safety incidents.")

    staffing_teams = [a for a in analyses if _has(a, TriggerType.HIGH_SICKNESS, TriggerType.BURNOUT_RISK)]
    if staffing_teams:
        parts.append(f"{_names(staffing_teams)} faced significant staffing challenges.")

    comeback_teams = [a for a in analyses if _has(a, TriggerType.COMEBACK)]
    if comeback_teams:
        parts.append(f"{_names(comeback_teams)} staged impressive comebacks.")

    balanced = any(_has(a, TriggerType.BALANCED_APPROACH) for a in analyses)
    focused = any(_has(a, TriggerType.SINGLE_FOCUS) for a in analyses)
    if balanced and focused:
        parts.append("Teams took contrasting approaches - some balanced, others focused on specific pillars.")

    return " ".join(parts) or FALLBACK_NARRATIVE
