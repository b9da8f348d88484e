"""Question selection for team and room-wide debriefs.

Contract:
  - Team questions: score = sum of priority * intensity over matching fired
    triggers; trigger-less questions with no score fall back to priority * 0.3;
    an early-game bonus applies to first_cycle questions in cycles 1-2.
    Positive scores only, at most TEAM_QUESTION_CAP, at most TEAM_THEME_CAP per theme.
  - Room questions: score = priority, plus 2 * aggregate intensity for each listed
    trigger whose aggregate across teams reaches 2, plus bonuses for trigger-less
    and early-game questions. At most ROOM_QUESTION_CAP with unique themes.

Edge cases:
  - Sorting is stable, so equal scores keep question bank order.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from ..domain.enums import QuestionScope, TriggerType
from .models import DebriefQuestion, TriggerResult

TEAM_QUESTION_CAP = 3
TEAM_THEME_CAP = 2
ROOM_QUESTION_CAP = 2

FALLBACK_WEIGHT = 0.3
EARLY_PHASE_LAST_CYCLE = 2
TEAM_EARLY_BONUS = 2.0
ROOM_EARLY_BONUS = 3.0
ROOM_ALWAYS_RELEVANT_BONUS = 2.0
ROOM_SHARED_MIN = 2.0
ROOM_SHARED_WEIGHT = 2.0


def eligible_questions(
    bank: Iterable[DebriefQuestion], cycle: int, end_of_game: bool, scope: QuestionScope
) -> list[DebriefQuestion]:
    return [q for q in bank if q.scope == scope and q.eligible_for(cycle, end_of_game)]


def score_team_question(question: DebriefQuestion, triggers: Sequence[TriggerResult], cycle: int) -> float:
    score = 0.0
    for trigger in triggers:
        if trigger.type in question.triggers:
            score += question.priority * trigger.intensity
    if not question.triggers and score == 0:
        score = question.priority * FALLBACK_WEIGHT
    if cycle <= EARLY_PHASE_LAST_CYCLE and TriggerType.FIRST_CYCLE in question.triggers:
        score += TEAM_EARLY_BONUS
    return score


def select_team_questions(
    bank: Iterable[DebriefQuestion],
    triggers: Sequence[TriggerResult],
    cycle: int,
    end_of_game: bool,
    cap: int = TEAM_QUESTION_CAP,
) -> list[DebriefQuestion]:
    scored = [
        (question, score_team_question(question, triggers, cycle))
        for question in eligible_questions(bank, cycle, end_of_game, QuestionScope.TEAM)
    ]
    ranked = sorted((pair for pair in scored if pair[1] > 0), key=lambda pair: pair[1], reverse=True)

    selected: list[DebriefQuestion] = []
    theme_counts: Counter = Counter()
    for question, _ in ranked:
        if len(selected) >= cap:
            break
        if theme_counts[question.theme] >= TEAM_THEME_CAP:
            continue
        selected.append(question)
        theme_counts[question.theme] += 1
    return selected


def aggregate_intensity(trigger_sets: Iterable[Sequence[TriggerResult]]) -> dict[TriggerType, float]:
    totals: dict[TriggerType, float] = {}
    for triggers in trigger_sets:
        for trigger in triggers:
            totals[trigger.type] = totals.get(trigger.type, 0.0) + trigger.intensity
    return totals


def score_room_question(question: DebriefQuestion, totals: dict[TriggerType, float], cycle: int) -> float:
    score = float(question.priority)
    for trigger_type in question.triggers:
        shared = totals.get(trigger_type, 0.0)
        if shared >= ROOM_SHARED_MIN:
            score += shared * ROOM_SHARED_WEIGHT
    if not question.triggers:
        score += ROOM_ALWAYS_RELEVANT_BONUS
    if cycle <= EARLY_PHASE_LAST_CYCLE and TriggerType.FIRST_CYCLE in question.triggers:
        score += ROOM_EARLY_BONUS
    return score


def select_room_questions(
    bank: Iterable[DebriefQuestion],
    trigger_sets: Iterable[Sequence[TriggerResult]],
    cycle: int,
    end_of_game: bool,
    cap: int = ROOM_QUESTION_CAP,
) -> list[DebriefQuestion]:
    totals = aggregate_intensity(trigger_sets)
    scored = [
        (question, score_room_question(question, totals, cycle))
        for question in eligible_questions(bank, cycle, end_of_game, QuestionScope.ALL)
    ]
    ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)

    selected: list[DebriefQuestion] = []
    used_themes = set()
    for question, _ in ranked:
        if len(selected) >= cap:
            break
        if question.theme in used_themes:
            continue
        selected.append(question)
        used_themes.add(question.theme)
    return selected
