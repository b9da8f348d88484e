"""Pure session transitions for one game.

Responsibilities:
  - Apply lobby, submission, resolution and advance commands to a GameState.
  - Return a TransitionOutcome carrying the new state and the events to publish.

Inputs/Outputs:
  - Inputs: current GameState, command arguments, content port, rules, timestamps.
  - Outputs: TransitionOutcome(state, events, changed).

Invariants:
  - Same inputs, same outcome; timestamps and ids are always passed in.
  - in_cycle moves to results only when every team has a submission for the cycle.
  - A resolved cycle is never resolved again; the repeat call is a no-op.
  - Cumulative score is the sum of the team's realized cycle scores.
Must not:
  - Persist, lock or publish; the application facade does all three.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ..debrief.context import build_game_context
from ..debrief.engine import generate_cycle_prompts, generate_facilitator_prompts
from ..debrief.models import CyclePrompts, FacilitatorPrompts
from ..debrief.summary import summarize_cycle
from ..debrief.triggers import TriggerDetector
from ..domain.enums import GameStatus
from ..domain.models import (
    Budgets,
    CycleBrief,
    CycleResult,
    DecisionSubmission,
    Game,
    RandomEvent,
    SystemState,
    Team,
)
from ..domain.rules import DEFAULT_RULES, GameRules
from ..errors import NotFoundError, ResolutionError, ValidationError
from ..events.impacts import apply_event_impacts, build_system_state
from ..events.selection import events_through_cycle
from ..outcome.budget import validate_budget
from ..outcome.engine import OutcomeContext, calculate_cycle_results
from . import events as ev
from .guardrails import check_transition, require_status
from .payloads import (
    cycle_started_payload,
    game_payload,
    leaderboard,
    result_payload,
    summary_payload,
    team_payload,
)
from .ports import ContentPort
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionOutcome:
    state: GameState
    events: tuple[ev.OutboundEvent, ...] = ()
    changed: bool = True


@dataclass(frozen=True)
class CycleConditions:
    cycle: int
    brief: CycleBrief
    events: tuple[RandomEvent, ...]
    system_state: SystemState


def _room(name: str, payload: dict) -> ev.OutboundEvent:
    return ev.OutboundEvent(name=name, payload=payload, audience=ev.AUDIENCE_ROOM)


def _facilitator(name: str, payload: dict) -> ev.OutboundEvent:
    return ev.OutboundEvent(name=name, payload=payload, audience=ev.AUDIENCE_FACILITATOR)


def _game_updated(state: GameState) -> ev.OutboundEvent:
    return _room(ev.GAME_UPDATED, game_payload(state.game))


def _leaderboard_updated(state: GameState) -> ev.OutboundEvent:
    return _room(ev.LEADERBOARD_UPDATED, {"leaderboard": leaderboard(state.teams)})


def create_game(
    game_id: str,
    code: str,
    created_at: str,
    number_of_teams: int,
    scenario_seed: int,
    facilitator_name: Optional[str] = None,
    rules: GameRules = DEFAULT_RULES,
) -> TransitionOutcome:
    if number_of_teams < rules.min_teams or number_of_teams > rules.max_teams:
        raise ValidationError(
            f"Number of teams must be between {rules.min_teams} and {rules.max_teams}"
        )
    game = Game(
        id=game_id,
        code=code,
        created_at=created_at,
        status=GameStatus.LOBBY,
        number_of_teams=number_of_teams,
        current_cycle=1,
        scenario_seed=scenario_seed,
        facilitator_name=facilitator_name,
    )
    state = GameState(game=game)
    return TransitionOutcome(state=state, events=(_facilitator(ev.GAME_CREATED, game_payload(game)),))


def join_team(
    state: GameState,
    team_id: str,
    name: str,
    joined_at: str,
    role_assignments: Optional[Mapping[str, str]] = None,
) -> TransitionOutcome:
    if state.game.status != GameStatus.LOBBY:
        raise ValidationError("Game has already started")
    if len(state.teams) >= state.game.number_of_teams:
        raise ValidationError("Game is full")
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("Team name must be non-empty")

    team = Team(
        id=team_id,
        game_id=state.game.id,
        name=cleaned,
        joined_at=joined_at,
        role_assignments=dict(role_assignments or {}),
    )
    new_state = state.with_teams(state.teams + (team,))
    events = [_room(ev.TEAM_JOINED, team_payload(team)), _game_updated(new_state)]
    if len(new_state.teams) == new_state.game.number_of_teams:
        events.append(_facilitator(ev.ALL_TEAMS_READY, {"teams": len(new_state.teams)}))
    return TransitionOutcome(state=new_state, events=tuple(events))


def cycle_conditions(state: GameState, cycle: int, content: ContentPort) -> CycleConditions:
    """Brief, seeded events and event-adjusted system state for a cycle."""
    events = events_through_cycle(cycle, state.game.scenario_seed, content.events)[cycle]
    base = build_system_state(state.results_for(cycle - 1))
    return CycleConditions(
        cycle=cycle,
        brief=content.brief(cycle),
        events=tuple(events),
        system_state=apply_event_impacts(base, events),
    )


def _cycle_started(state: GameState, cycle: int, content: ContentPort) -> ev.OutboundEvent:
    conditions = cycle_conditions(state, cycle, content)
    return _room(
        ev.CYCLE_STARTED,
        cycle_started_payload(
            cycle,
            conditions.brief,
            conditions.events,
            conditions.system_state,
            tuple(content.decisions_by_id.values()),
        ),
    )


def start_cycle(
    state: GameState, content: ContentPort, rules: GameRules = DEFAULT_RULES
) -> TransitionOutcome:
    """Open the first cycle from the lobby."""
    require_status(state.game.status, GameStatus.LOBBY, "Game has already started")
    check_transition(state.game.status, GameStatus.IN_CYCLE)
    if len(state.teams) < rules.min_teams:
        raise ValidationError(f"At least {rules.min_teams} teams must join before the game starts")

    new_state = state.with_game(status=GameStatus.IN_CYCLE, current_cycle=1)
    return TransitionOutcome(
        state=new_state,
        events=(
            _game_updated(new_state),
            _cycle_started(new_state, 1, content),
            _leaderboard_updated(new_state),
        ),
    )


def _unique(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def submit_decisions(
    state: GameState,
    team_id: str,
    decision_ids: Iterable[str],
    submitted_at: str,
    content: ContentPort,
    rules: GameRules = DEFAULT_RULES,
) -> TransitionOutcome:
    """Record (or replace) a team's submission for the open cycle.

    Unknown decision ids are dropped; duplicates count once.
    """
    team = state.team(team_id)
    if team is None:
        raise NotFoundError(f"Team not found: {team_id}")
    require_status(state.game.status, GameStatus.IN_CYCLE, "Not in decision phase")

    chosen = content.resolve(_unique(decision_ids))
    used = validate_budget(chosen, rules.budget_allowance)
    cycle = state.game.current_cycle
    submission = DecisionSubmission(
        team_id=team_id,
        game_id=state.game.id,
        cycle=cycle,
        decision_ids=tuple(d.id for d in chosen),
        submitted_at=submitted_at,
        budgets_used=used,
    )
    new_state = state.with_submission(submission)
    submitted = len({s.team_id for s in new_state.submissions_for(cycle)})
    event = _facilitator(
        ev.TEAM_SUBMITTED,
        {
            "team_id": team_id,
            "team_name": team.name,
            "cycle": cycle,
            "submitted_count": submitted,
            "total_teams": len(new_state.teams),
        },
    )
    return TransitionOutcome(state=new_state, events=(event,))


def all_submitted(state: GameState) -> bool:
    if not state.teams:
        return False
    cycle = state.game.current_cycle
    return all(state.submission(team.id, cycle) is not None for team in state.teams)


def _prior_selections(state: GameState, team_id: str, cycle: int, content: ContentPort):
    prior = [s for s in state.submissions if s.team_id == team_id and s.cycle < cycle]
    return tuple((s.cycle, tuple(content.resolve(s.decision_ids))) for s in sorted(prior, key=lambda s: s.cycle))


def _previous_result(state: GameState, team_id: str, cycle: int) -> Optional[CycleResult]:
    for result in state.results:
        if result.team_id == team_id and result.cycle == cycle - 1:
            return result
    return None


def _cycle_summaries(game_id: str, cycle: int, scored: list) -> list:
    # Summaries are optional output; a fault here must not block the scores.
    try:
        return [summarize_cycle(result, previous, selected) for result, previous, selected in scored]
    except Exception:
        logger.exception("cycle summary failed game_id=%s cycle=%d", game_id, cycle)
        return []


def resolve_cycle(state: GameState, content: ContentPort, calculated_at: str) -> TransitionOutcome:
    """Score every team for the current cycle and move the game to results.

    A second call for an already resolved cycle returns the state unchanged.
    Any fault in score computation is raised as ResolutionError.
    """
    cycle = state.game.current_cycle
    if state.is_resolved(cycle):
        return TransitionOutcome(state=state, events=(), changed=False)
    require_status(state.game.status, GameStatus.IN_CYCLE, "Not in decision phase")
    check_transition(state.game.status, GameStatus.RESULTS)
    if not all_submitted(state):
        raise ValidationError("Not all teams have submitted")

    results: list[CycleResult] = []
    scored = []
    teams: list[Team] = []
    for team in state.teams:
        submission = state.submission(team.id, cycle)
        assert submission is not None
        selected = content.resolve(submission.decision_ids)
        previous = _previous_result(state, team.id, cycle)
        try:
            result = calculate_cycle_results(
                OutcomeContext(
                    team_id=team.id,
                    game_id=state.game.id,
                    cycle=cycle,
                    scenario_seed=state.game.scenario_seed,
                    selected_decisions=selected,
                    prior_selections=_prior_selections(state, team.id, cycle, content),
                    previous_result=previous,
                    calculated_at=calculated_at,
                )
            )
        except Exception as exc:
            raise ResolutionError(state.game.id, cycle, exc) from exc
        results.append(result)
        scored.append((result, previous, selected))
        teams.append(dataclasses.replace(team, cumulative_score=team.cumulative_score.plus(result.scores)))

    new_state = dataclasses.replace(
        state,
        game=dataclasses.replace(state.game, status=GameStatus.RESULTS),
        teams=tuple(teams),
        results=state.results + tuple(results),
        resolved_cycles=state.resolved_cycles | {cycle},
    )
    summaries = _cycle_summaries(state.game.id, cycle, scored)
    logger.info("cycle resolved game_id=%s cycle=%d teams=%d", state.game.id, cycle, len(teams))
    return TransitionOutcome(
        state=new_state,
        events=(
            _game_updated(new_state),
            _room(
                ev.RESULTS_READY,
                {
                    "cycle": cycle,
                    "results": [result_payload(r) for r in results],
                    "summaries": [summary_payload(s) for s in summaries],
                },
            ),
            _leaderboard_updated(new_state),
        ),
    )


def close_submissions(
    state: GameState, submitted_at: str, content: ContentPort, calculated_at: str
) -> TransitionOutcome:
    """Facilitator override: teams that have not submitted get an empty submission, then resolve."""
    require_status(state.game.status, GameStatus.IN_CYCLE, "Not in decision phase")
    cycle = state.game.current_cycle
    filled = state
    for team in state.teams:
        if state.submission(team.id, cycle) is None:
            filled = filled.with_submission(
                DecisionSubmission(
                    team_id=team.id,
                    game_id=state.game.id,
                    cycle=cycle,
                    decision_ids=(),
                    submitted_at=submitted_at,
                    budgets_used=Budgets(),
                )
            )
    resolved = resolve_cycle(filled, content, calculated_at)
    closed = _room(ev.SUBMISSIONS_CLOSED, {"cycle": cycle})
    return TransitionOutcome(state=resolved.state, events=(closed,) + resolved.events)


def advance_cycle(
    state: GameState, content: ContentPort, rules: GameRules = DEFAULT_RULES
) -> TransitionOutcome:
    """Open the next cycle, or end the game after the final cycle."""
    require_status(state.game.status, GameStatus.RESULTS, "Cycle results are not final yet")
    next_cycle = state.game.current_cycle + 1
    if next_cycle > rules.total_cycles:
        check_transition(state.game.status, GameStatus.ENDED)
        new_state = state.with_game(status=GameStatus.ENDED)
        return TransitionOutcome(
            state=new_state,
            events=(_game_updated(new_state), _room(ev.GAME_ENDED, {"game_id": state.game.id})),
        )

    check_transition(state.game.status, GameStatus.IN_CYCLE)
    new_state = state.with_game(status=GameStatus.IN_CYCLE, current_cycle=next_cycle)
    return TransitionOutcome(
        state=new_state,
        events=(
            _game_updated(new_state),
            _room(ev.CYCLE_ADVANCED, {"cycle": next_cycle}),
            _cycle_started(new_state, next_cycle, content),
        ),
    )


def cycle_prompts(
    state: GameState, content: ContentPort, detector: Optional[TriggerDetector] = None
) -> CyclePrompts:
    cycle = state.game.current_cycle
    context = build_game_context(
        state.teams, state.results, state.submissions, content.decisions_by_id, cycle
    )
    return generate_cycle_prompts(context, cycle, content.questions, detector)


def end_of_game_prompts(
    state: GameState, content: ContentPort, detector: Optional[TriggerDetector] = None
) -> FacilitatorPrompts:
    cycle = state.game.current_cycle
    context = build_game_context(
        state.teams, state.results, state.submissions, content.decisions_by_id, cycle
    )
    return generate_facilitator_prompts(context, cycle, content.questions, detector)
