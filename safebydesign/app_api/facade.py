"""Application facade for running facilitation games.

Responsibilities:
  - Serialize every mutation of one game under that game's lock.
  - Load a GameState, apply a pure session transition, persist the changed
    records in one transaction, then publish the outbound events.
  - Keep cycle resolution single-fire through the persisted resolution marker.

Error policy:
  - ValidationError / NotFoundError propagate with nothing written.
  - Score computation faults roll back and surface as ResolutionError.
  - Debrief prompt faults are logged and swallowed; results are still published.
"""

from __future__ import annotations

import datetime
import logging
import secrets
import sqlite3
import threading
import uuid
from typing import Callable, Iterable, Mapping, Optional, Sequence

from safebydesign.content.library import ContentLibrary
from safebydesign.core.debrief.models import CyclePrompts, FacilitatorPrompts
from safebydesign.core.debrief.triggers import TriggerDetector
from safebydesign.core.domain.enums import GameStatus
from safebydesign.core.domain.models import CycleBrief, CycleResult, Decision, DecisionSubmission, Game, Team
from safebydesign.core.domain.rules import DEFAULT_RULES, GameRules
from safebydesign.core.errors import GameError, NotFoundError, ResolutionError
from safebydesign.core.session import machine
from safebydesign.core.session.events import AUDIENCE_FACILITATOR, DEBRIEF_PROMPTS, OutboundEvent
from safebydesign.core.session.payloads import (
    cycle_prompts_payload,
    facilitator_prompts_payload,
    game_payload,
    leaderboard,
    team_payload,
)
from safebydesign.core.session.state import GameState
from .dto import CreateGameSpec, GameSnapshot, JoinTeamSpec
from .locks import GameLockRegistry
from .ports import EventPublisher, GameStore, ResolutionStore, ResultStore, SubmissionStore, TeamStore

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 20
SEED_RANGE = 1_000_000


def _utc_now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class FacilitationApplication:
    def __init__(
        self,
        conn: sqlite3.Connection,
        content: ContentLibrary,
        games: GameStore,
        teams: TeamStore,
        submissions: SubmissionStore,
        results: ResultStore,
        resolutions: ResolutionStore,
        publisher: EventPublisher,
        detector: Optional[TriggerDetector] = None,
        rules: GameRules = DEFAULT_RULES,
        clock: Optional[Callable[[], str]] = None,
        seed_source: Optional[Callable[[], int]] = None,
        code_source: Optional[Callable[[], str]] = None,
        id_source: Optional[Callable[[], str]] = None,
    ) -> None:
        rules.validate()
        self._conn = conn
        self._content = content
        self._games = games
        self._teams = teams
        self._submissions = submissions
        self._results = results
        self._resolutions = resolutions
        self._publisher = publisher
        self._detector = detector or TriggerDetector()
        self._rules = rules
        self._clock = clock or _utc_now
        self._seed_source = seed_source or (lambda: secrets.randbelow(SEED_RANGE))
        self._code_source = code_source or self._random_code
        self._id_source = id_source or (lambda: str(uuid.uuid4()))
        self._locks = GameLockRegistry()
        # one sqlite connection is shared by all games
        self._conn_lock = threading.RLock()

    @property
    def content(self) -> ContentLibrary:
        return self._content

    @property
    def rules(self) -> GameRules:
        return self._rules

    def _random_code(self) -> str:
        alphabet = self._rules.code_alphabet
        return "".join(secrets.choice(alphabet) for _ in range(self._rules.code_length))

    def _write(self, write: Callable[[], None]) -> None:
        with self._conn_lock:
            self._conn.execute("BEGIN")
            try:
                write()
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise

    def _publish(self, game_id: str, events: Iterable[OutboundEvent]) -> None:
        for event in events:
            self._publisher.publish(game_id, event)

    def _load_state(self, game_id: str) -> GameState:
        with self._conn_lock:
            game = self._games.get(game_id)
            if game is None:
                raise NotFoundError(f"Game not found: {game_id}")
            return GameState(
                game=game,
                teams=tuple(self._teams.list_for_game(game_id)),
                submissions=tuple(self._submissions.list_for_game(game_id)),
                results=tuple(self._results.list_for_game(game_id)),
                resolved_cycles=self._resolutions.resolved_cycles(game_id),
            )

    def _team(self, team_id: str) -> Team:
        with self._conn_lock:
            team = self._teams.get(team_id)
        if team is None:
            raise NotFoundError(f"Team not found: {team_id}")
        return team

    # commands

    def create_game(self, spec: CreateGameSpec) -> Game:
        spec.validate()
        with self._conn_lock:
            code = self._unused_code()
            seed = spec.scenario_seed if spec.scenario_seed is not None else self._seed_source()
            outcome = machine.create_game(
                game_id=self._id_source(),
                code=code,
                created_at=self._clock(),
                number_of_teams=spec.number_of_teams,
                scenario_seed=seed,
                facilitator_name=spec.facilitator_name,
                rules=self._rules,
            )
            game = outcome.state.game
            self._write(lambda: self._games.upsert(game))
        logger.info("game created id=%s code=%s teams=%d seed=%d", game.id, game.code, game.number_of_teams, seed)
        self._publish(game.id, outcome.events)
        return game

    def _unused_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = self._code_source()
            if not self._games.code_exists(code):
                return code
        raise GameError("Could not allocate a unique game code")

    def join_team(
        self,
        game_code: str,
        team_name: str,
        role_assignments: Optional[Mapping[str, str]] = None,
    ) -> Team:
        spec = JoinTeamSpec(game_code=game_code, team_name=team_name, role_assignments=dict(role_assignments or {}))
        spec.validate()
        game = self.get_game_by_code(spec.game_code)
        with self._locks.hold(game.id):
            state = self._load_state(game.id)
            outcome = machine.join_team(
                state,
                team_id=self._id_source(),
                name=spec.team_name,
                joined_at=self._clock(),
                role_assignments=spec.role_assignments,
            )
            team = outcome.state.teams[-1]
            self._write(lambda: self._teams.upsert(team))
            self._publish(game.id, outcome.events)
        logger.info("team joined game_id=%s team_id=%s name=%s", game.id, team.id, team.name)
        return team

    def start_cycle(self, game_id: str) -> Game:
        with self._locks.hold(game_id):
            state = self._load_state(game_id)
            outcome = machine.start_cycle(state, self._content, self._rules)
            game = outcome.state.game
            self._write(lambda: self._games.upsert(game))
            self._publish(game_id, outcome.events)
        logger.info("cycle started game_id=%s cycle=%d", game_id, game.current_cycle)
        return game

    def submit_decisions(self, team_id: str, decision_ids: Sequence[str]) -> DecisionSubmission:
        """Store the team's submission; resolve the cycle once every team has submitted."""
        team = self._team(team_id)
        with self._locks.hold(team.game_id):
            state = self._load_state(team.game_id)
            outcome = machine.submit_decisions(
                state, team_id, decision_ids, self._clock(), self._content, self._rules
            )
            submission = outcome.state.submission(team_id, outcome.state.game.current_cycle)
            assert submission is not None
            self._write(lambda: self._submissions.upsert(submission))
            self._publish(team.game_id, outcome.events)
            if machine.all_submitted(outcome.state):
                self._resolve_locked(outcome.state)
        return submission

    def resolve_cycle(self, game_id: str) -> list[CycleResult]:
        """Facilitator retry of a failed resolution; a resolved cycle is a no-op."""
        with self._locks.hold(game_id):
            return self._resolve_locked(self._load_state(game_id))

    def close_submissions(self, game_id: str) -> list[CycleResult]:
        with self._locks.hold(game_id):
            state = self._load_state(game_id)
            now = self._clock()
            try:
                outcome = machine.close_submissions(state, now, self._content, now)
            except ResolutionError:
                logger.exception("cycle resolution failed game_id=%s cycle=%d", game_id, state.game.current_cycle)
                raise
            cycle = state.game.current_cycle
            filled = [
                s for s in outcome.state.submissions_for(cycle) if state.submission(s.team_id, cycle) is None
            ]

            def write() -> None:
                for submission in filled:
                    self._submissions.upsert(submission)
                self._persist_resolution(outcome.state, cycle, now)

            self._write(write)
            self._publish(game_id, outcome.events)
            self._publish_debrief(outcome.state)
            return outcome.state.results_for(cycle)

    def advance_cycle(self, game_id: str) -> Game:
        with self._locks.hold(game_id):
            state = self._load_state(game_id)
            outcome = machine.advance_cycle(state, self._content, self._rules)
            game = outcome.state.game
            self._write(lambda: self._games.upsert(game))
            self._publish(game_id, outcome.events)
            if game.status == GameStatus.ENDED:
                logger.info("game ended game_id=%s", game_id)
                self._publish_final_debrief(outcome.state)
            else:
                logger.info("cycle advanced game_id=%s cycle=%d", game_id, game.current_cycle)
        return game

    def _persist_resolution(self, state: GameState, cycle: int, resolved_at: str) -> None:
        for result in state.results_for(cycle):
            self._results.insert(result)
        for team in state.teams:
            self._teams.upsert(team)
        self._games.upsert(state.game)
        self._resolutions.mark_resolved(state.game.id, cycle, resolved_at)

    def _resolve_locked(self, state: GameState) -> list[CycleResult]:
        cycle = state.game.current_cycle
        now = self._clock()
        try:
            outcome = machine.resolve_cycle(state, self._content, now)
        except ResolutionError:
            logger.exception("cycle resolution failed game_id=%s cycle=%d", state.game.id, cycle)
            raise
        if not outcome.changed:
            logger.info("cycle already resolved game_id=%s cycle=%d", state.game.id, cycle)
            return []

        with self._conn_lock:
            if self._resolutions.is_resolved(state.game.id, cycle):
                return []
            self._write(lambda: self._persist_resolution(outcome.state, cycle, now))
        self._publish(state.game.id, outcome.events)
        self._publish_debrief(outcome.state)
        return outcome.state.results_for(cycle)

    def _publish_debrief(self, state: GameState) -> None:
        try:
            prompts = machine.cycle_prompts(state, self._content, self._detector)
            payload = cycle_prompts_payload(prompts)
        except Exception:
            logger.exception("debrief prompt generation failed game_id=%s", state.game.id)
            return
        self._publisher.publish(
            state.game.id, OutboundEvent(name=DEBRIEF_PROMPTS, payload=payload, audience=AUDIENCE_FACILITATOR)
        )

    def _publish_final_debrief(self, state: GameState) -> None:
        try:
            prompts = machine.end_of_game_prompts(state, self._content, self._detector)
            payload = facilitator_prompts_payload(prompts)
        except Exception:
            logger.exception("end-of-game debrief failed game_id=%s", state.game.id)
            return
        self._publisher.publish(
            state.game.id, OutboundEvent(name=DEBRIEF_PROMPTS, payload=payload, audience=AUDIENCE_FACILITATOR)
        )

    # queries

    def get_game_by_code(self, code: str) -> Game:
        with self._conn_lock:
            game = self._games.get_by_code(code)
        if game is None:
            raise NotFoundError("Game not found")
        return game

    def get_state(self, game_id: str) -> GameState:
        return self._load_state(game_id)

    def join_facilitator(self, game_code: str) -> GameSnapshot:
        game = self.get_game_by_code(game_code)
        teams = self.list_teams(game.id)
        return GameSnapshot(
            game=game_payload(game),
            teams=[team_payload(t) for t in teams],
            leaderboard=leaderboard(teams),
        )

    def list_teams(self, game_id: str) -> list[Team]:
        with self._conn_lock:
            return self._teams.list_for_game(game_id)

    def leaderboard(self, game_id: str) -> list[dict]:
        return leaderboard(self.list_teams(game_id))

    def get_brief(self, cycle: int) -> CycleBrief:
        return self._content.brief(cycle)

    def list_decisions(self) -> tuple[Decision, ...]:
        return self._content.decisions

    def cycle_prompts(self, game_id: str) -> CyclePrompts:
        return machine.cycle_prompts(self._load_state(game_id), self._content, self._detector)

    def end_of_game_prompts(self, game_id: str) -> FacilitatorPrompts:
        return machine.end_of_game_prompts(self._load_state(game_id), self._content, self._detector)
