"""Tests for the game, team, submission, result and resolution repos."""

from __future__ import annotations

import sqlite3

import pytest

from safebydesign.core.domain.enums import GameStatus, IncidentSeverity
from safebydesign.core.domain.models import (
    Budgets,
    CycleResult,
    DecisionSubmission,
    Game,
    Incident,
    OperationalMetrics,
    ScoreBreakdown,
    Team,
)
from safebydesign.infra.sqlite.db import get_connection, get_readonly_connection
from safebydesign.infra.sqlite.migrator import apply_migrations
from safebydesign.infra.sqlite.repos.game_repo import GameRepo
from safebydesign.infra.sqlite.repos.resolution_repo import ResolutionRepo
from safebydesign.infra.sqlite.repos.result_repo import ResultRepo
from safebydesign.infra.sqlite.repos.submission_repo import SubmissionRepo
from safebydesign.infra.sqlite.repos.team_repo import TeamRepo


def _conn() -> sqlite3.Connection:
    conn = get_connection(":memory:")
    apply_migrations(conn)
    return conn


def _game(status: GameStatus = GameStatus.LOBBY, cycle: int = 1) -> Game:
    return Game(
        id="g1",
        code="QWERTY",
        created_at="2026-03-01T09:00:00+00:00",
        status=status,
        number_of_teams=2,
        current_cycle=cycle,
        scenario_seed=99,
        facilitator_name="Alex",
    )


def _team(team_id: str = "t1", joined_at: str = "2026-03-01T09:01:00+00:00") -> Team:
    return Team(
        id=team_id,
        game_id="g1",
        name=f"Team {team_id}",
        joined_at=joined_at,
        role_assignments={"lead": "Kim", "finance": "Jo"},
    )


def test_migrations_are_idempotent():
    conn = _conn()
    apply_migrations(conn)
    tables = {r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"games", "teams", "submissions", "cycle_results", "cycle_resolution"} <= tables


def test_game_upsert_get_and_code_lookup():
    conn = _conn()
    repo = GameRepo(conn)
    repo.upsert(_game())
    assert repo.get("g1") == _game()
    assert repo.get_by_code(" qwerty ") == _game()
    assert repo.code_exists("QWERTY")
    assert not repo.code_exists("ZZZZZZ")
    assert repo.get("missing") is None

    repo.upsert(_game(status=GameStatus.RESULTS, cycle=3))
    stored = repo.get("g1")
    assert stored.status == GameStatus.RESULTS
    assert stored.current_cycle == 3


def test_team_round_trip_keeps_scores_roles_and_join_order():
    conn = _conn()
    GameRepo(conn).upsert(_game())
    repo = TeamRepo(conn)
    repo.upsert(_team("t2", "2026-03-01T09:02:00+00:00"))
    repo.upsert(_team("t1", "2026-03-01T09:01:00+00:00"))

    scored = Team(
        id="t1",
        game_id="g1",
        name="Team t1",
        joined_at="2026-03-01T09:01:00+00:00",
        cumulative_score=ScoreBreakdown.from_pillars(70.5, 60.0, 80.0, 75.25),
        role_assignments={"lead": "Kim", "finance": "Jo"},
    )
    repo.upsert(scored)

    teams = repo.list_for_game("g1")
    assert [t.id for t in teams] == ["t1", "t2"]
    assert teams[0] == scored
    assert repo.get("t2").role_assignments == {"lead": "Kim", "finance": "Jo"}


def test_submission_upsert_replaces_same_cycle():
    conn = _conn()
    GameRepo(conn).upsert(_game())
    TeamRepo(conn).upsert(_team())
    repo = SubmissionRepo(conn)
    first = DecisionSubmission("t1", "g1", 1, ("a", "b"), "t", Budgets(3, 2, 1))
    second = DecisionSubmission("t1", "g1", 1, ("c",), "t2", Budgets(1, 0, 0))
    repo.upsert(first)
    repo.upsert(second)
    repo.upsert(DecisionSubmission("t1", "g1", 2, (), "t3", Budgets()))
    stored = repo.list_for_game("g1")
    assert [s.cycle for s in stored] == [1, 2]
    assert stored[0] == second


def test_result_insert_round_trip_and_duplicate_rejected():
    conn = _conn()
    GameRepo(conn).upsert(_game())
    TeamRepo(conn).upsert(_team())
    repo = ResultRepo(conn)
    result = CycleResult(
        id="g1-t1-1",
        game_id="g1",
        cycle=1,
        team_id="t1",
        scores=ScoreBreakdown.from_pillars(75.0, 70.0, 80.0, 75.0),
        metrics=OperationalMetrics(
            backlog=14, dna_rate=12.3, staff_sickness=5.1, high_risk_share=35.0, incidents=1, neonatal_admissions=3
        ),
        incidents=(Incident("handover_failure", IncidentSeverity.HIGH, "Handover missed"),),
        calculated_at="2026-03-01T09:30:00+00:00",
    )
    repo.insert(result)
    assert repo.list_for_game("g1") == [result]
    with pytest.raises(sqlite3.IntegrityError):
        repo.insert(result)


def test_resolution_marker():
    conn = _conn()
    GameRepo(conn).upsert(_game())
    repo = ResolutionRepo(conn)
    assert not repo.is_resolved("g1", 1)
    repo.mark_resolved("g1", 1, "t")
    repo.mark_resolved("g1", 2, "t")
    assert repo.is_resolved("g1", 1)
    assert repo.resolved_cycles("g1") == frozenset({1, 2})
    with pytest.raises(sqlite3.IntegrityError):
        repo.mark_resolved("g1", 1, "t")


def test_readonly_connection_rejects_writes_and_missing_files(tmp_path):
    db_path = tmp_path / "game.db"
    conn = get_connection(str(db_path))
    apply_migrations(conn)
    GameRepo(conn).upsert(_game())
    conn.close()

    ro = get_readonly_connection(str(db_path))
    assert GameRepo(ro).get("g1") == _game()
    with pytest.raises(sqlite3.OperationalError):
        ro.execute("DELETE FROM games")
    ro.close()

    with pytest.raises(FileNotFoundError):
        get_readonly_connection(str(tmp_path / "missing.db"))
