"""SQLite repository for teams and their cumulative scores."""

from __future__ import annotations

import json
import sqlite3
from typing import Optional

from safebydesign.core.domain.models import ScoreBreakdown, Team


def _row_to_team(row: sqlite3.Row) -> Team:
    score = json.loads(row["cumulative_score_json"])
    return Team(
        id=row["id"],
        game_id=row["game_id"],
        name=row["name"],
        joined_at=row["joined_at"],
        cumulative_score=ScoreBreakdown(
            safety=float(score.get("safety", 0.0)),
            equity=float(score.get("equity", 0.0)),
            staff=float(score.get("staff", 0.0)),
            resilience=float(score.get("resilience", 0.0)),
            total=float(score.get("total", 0.0)),
        ),
        role_assignments=json.loads(row["role_assignments_json"] or "{}"),
    )


class TeamRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert(self, team: Team) -> None:
        score_json = json.dumps(
            team.cumulative_score.to_dict(),
            separators=(",", ":"),
            ensure_ascii=False,
        )
        roles_json = json.dumps(
            dict(sorted(team.role_assignments.items())),
            separators=(",", ":"),
            ensure_ascii=False,
        )
        self._conn.execute(
            """
            INSERT INTO teams (
                id,
                game_id,
                name,
                joined_at,
                cumulative_score_json,
                role_assignments_json
            ) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name,
                cumulative_score_json=excluded.cumulative_score_json,
                role_assignments_json=excluded.role_assignments_json
            """,
            (team.id, team.game_id, team.name, team.joined_at, score_json, roles_json),
        )

    def get(self, team_id: str) -> Optional[Team]:
        row = self._conn.execute("SELECT * FROM teams WHERE id = ?", (team_id,)).fetchone()
        return None if row is None else _row_to_team(row)

    def list_for_game(self, game_id: str) -> list[Team]:
        rows = self._conn.execute(
            "SELECT * FROM teams WHERE game_id = ? ORDER BY joined_at, rowid",
            (game_id,),
        ).fetchall()
        return [_row_to_team(row) for row in rows]
